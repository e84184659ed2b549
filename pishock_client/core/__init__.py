"""Configuration, errors, logging and retry helpers shared by the client."""
