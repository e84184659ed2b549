"""HTTP transport and request bodies for the PiShock API."""

from .client import PiShockAPIClient
from .payloads import Credentials, OpCode, encode_duration

__all__ = [
    'PiShockAPIClient',
    'Credentials',
    'OpCode',
    'encode_duration',
]
