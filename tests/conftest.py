"""Shared pytest configuration and fixtures for the PiShock client test suite."""

import sys
from pathlib import Path

import pytest

# Ensure the project root is in the path for imports
PROJECT_ROOT = Path(__file__).parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "live: mark test as talking to the real PiShock API"
    )


def pytest_addoption(parser):
    parser.addoption(
        "--run-live",
        action="store_true",
        default=False,
        help="Run tests that call the real PiShock API (needs PISHOCK_* env vars)",
    )


def pytest_collection_modifyitems(config, items):
    """Skip live API tests unless --run-live is specified."""
    if config.getoption("--run-live"):
        return

    skip_live = pytest.mark.skip(reason="Need --run-live option to run")
    for item in items:
        if "live" in item.keywords:
            item.add_marker(skip_live)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove every PISHOCK_* variable so tests don't pick up real credentials."""
    import os

    for name in list(os.environ):
        if name.startswith("PISHOCK_"):
            monkeypatch.delenv(name, raising=False)
