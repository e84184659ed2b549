"""Fixtures shared by the unit tests."""

import pytest

from tests.infrastructure.mock_api import MockPiShockAPI


@pytest.fixture
def mock_api() -> MockPiShockAPI:
    """A fresh mock PiShock API; start it with ``serve(mock_api)``."""
    return MockPiShockAPI()
