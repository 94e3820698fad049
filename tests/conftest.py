# tests/conftest.py

"""Shared pytest fixtures for all catalog client tests."""

from collections.abc import Generator
from unittest.mock import patch

import pytest


@pytest.fixture(autouse=True)
def block_network() -> Generator[None, None, None]:
    """Fail loudly if a test reaches a real curl_cffi session."""
    with patch(
        "curl_cffi.requests.AsyncSession.request",
        side_effect=AssertionError("Real HTTP request attempted in test"),
    ):
        yield

