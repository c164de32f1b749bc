"""
Pytest configuration for coframe tests.

Provides fixtures for capturing loguru records and toggling debug tracing.
"""

from typing import Any

import pytest
from loguru import logger

from coframe import configure, settings


@pytest.fixture
def log_records() -> list[dict[str, Any]]:
    """Collect every loguru record emitted while the test runs."""
    records: list[dict[str, Any]] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)


@pytest.fixture
def debug_tracing():
    previous = settings.debug
    configure(debug=True)
    yield settings
    configure(debug=previous)
