"""Shared test configuration and pytest markers."""

import pytest

from api.router import limiter


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "integration: calls real external APIs (needs keys and network)"
    )


@pytest.fixture(autouse=True)
def _disable_rate_limits():
    """Rate limits are per-process; keep them out of the way of repeated test calls."""
    limiter.enabled = False
    yield
    limiter.enabled = True
