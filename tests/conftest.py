"""Pytest configuration and fixtures shared across all test modules.

Environment defaults are set before any import that might load settings.
"""

import os

import pytest

os.environ.setdefault("APP_ENV", "testing")
os.environ.setdefault("APP_SEED_TASKS", "true")
os.environ.setdefault("APP_RATE_LIMIT_ENABLED", "false")
os.environ.setdefault("LOG_LEVEL", "WARNING")

from fastapi.testclient import TestClient  # noqa: E402

from taskgate.core.app_factory import create_app  # noqa: E402


@pytest.fixture
def client() -> TestClient:
    """Test client bound to a freshly seeded application."""
    return TestClient(create_app())
