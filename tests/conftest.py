"""Pytest configuration and fixtures."""

import pytest

from decorkit.config import reset_settings
from decorkit.decorators import clear_proxy_cache


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    """Use the test settings profile and drop cached state between tests."""
    monkeypatch.setenv("DECORKIT_ENV", "test")
    monkeypatch.delenv("DECORKIT_DISABLE_CONSOLE_LOGGING", raising=False)
    for name in (
        "DECORKIT_DECORATE_RESULTS",
        "DECORKIT_UNWRAP_ARGUMENTS",
        "DECORKIT_INTERCEPT_DYNAMIC_ATTRIBUTES",
    ):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    clear_proxy_cache()
    yield
    reset_settings()
    clear_proxy_cache()


@pytest.fixture
def trace():
    """Provide an empty call log."""
    return []
