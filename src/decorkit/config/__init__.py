"""Configuration package.

Usage:
    from decorkit.config import get_settings, configure

    settings = get_settings()
    configure(decorate_results=False)
"""

from .settings import (
    DecorkitSettings,
    DevelopmentSettings,
    TestSettings,
    configure,
    get_settings,
    reset_settings,
)

__all__ = [
    "DecorkitSettings",
    "DevelopmentSettings",
    "TestSettings",
    "configure",
    "get_settings",
    "reset_settings",
]
