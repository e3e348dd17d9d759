"""Configuration management for decorkit using pydantic-settings.

Settings are read from environment variables prefixed with ``DECORKIT_``
and from an optional ``.env`` file, with type validation.
"""

import os
from pathlib import Path
from typing import Any, Literal

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings

from ..config_exceptions import ConfigurationError


class DecorkitSettings(BaseSettings):
    """Main configuration settings for decorkit."""

    # Decoration behavior
    decorate_results: bool = Field(
        True, description="Decorate return values that are known capability types"
    )
    unwrap_arguments: bool = Field(
        True, description="Pass originals instead of proxies to the real methods"
    )
    intercept_dynamic_attributes: bool = Field(
        True, description="Route callables served by the original's __getattr__ through the hooks"
    )

    # Logging
    debug_mode: bool = Field(False, description="Enable debug logging")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        "INFO", description="Log level used when logging is initialized lazily"
    )
    structured_logging: bool = Field(False, description="Render log events as JSON")
    log_path: Path | None = Field(None, description="Directory for log files")

    class Config:
        """Pydantic configuration."""

        env_file = ".env"
        env_prefix = "DECORKIT_"
        case_sensitive = False
        extra = "ignore"

    @property
    def effective_log_level(self) -> str:
        """Log level after applying debug mode."""
        return "DEBUG" if self.debug_mode else self.log_level


class DevelopmentSettings(DecorkitSettings):
    """Development-specific settings."""

    debug_mode: bool = True

    class Config:
        env_file = ".env.development"
        env_prefix = "DECORKIT_"
        extra = "ignore"


class TestSettings(DecorkitSettings):
    """Test-specific settings."""

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"

    class Config:
        env_file = ".env.test"
        env_prefix = "DECORKIT_"
        extra = "ignore"


# Singleton instance
_settings: DecorkitSettings | None = None

_PROFILES: dict[str, type[DecorkitSettings]] = {
    "development": DevelopmentSettings,
    "test": TestSettings,
    "production": DecorkitSettings,
}


def _build_settings(settings_class: type[DecorkitSettings], **overrides: Any) -> DecorkitSettings:
    try:
        return settings_class(**overrides)
    except ValidationError as e:
        error = e.errors()[0]
        key = ".".join(str(part) for part in error.get("loc", ())) or settings_class.__name__
        raise ConfigurationError(key, error.get("msg", str(e))) from e


def get_settings(env: str | None = None) -> DecorkitSettings:
    """Get the singleton settings instance.

    Args:
        env: Environment name ('development', 'production', 'test').
             Defaults to the DECORKIT_ENV environment variable.

    Returns:
        DecorkitSettings instance

    Raises:
        ConfigurationError: If the environment name or a setting is invalid
    """
    global _settings

    if _settings is None:
        env_name = env or os.getenv("DECORKIT_ENV", "production")
        settings_class = _PROFILES.get(env_name)
        if settings_class is None:
            raise ConfigurationError(
                "DECORKIT_ENV", f"unknown environment '{env_name}'", known=sorted(_PROFILES)
            )
        _settings = _build_settings(settings_class)

    return _settings


def configure(**overrides: Any) -> DecorkitSettings:
    """Replace the singleton with settings built from explicit values.

    Args:
        **overrides: Field values taking precedence over the environment

    Returns:
        The new settings instance
    """
    global _settings

    settings_class = type(_settings) if _settings is not None else DecorkitSettings
    _settings = _build_settings(settings_class, **overrides)
    return _settings


def reset_settings() -> None:
    """Reset the settings singleton (mainly for testing)."""
    global _settings
    _settings = None
