"""Configuration exceptions."""

from .base_exceptions import DecorkitException


class ConfigurationError(DecorkitException):
    """Raised when configuration is invalid."""

    def __init__(self, config_key: str, reason: str, **kwargs) -> None:
        """Initialize with configuration details."""
        super().__init__(
            f"Configuration error for '{config_key}': {reason}",
            error_code="CONFIGURATION_ERROR",
            context={"config_key": config_key, "reason": reason, **kwargs},
        )
