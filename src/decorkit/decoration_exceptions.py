"""Decoration exceptions.

This module contains exceptions raised while decorating objects:
rejected arguments and failures to build the synthetic proxy type.
"""

from typing import Any

from .base_exceptions import DecorkitException


class DecorationException(DecorkitException):
    """Base exception for decoration errors."""

    pass


class InvalidArgumentError(DecorationException, ValueError):
    """Raised when a decoration entry point receives an unusable argument."""

    def __init__(self, argument: str, reason: str, **kwargs: Any) -> None:
        """Initialize with argument details."""
        super().__init__(
            f"Invalid argument '{argument}': {reason}",
            error_code="INVALID_ARGUMENT",
            context={"argument": argument, "reason": reason, **kwargs},
        )
        self.argument = argument


class ProxyConstructionError(DecorationException):
    """Raised when a proxy type cannot be generated or instantiated.

    There is no degraded fallback: the caller of ``decorate`` gets this
    error instead of a proxy.
    """

    def __init__(self, target_type: type, reason: str, **kwargs: Any) -> None:
        """Initialize with the type that could not be proxied."""
        super().__init__(
            f"Cannot create proxy for '{target_type.__qualname__}': {reason}",
            error_code="PROXY_CONSTRUCTION_FAILED",
            context={"target_type": target_type.__qualname__, "reason": reason, **kwargs},
        )
        self.target_type = target_type
