"""decorkit - decorate any object and the object graph it produces.

A decorated object is a proxy of the same type as the original whose
public calls run through overridable hooks (``before_call``, ``call``,
``after_call``, ``on_error``).

Example:
    from decorkit import ObjectDecorator

    class Tracing(ObjectDecorator):
        def before_call(self, target, method, args, kwargs):
            print("calling", method.name)

    shape = Tracing().decorate(Rectangle(3, 4))
    shape.area()
"""

__version__ = "0.1.0"

from .base_exceptions import DecorkitException
from .config import DecorkitSettings, configure, get_settings, reset_settings
from .config_exceptions import ConfigurationError
from .decoration_exceptions import (
    DecorationException,
    InvalidArgumentError,
    ProxyConstructionError,
)
from .decorators import (
    UNHANDLED,
    Decorated,
    DefaultDecorated,
    Handled,
    InterceptedMethod,
    MethodKind,
    ObjectDecorator,
    decorates,
    get_decorated,
    is_decorated,
    unwrap,
)
from .logging import get_logger, setup_logging

__all__ = [
    "__version__",
    # Decoration
    "ObjectDecorator",
    "Decorated",
    "DefaultDecorated",
    "decorates",
    "InterceptedMethod",
    "MethodKind",
    "UNHANDLED",
    "Handled",
    "get_decorated",
    "is_decorated",
    "unwrap",
    # Exceptions
    "DecorkitException",
    "DecorationException",
    "InvalidArgumentError",
    "ProxyConstructionError",
    "ConfigurationError",
    # Configuration
    "DecorkitSettings",
    "get_settings",
    "configure",
    "reset_settings",
    # Logging
    "get_logger",
    "setup_logging",
]
