"""Capability marker - declares which types a factory method decorates."""

from collections.abc import Callable
from typing import Any

_DECORATES_ATTR = "_decorates_types"


def decorates(*types: type) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Mark an ``ObjectDecorator`` method as the factory for capability types.

    The marked method receives the original object and returns a
    ``Decorated`` for it. Every type named here also becomes a known
    capability type, so instances returned from intercepted calls are
    decorated with the same policy.

    Example usage:
        class WaitingDecorator(ObjectDecorator):
            @decorates(Element)
            def create_element_decorated(self, original):
                return WaitingElement(original, self)

    Args:
        *types: Capability types handled by the factory

    Returns:
        Decorator function
    """
    if not types:
        raise TypeError("decorates() requires at least one type")
    for type_ in types:
        if not isinstance(type_, type):
            raise TypeError(f"decorates() expects types, got {type_!r}")

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        setattr(func, _DECORATES_ATTR, tuple(types))
        return func

    return decorator


def get_decorated_types(obj: Any) -> tuple[type, ...]:
    """Get the capability types declared on a factory method.

    Args:
        obj: Function to inspect

    Returns:
        Declared types, empty if ``obj`` is not marked
    """
    return getattr(obj, _DECORATES_ATTR, ())
