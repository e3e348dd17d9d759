"""Hook outcomes.

Every hook of the decoration chain either produces an outcome or reports
that it was not overridden. The latter is the ``UNHANDLED`` sentinel, a
plain value rather than an exception, so "fall through to the next step"
never travels on the error channel.
"""

from dataclasses import dataclass
from typing import Any, Final, Generic, TypeVar

T = TypeVar("T")


class _Unhandled:
    """Type of the ``UNHANDLED`` sentinel."""

    _instance: "_Unhandled | None" = None

    def __new__(cls) -> "_Unhandled":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNHANDLED"

    def __reduce__(self) -> str:
        return "UNHANDLED"


UNHANDLED: Final = _Unhandled()
"""Returned by a hook that was not overridden."""


@dataclass(frozen=True)
class Handled(Generic[T]):
    """Explicit outcome of a hook that took a decision.

    Returning a bare value from ``call`` or ``on_error`` works as well;
    ``Handled`` is useful when the outcome itself may be falsy or when the
    intent should be visible at the return site.
    """

    value: T


def is_unhandled(outcome: Any) -> bool:
    """Check whether a hook outcome is the ``UNHANDLED`` sentinel."""
    return outcome is UNHANDLED


def unwrap_handled(outcome: Any) -> Any:
    """Return the value carried by a ``Handled`` outcome, or the outcome itself."""
    if isinstance(outcome, Handled):
        return outcome.value
    return outcome
