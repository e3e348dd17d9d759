"""Description of an intercepted member, handed to every hook."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class MethodKind(Enum):
    """How an intercepted member is reached on the original object."""

    METHOD = "method"
    """Regular method defined on the original's type."""

    PROPERTY = "property"
    """Property (or cached property) read."""

    DYNAMIC = "dynamic"
    """Callable served at runtime, e.g. by the original's ``__getattr__``."""


@dataclass(frozen=True)
class InterceptedMethod:
    """Identity of an intercepted member.

    Hooks compare ``method.name`` to decide what to do; ``owner`` is the
    class on the original type's MRO that defines the member.
    """

    name: str
    owner: type
    kind: MethodKind = MethodKind.METHOD
    function: Any = field(default=None, compare=False, repr=False)

    @property
    def is_property(self) -> bool:
        return self.kind is MethodKind.PROPERTY

    def invoke(self, target: Any, args: tuple[Any, ...], kwargs: dict[str, Any]) -> Any:
        """Perform the real call on ``target``.

        Args:
            target: Object that receives the call (normally the original)
            args: Positional arguments
            kwargs: Keyword arguments

        Returns:
            Whatever the member returns; the attribute value for properties
        """
        if self.kind is MethodKind.PROPERTY:
            return getattr(target, self.name)
        return getattr(target, self.name)(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.owner.__qualname__}.{self.name}"
