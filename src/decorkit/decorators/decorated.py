"""Decorated wrappers - pair one original object with its decoration policy.

A wrapper exposes the policy's hook chain for a single object of the graph
and owns the fallback path that performs the real call on the original.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from .method import InterceptedMethod
from .proxy_factory import get_decorated

if TYPE_CHECKING:
    from .object_decorator import ObjectDecorator

T = TypeVar("T")


class Decorated(ABC, Generic[T]):
    """Contract between a proxy and the hook chain of one decorated object."""

    @abstractmethod
    def get_original(self) -> T:
        """Return the wrapped original object."""

    @property
    @abstractmethod
    def decorator(self) -> "ObjectDecorator[Any]":
        """Policy that owns this wrapper."""

    @abstractmethod
    def before_call(
        self, method: InterceptedMethod, args: tuple[Any, ...], kwargs: dict[str, Any]
    ) -> Any: ...

    @abstractmethod
    def call(
        self, method: InterceptedMethod, args: tuple[Any, ...], kwargs: dict[str, Any]
    ) -> Any: ...

    @abstractmethod
    def after_call(
        self,
        method: InterceptedMethod,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
        result: Any,
    ) -> Any: ...

    @abstractmethod
    def on_error(
        self,
        method: InterceptedMethod,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
        error: Exception,
    ) -> Any: ...

    @abstractmethod
    def invoke(
        self, method: InterceptedMethod, args: tuple[Any, ...], kwargs: dict[str, Any]
    ) -> Any:
        """Perform the real call on the original object."""


class DefaultDecorated(Decorated[T]):
    """Standard wrapper delegating every hook to the owning policy.

    Subclass it to change the behavior of one kind of object only, and
    return the subclass from a factory method of the policy:

        class JavaScriptClickElement(DefaultDecorated[Element]):
            def call(self, method, args, kwargs):
                if method.name == "click":
                    root = self.decorator.get_decorated_driver().get_original()
                    return root.execute_script("arguments[0].click()", self.get_original())
                return super().call(method, args, kwargs)

    Hooks that are not overridden anywhere return ``UNHANDLED`` and the
    chain falls through to the next step.
    """

    def __init__(self, original: T, decorator: "ObjectDecorator[Any]") -> None:
        """Initialize the wrapper.

        Args:
            original: Object being decorated; never closed or disposed here
            decorator: Owning policy
        """
        self._original = original
        self._decorator = decorator

    def get_original(self) -> T:
        return self._original

    @property
    def decorator(self) -> "ObjectDecorator[Any]":
        return self._decorator

    def before_call(
        self, method: InterceptedMethod, args: tuple[Any, ...], kwargs: dict[str, Any]
    ) -> Any:
        return self._decorator.before_call(self, method, args, kwargs)

    def call(
        self, method: InterceptedMethod, args: tuple[Any, ...], kwargs: dict[str, Any]
    ) -> Any:
        return self._decorator.call(self, method, args, kwargs)

    def after_call(
        self,
        method: InterceptedMethod,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
        result: Any,
    ) -> Any:
        return self._decorator.after_call(self, method, args, kwargs, result)

    def on_error(
        self,
        method: InterceptedMethod,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
        error: Exception,
    ) -> Any:
        return self._decorator.on_error(self, method, args, kwargs, error)

    def invoke(
        self, method: InterceptedMethod, args: tuple[Any, ...], kwargs: dict[str, Any]
    ) -> Any:
        """Call ``method`` on the original.

        Proxies among the arguments are replaced by the objects they wrap,
        so the original only ever sees undecorated collaborators. Errors
        raised by the original propagate unchanged.
        """
        if self._decorator.settings.unwrap_arguments:
            args = tuple(_unwrap_argument(arg) for arg in args)
            kwargs = {name: _unwrap_argument(value) for name, value in kwargs.items()}
        return method.invoke(self._original, args, kwargs)

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if not isinstance(other, DefaultDecorated):
            return NotImplemented
        return bool(self._original == other._original)

    def __hash__(self) -> int:
        try:
            return hash(self._original)
        except TypeError:
            return id(self._original)

    def __repr__(self) -> str:
        return f"Decorated {{{self._original!r}}}"


def _unwrap_argument(value: Any) -> Any:
    decorated = get_decorated(value)
    if decorated is not None:
        return decorated.get_original()
    if type(value) in (list, tuple):
        items = [_unwrap_argument(item) for item in value]
        # Containers without proxies reach the original as the caller's object
        if all(new is old for new, old in zip(items, value)):
            return value
        return type(value)(items)
    return value
