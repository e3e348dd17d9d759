"""Object decorator - the decoration policy.

Usage pattern:

1. Subclass ``ObjectDecorator`` and override some hooks:

       class LoggingDecorator(ObjectDecorator):
           def before_call(self, target, method, args, kwargs):
               logger.debug("before_call", method=str(method), args=args)

           def after_call(self, target, method, args, kwargs, result):
               logger.debug("after_call", method=str(method), result=result)

2. Decorate an object and use the result instead of the original:

       driver = LoggingDecorator().decorate(RemoteDriver(...))
       driver.get("http://example.com/")

Every call on ``driver`` then flows through the hooks. Objects returned by
intercepted calls are decorated with the same policy when their type is a
known capability type, so a single policy covers the whole object graph
reachable from the root.

Two customization styles can be combined:

* override ``before_call``, ``call``, ``after_call`` and ``on_error`` to
  change every decorated object at once;
* mark a factory method with ``@decorates(SomeType)`` (or call
  ``register_capability``) to give one capability type its own
  ``Decorated`` subclass.

Decorators stack: ``Outer().decorate(Inner().decorate(original))`` runs the
outer chain first and the inner chain from the outer fallback invocation.
"""

import warnings
from collections.abc import Callable
from typing import Any, ClassVar, Generic, TypeVar

from ..config import DecorkitSettings, get_settings
from ..decoration_exceptions import DecorationException, InvalidArgumentError
from ..logging import get_logger
from .capability import get_decorated_types
from .decorated import Decorated, DefaultDecorated
from .hook_result import UNHANDLED
from .method import InterceptedMethod
from .proxy_factory import create_proxy, get_decorated

logger = get_logger(__name__)

T = TypeVar("T")

DecoratedFactory = Callable[[Any], Decorated[Any]]


class ObjectDecorator(Generic[T]):
    """Decoration policy for an object and the graph of objects it produces.

    One instance belongs to one decoration session: it remembers the root
    wrapper created by the last ``decorate`` call, so reusing an instance
    for an unrelated object graph replaces that reference.

    Hooks return ``UNHANDLED`` when not overridden. ``call`` and
    ``on_error`` supply a result by returning anything else (a bare value
    or ``Handled(value)``).
    """

    _factories: ClassVar[dict[type, str]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        factories: dict[type, str] = {}
        for klass in reversed(cls.__mro__):
            for name, value in vars(klass).items():
                for capability_type in get_decorated_types(value):
                    factories[capability_type] = name
        cls._factories = factories

    def __init__(
        self,
        settings: DecorkitSettings | None = None,
        capability_types: tuple[type, ...] = (),
        target_type: type | None = None,
    ) -> None:
        """Initialize the decorator.

        Args:
            settings: Settings to use instead of the global ones
            capability_types: Types whose instances are decorated with the
                default wrapper when returned from intercepted calls
            target_type: Ignored, kept for callers of the old signature
        """
        if target_type is not None:
            warnings.warn(
                "ObjectDecorator(target_type=...) is deprecated and ignored",
                DeprecationWarning,
                stacklevel=2,
            )

        self.settings = settings or get_settings()
        self._registry: dict[type, DecoratedFactory | None] = {}
        self._decorated: Decorated[T] | None = None

        for capability_type in capability_types:
            self.register_capability(capability_type)

    def decorate(self, original: T) -> T:
        """Create a decorated stand-in for ``original``.

        The returned proxy is an instance of a subclass of the original's
        type. The wrapper created for it becomes the root returned by
        ``get_decorated_driver``, replacing any previous root.

        Args:
            original: Object to decorate

        Returns:
            Proxy routing every public call through the hooks

        Raises:
            InvalidArgumentError: If ``original`` is None
            ProxyConstructionError: If no proxy can be built for its type
        """
        if original is None:
            raise InvalidArgumentError("original", "cannot decorate None")

        decorated = self.create_decorated(original)
        proxy = create_proxy(decorated)

        if self._decorated is not None:
            logger.debug(
                "decorated_root_replaced",
                previous=repr(self._decorated),
                current=repr(decorated),
            )
        self._decorated = decorated
        return proxy

    def get_decorated_driver(self) -> Decorated[T] | None:
        """Return the wrapper of the most recently decorated root object."""
        return self._decorated

    def register_capability(
        self, capability_type: type, factory: DecoratedFactory | None = None
    ) -> None:
        """Make ``capability_type`` a known capability type of this policy.

        Args:
            capability_type: Type whose instances join the decorated graph
            factory: Builds the wrapper for an original of that type;
                the default wrapper is used when omitted
        """
        if not isinstance(capability_type, type):
            raise InvalidArgumentError(
                "capability_type", f"expected a type, got {capability_type!r}"
            )
        self._registry[capability_type] = factory
        logger.debug(
            "capability_registered",
            capability_type=capability_type.__qualname__,
            custom_factory=factory is not None,
        )

    def capability_types(self) -> tuple[type, ...]:
        """Return every type this policy decorates when it shows up as a result."""
        known = dict.fromkeys(type(self)._factories)
        known.update(dict.fromkeys(self._registry))
        return tuple(known)

    def create_decorated(self, original: Any) -> Decorated[Any]:
        """Create the wrapper for ``original``.

        Dispatches on the type of ``original``: the most specific factory
        registered for a class on its MRO wins, instance registrations
        before ``@decorates`` methods. Without a match the default wrapper
        is created. Used for the root and for every derived object.

        Args:
            original: Object to wrap

        Returns:
            Wrapper owned by this policy
        """
        factory = self._find_factory(type(original))
        if factory is None:
            return self.create_default_decorated(original)

        decorated = factory(original)
        if not isinstance(decorated, Decorated):
            raise DecorationException(
                f"Factory for '{type(original).__qualname__}' returned "
                f"{type(decorated).__qualname__}, expected a Decorated",
                error_code="INVALID_FACTORY_RESULT",
                context={"original_type": type(original).__qualname__},
            )
        return decorated

    def create_default_decorated(self, original: Any) -> Decorated[Any]:
        """Create the generic wrapper used when no specific factory applies."""
        return DefaultDecorated(original, self)

    def _find_factory(self, original_type: type) -> DecoratedFactory | None:
        factories = type(self)._factories
        for klass in original_type.__mro__:
            if klass in self._registry:
                return self._registry[klass]
            name = factories.get(klass)
            if name is not None:
                return getattr(self, name)
        return None

    def decorate_result(self, value: Any) -> Any:
        """Decorate a value returned by an intercepted call.

        Instances of known capability types are decorated with this policy;
        lists and tuples are handled element-wise and come back as the same
        object when none of their items needed decorating. Proxies already owned by
        this policy and any other value are returned unchanged.

        Args:
            value: Result of an intercepted call

        Returns:
            The value, decorated where it belongs to the object graph
        """
        if not self.settings.decorate_results:
            return value
        return self._decorate_value(value)

    def _decorate_value(self, value: Any) -> Any:
        capability_types = self.capability_types()
        if value is None or not capability_types:
            return value

        decorated = get_decorated(value)
        if decorated is not None and decorated.decorator is self:
            return value

        if type(value) in (list, tuple):
            items = [self._decorate_value(item) for item in value]
            # Keep the original container when nothing in it was decorated
            if all(new is old for new, old in zip(items, value)):
                return value
            return type(value)(items)

        if isinstance(value, capability_types):
            return create_proxy(self.create_decorated(value))

        return value

    # Hooks

    def before_call(
        self,
        target: Decorated[Any],
        method: InterceptedMethod,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Any:
        """Run before the call; the return value is ignored."""
        return UNHANDLED

    def call(
        self,
        target: Decorated[Any],
        method: InterceptedMethod,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
    ) -> Any:
        """Replace the real invocation.

        Anything other than ``UNHANDLED`` becomes the result and the
        original method is not invoked.
        """
        return UNHANDLED

    def after_call(
        self,
        target: Decorated[Any],
        method: InterceptedMethod,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
        result: Any,
    ) -> Any:
        """Run after a result was obtained from either path; return value ignored."""
        return UNHANDLED

    def on_error(
        self,
        target: Decorated[Any],
        method: InterceptedMethod,
        args: tuple[Any, ...],
        kwargs: dict[str, Any],
        error: Exception,
    ) -> Any:
        """Handle an error raised by the original method.

        Return a substitute result or raise. ``UNHANDLED`` lets ``error``
        propagate unchanged.
        """
        return UNHANDLED
