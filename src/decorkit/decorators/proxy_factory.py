"""Dynamic proxy generation.

For every concrete type that gets decorated, a synthetic subclass is built
once and cached. The subclass overrides each public method (and each
protocol dunder the type defines itself) with a thin function that hands
the call to ``intercept``, which runs the decoration chain of the
``Decorated`` wrapper stored on the proxy instance.

Proxies are hollow shells: they are created without running the original
constructor and hold no state besides their wrapper. Attribute reads that
the synthetic type does not serve (instance data, slots, names provided by
the original's ``__getattr__``) are answered by the original; attribute
writes and deletions go to the original as well.

Because proxies are real subclasses, ``isinstance`` and ``issubclass``
checks written against the original type pass. ``type(proxy) is
type(original)`` does not.
"""

import functools
import threading
import types
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from ..decoration_exceptions import ProxyConstructionError
from ..logging import LogContext, get_logger
from .hook_result import UNHANDLED, unwrap_handled
from .method import InterceptedMethod, MethodKind

if TYPE_CHECKING:
    from .decorated import Decorated

logger = get_logger(__name__)

_DECORATED_ATTR = "__decorkit_decorated__"
_SYNTHETIC_MARKER = "__decorkit_synthetic__"

# Py_TPFLAGS_HEAPTYPE: set for classes created at runtime, clear for static C types
_HEAPTYPE_FLAG = 1 << 9

# Construction, attribute access, pickling, descriptor and finalization hooks
# belong to the shell itself and are never routed to the original.
_NEVER_INTERCEPTED = frozenset(
    {
        "__new__",
        "__init__",
        "__init_subclass__",
        "__class_getitem__",
        "__subclasshook__",
        "__mro_entries__",
        "__instancecheck__",
        "__subclasscheck__",
        "__prepare__",
        "__getattribute__",
        "__getattr__",
        "__setattr__",
        "__delattr__",
        "__del__",
        "__get__",
        "__set__",
        "__delete__",
        "__set_name__",
        "__reduce__",
        "__reduce_ex__",
        "__getstate__",
        "__setstate__",
        "__getnewargs__",
        "__getnewargs_ex__",
        "__class__",
        "__dict__",
        "__weakref__",
        "__slots__",
        "__post_init__",
        "__annotations__",
        "__annotate__",
        "__annotate_func__",
        "__type_params__",
    }
)

_METHOD_DESCRIPTORS = (functools.partialmethod, functools.singledispatchmethod)

_proxy_types: dict[type, type] = {}
_proxy_types_lock = threading.RLock()


def intercept(
    decorated: "Decorated[Any]",
    method: InterceptedMethod,
    args: tuple[Any, ...],
    kwargs: dict[str, Any],
    proxy: Any = None,
) -> Any:
    """Run the decoration chain for one call.

    Order: ``before_call``, then ``call`` or the real invocation, then
    ``after_call`` with the final result. ``UNHANDLED`` from a hook means
    the hook was not overridden. Errors raised by the original go to
    ``on_error``; if that is not overridden the original exception is
    re-raised as is. Errors raised by hooks themselves are never caught.

    Args:
        decorated: Wrapper of the object receiving the call
        method: Intercepted member
        args: Positional arguments as passed by the caller
        kwargs: Keyword arguments as passed by the caller
        proxy: Proxy that received the call, returned in place of the
            original when the original returns itself

    Returns:
        Result of the call, decorated when it belongs to the object graph
    """
    decorated.before_call(method, args, kwargs)

    outcome = decorated.call(method, args, kwargs)
    if outcome is UNHANDLED:
        try:
            result = decorated.invoke(method, args, kwargs)
        except Exception as error:
            outcome = decorated.on_error(method, args, kwargs, error)
            if outcome is UNHANDLED:
                raise
            return _decorate_result(decorated, proxy, unwrap_handled(outcome))
    else:
        result = unwrap_handled(outcome)

    result = _decorate_result(decorated, proxy, result)
    decorated.after_call(method, args, kwargs, result)
    return result


def _decorate_result(decorated: "Decorated[Any]", proxy: Any, result: Any) -> Any:
    if proxy is not None and result is decorated.get_original():
        return proxy
    return decorated.decorator.decorate_result(result)


def get_decorated(obj: Any) -> "Decorated[Any] | None":
    """Get the wrapper stored on a proxy.

    Args:
        obj: Any object

    Returns:
        The ``Decorated`` wrapper, or None if ``obj`` is not a proxy
    """
    if not type(obj).__dict__.get(_SYNTHETIC_MARKER, False):
        return None
    return object.__getattribute__(obj, "__dict__").get(_DECORATED_ATTR)


def is_decorated(obj: Any) -> bool:
    """Check whether an object is a proxy created by a decorator."""
    return get_decorated(obj) is not None


def unwrap(obj: Any) -> Any:
    """Peel every decoration layer off ``obj``.

    Args:
        obj: Proxy or plain object

    Returns:
        The innermost original; ``obj`` itself when it is not a proxy
    """
    decorated = get_decorated(obj)
    while decorated is not None:
        obj = decorated.get_original()
        decorated = get_decorated(obj)
    return obj


def create_proxy(decorated: "Decorated[Any]") -> Any:
    """Create a proxy instance for a wrapper.

    Args:
        decorated: Wrapper whose original determines the proxy type

    Returns:
        Instance of the synthetic subclass of the original's type

    Raises:
        ProxyConstructionError: If the type cannot be subclassed or the
            shell cannot be instantiated
    """
    original_type = type(decorated.get_original())
    proxy_type = get_proxy_type(original_type)

    try:
        instance = _solid_base(original_type).__new__(proxy_type)
        object.__getattribute__(instance, "__dict__")[_DECORATED_ATTR] = decorated
    except Exception as e:
        logger.error(
            "proxy_construction_failed",
            target_type=original_type.__qualname__,
            stage="instantiate",
            error=str(e),
        )
        raise ProxyConstructionError(original_type, f"{type(e).__name__}: {e}") from e

    return instance


def get_proxy_type(original_type: type) -> type:
    """Get the synthetic proxy type for ``original_type``, building it once.

    Args:
        original_type: Concrete type being decorated

    Returns:
        Cached synthetic subclass

    Raises:
        ProxyConstructionError: If the subclass cannot be created
    """
    with _proxy_types_lock:
        proxy_type = _proxy_types.get(original_type)
        if proxy_type is None:
            proxy_type = _build_proxy_type(original_type)
            _proxy_types[original_type] = proxy_type
        else:
            logger.debug("proxy_type_cached", target_type=original_type.__qualname__)
    return proxy_type


def clear_proxy_cache() -> None:
    """Forget all generated proxy types."""
    with _proxy_types_lock:
        _proxy_types.clear()


def intercepted_members(original_type: type) -> dict[str, InterceptedMethod]:
    """Collect the members a proxy of ``original_type`` overrides.

    The MRO is walked from the most derived class; the first definition of
    a name wins, and members only inherited from ``object`` are skipped.

    Args:
        original_type: Type to inspect

    Returns:
        Mapping of member name to its description
    """
    members: dict[str, InterceptedMethod] = {}
    seen: set[str] = set()

    for owner in original_type.__mro__:
        if owner is object:
            continue
        for name, value in vars(owner).items():
            if name in seen:
                continue
            seen.add(name)
            method = _classify(owner, name, value)
            if method is not None:
                members[name] = method

    return members


def _class_data_attributes(original_type: type) -> dict[str, Any]:
    attributes: dict[str, Any] = {}
    seen: set[str] = set()

    for owner in original_type.__mro__:
        if owner is object:
            continue
        for name, value in vars(owner).items():
            if name in seen:
                continue
            seen.add(name)
            if name.startswith("__") and name.endswith("__"):
                continue
            if callable(value) or hasattr(type(value), "__get__"):
                continue
            attributes[name] = value

    return attributes


def _class_callables(original_type: type) -> list[str]:
    names: list[str] = []
    seen: set[str] = set()

    for owner in original_type.__mro__:
        if owner is object:
            continue
        for name, value in vars(owner).items():
            if name in seen:
                continue
            seen.add(name)
            if name in _NEVER_INTERCEPTED:
                continue
            if isinstance(value, (classmethod, types.ClassMethodDescriptorType)):
                names.append(name)

    return names


def _is_interceptable_name(name: str) -> bool:
    if name in _NEVER_INTERCEPTED:
        return False
    if name.startswith("__") and name.endswith("__"):
        return True
    return not name.startswith("_")


def _classify(owner: type, name: str, value: Any) -> InterceptedMethod | None:
    if not _is_interceptable_name(name):
        return None
    # Class-level callables are not instance behavior
    if isinstance(value, (staticmethod, classmethod, types.ClassMethodDescriptorType, type)):
        return None
    if isinstance(value, (property, functools.cached_property)):
        if name.startswith("__"):
            return None
        return InterceptedMethod(name, owner, MethodKind.PROPERTY, value)
    # Method descriptors that are not callable themselves
    if isinstance(value, _METHOD_DESCRIPTORS) or callable(value):
        return InterceptedMethod(name, owner, MethodKind.METHOD, value)
    return None


def _method_override(method: InterceptedMethod) -> Callable[..., Any]:
    def override(self: Any, *args: Any, **kwargs: Any) -> Any:
        return intercept(_decorated_of(self), method, args, kwargs, self)

    wrapped = method.function
    if isinstance(wrapped, _METHOD_DESCRIPTORS):
        wrapped = wrapped.func
    functools.update_wrapper(override, wrapped)
    override.__name__ = method.name
    override.__qualname__ = f"{method.owner.__qualname__}.{method.name}"
    return override


def _property_override(method: InterceptedMethod) -> property:
    def getter(self: Any) -> Any:
        return intercept(_decorated_of(self), method, (), {}, self)

    return property(getter, doc=getattr(method.function, "__doc__", None))


def _decorated_of(proxy: Any) -> "Decorated[Any]":
    try:
        return object.__getattribute__(proxy, "__dict__")[_DECORATED_ATTR]
    except KeyError:
        raise AttributeError(
            f"{type(proxy).__qualname__} instance is not bound to a decorated object"
        ) from None


def _forward_getattr(self: Any, name: str) -> Any:
    decorated = _decorated_of(self)
    original = decorated.get_original()
    value = getattr(original, name)

    if (
        name.startswith("_")
        or not callable(value)
        or isinstance(value, type)
        or not decorated.decorator.settings.intercept_dynamic_attributes
    ):
        return value

    method = InterceptedMethod(name, type(original), MethodKind.DYNAMIC, value)

    @functools.wraps(value)
    def dynamic(*args: Any, **kwargs: Any) -> Any:
        return intercept(decorated, method, args, kwargs, self)

    return dynamic


def _forward_setattr(self: Any, name: str, value: Any) -> None:
    setattr(_decorated_of(self).get_original(), name, value)


def _forward_delattr(self: Any, name: str) -> None:
    delattr(_decorated_of(self).get_original(), name)


class _ForwardedAttribute:
    """Class-level data attribute whose instance reads come from the original.

    Without it the shell would answer with the class default instead of
    the value the original holds in its own ``__dict__``.
    """

    def __init__(self, name: str, default: Any) -> None:
        self.name = name
        self.default = default

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self.default
        return getattr(_decorated_of(instance).get_original(), self.name)


class _OriginalClassMember:
    """Classmethod looked up on the original type, so ``cls`` is never the proxy type."""

    def __init__(self, original_type: type, name: str) -> None:
        self.original_type = original_type
        self.name = name

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        return getattr(self.original_type, self.name)


def _release_shell(self: Any) -> None:
    # Finalizing the shell must not finalize the original
    pass


def _solid_base(original_type: type) -> type:
    for base in original_type.__mro__:
        if not base.__flags__ & _HEAPTYPE_FLAG:
            return base
    return object


def _build_proxy_type(original_type: type) -> type:
    members = intercepted_members(original_type)

    namespace: dict[str, Any] = {
        name: _ForwardedAttribute(name, default)
        for name, default in _class_data_attributes(original_type).items()
    }
    for name in _class_callables(original_type):
        namespace[name] = _OriginalClassMember(original_type, name)
    for name, method in members.items():
        if method.is_property:
            namespace[name] = _property_override(method)
        else:
            namespace[name] = _method_override(method)

    if "__eq__" in namespace and "__hash__" not in namespace:
        namespace["__hash__"] = original_type.__hash__

    namespace.update(
        {
            "__module__": original_type.__module__,
            "__qualname__": f"Decorated{original_type.__name__}",
            "__doc__": original_type.__doc__,
            "__getattribute__": object.__getattribute__,
            "__getattr__": _forward_getattr,
            "__setattr__": _forward_setattr,
            "__delattr__": _forward_delattr,
            _SYNTHETIC_MARKER: True,
        }
    )
    if getattr(original_type, "__del__", None) is not None:
        namespace["__del__"] = _release_shell

    metaclass = type(original_type)
    with LogContext(logger, target_type=original_type.__qualname__) as log:
        try:
            proxy_type = metaclass(
                f"Decorated{original_type.__name__}", (original_type,), namespace
            )
        except Exception as e:
            log.error("proxy_construction_failed", stage="subclass", error=str(e))
            raise ProxyConstructionError(original_type, f"{type(e).__name__}: {e}") from e

        log.debug("proxy_type_created", intercepted=sorted(members))
    return proxy_type
