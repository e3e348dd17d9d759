"""Decorators package - object decoration through runtime-generated proxies.

Provides the decoration policy, the per-object wrappers and the proxy
generator that ties them to arbitrary runtime types.
"""

from .capability import decorates, get_decorated_types
from .decorated import Decorated, DefaultDecorated
from .hook_result import UNHANDLED, Handled, is_unhandled, unwrap_handled
from .method import InterceptedMethod, MethodKind
from .object_decorator import ObjectDecorator
from .proxy_factory import (
    clear_proxy_cache,
    create_proxy,
    get_decorated,
    get_proxy_type,
    intercept,
    intercepted_members,
    is_decorated,
    unwrap,
)

__all__ = [
    # Policy
    "ObjectDecorator",
    "decorates",
    "get_decorated_types",
    # Wrappers
    "Decorated",
    "DefaultDecorated",
    # Hook outcomes
    "UNHANDLED",
    "Handled",
    "is_unhandled",
    "unwrap_handled",
    # Methods
    "InterceptedMethod",
    "MethodKind",
    # Proxies
    "create_proxy",
    "get_proxy_type",
    "clear_proxy_cache",
    "intercept",
    "intercepted_members",
    "get_decorated",
    "is_decorated",
    "unwrap",
]
