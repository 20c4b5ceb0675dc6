"""Hook system core module.

This module provides the extensibility kernel of presshooks: a
write-once registry of hook declarations and an engine that lets
plugins register prioritized action and filter callbacks which host
code dispatches at fixed extension points.

IMPORTANT: This is a STABLE API CONTRACT. The public interfaces in
           this module should not have breaking changes.

Example usage:
    from presshooks.core.hooks import CoreHook, create_hook_engine

    engine = create_hook_engine()

    @engine.hook.filter(CoreHook.SVC_POST_GET_RESULT, priority=20)
    def add_reading_time(post):
        post["reading_time"] = len(post["content"].split()) // 200
        return post

    post = await engine.apply_filters(CoreHook.SVC_POST_GET_RESULT, post)
"""

from presshooks.core.hooks.callback_store import CallbackEntry
from presshooks.core.hooks.exceptions import (
    CallbackError,
    DuplicateHookError,
    HookArityError,
    HookError,
    HookKindError,
    UnknownHookError,
)
from presshooks.core.hooks.hook_catalog import (
    CORE_HOOKS,
    CoreHook,
    declare_core_hooks,
    get_all_core_hooks,
)
from presshooks.core.hooks.hook_decorator import HookDecorator
from presshooks.core.hooks.hook_engine import HookEngine, create_hook_engine
from presshooks.core.hooks.hook_registry import HookKind, HookRegistry, HookSpec

__all__ = [
    # Engine
    "HookEngine",
    "create_hook_engine",
    "CallbackEntry",
    # Registry
    "HookRegistry",
    "HookSpec",
    "HookKind",
    # Decorator
    "HookDecorator",
    # Catalog
    "CoreHook",
    "CORE_HOOKS",
    "declare_core_hooks",
    "get_all_core_hooks",
    # Errors
    "HookError",
    "DuplicateHookError",
    "UnknownHookError",
    "HookKindError",
    "HookArityError",
    "CallbackError",
]
