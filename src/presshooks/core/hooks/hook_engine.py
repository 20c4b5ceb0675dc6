"""Hook engine - callback registration and dispatch.

The HookEngine owns all hook state of an application: the hook
registry, the callback store with its priority index, and the open
dispatch frames. Construct one at boot and hand it to every
collaborator that registers or dispatches hooks.

Dispatch walks priorities in ascending order and, within a priority,
callbacks in registration order. Callbacks may register or remove
callbacks and dispatch hooks themselves while a dispatch is in flight;
see presshooks.core.hooks.iteration for the exact traversal rules.

Example:
    engine = create_hook_engine()

    engine.add_filter("svc.post.get:filter:result", redact_post, priority=20)
    post = await engine.apply_filters("svc.post.get:filter:result", post)

    engine.add_action("server:started", announce)
    await engine.do_action("server:started", {"port": 8000})
"""

import asyncio
import inspect
from contextlib import contextmanager
from typing import Any, Awaitable, Iterator, Optional, Union

from presshooks.core.config import Settings, get_settings
from presshooks.core.hooks.callback_store import (
    Callback,
    CallbackEntry,
    CallbackStore,
    HookCallbacks,
    natural_arity,
)
from presshooks.core.hooks.exceptions import (
    CallbackError,
    HookArityError,
    HookError,
)
from presshooks.core.hooks.hook_catalog import declare_core_hooks
from presshooks.core.hooks.hook_decorator import HookDecorator
from presshooks.core.hooks.hook_registry import (
    HookKind,
    HookRef,
    HookRegistry,
    HookSpec,
    hook_name_of,
)
from presshooks.core.hooks.iteration import IterationController, IterationFrame
from presshooks.core.logging import get_logger

logger = get_logger(__name__)


class HookEngine:
    """Registration and dispatch of action and filter callbacks.

    Attributes:
        registry: Catalog of declared hooks.
        settings: Settings supplying the default priority and arity mode.
        hook: Decorator API bound to this engine.
    """

    def __init__(
        self,
        registry: Optional[HookRegistry] = None,
        settings: Optional[Settings] = None,
    ) -> None:
        """Initialize the engine.

        Args:
            registry: Hook registry to validate names against. A fresh,
                empty registry is created when omitted.
            settings: Optional settings instance. Loaded from the
                environment when omitted.
        """
        self.registry = registry if registry is not None else HookRegistry()
        self.settings = settings if settings is not None else get_settings()
        self.hook = HookDecorator(self)
        self._store = CallbackStore()
        self._iterations = IterationController()
        self._uncollected = False
        self._background: set[asyncio.Task] = set()

    @property
    def nesting_level(self) -> int:
        """Number of dispatches currently in flight."""
        return self._iterations.nesting_level

    # =========================================================================
    # Registration
    # =========================================================================

    def add_action(
        self,
        hook_name: HookRef,
        callback: Callback,
        priority: Optional[int] = None,
        accepted_args: Optional[int] = None,
    ) -> None:
        """Register a callback on an action hook.

        Args:
            hook_name: Declared action hook.
            callback: Sync or async callable.
            priority: Lower runs earlier. Defaults to settings.default_priority.
            accepted_args: Positional arguments to pass. Defaults to the
                callback's own positional parameter count.

        Raises:
            UnknownHookError: If the hook is not declared.
            HookKindError: If the hook is a filter.
        """
        self._add(HookKind.ACTION, hook_name, callback, priority, accepted_args)

    def add_filter(
        self,
        hook_name: HookRef,
        callback: Callback,
        priority: Optional[int] = None,
        accepted_args: Optional[int] = None,
    ) -> None:
        """Register a callback on a filter hook.

        The callback receives the current value followed by the extra
        dispatch arguments and must return the new value.

        Raises:
            UnknownHookError: If the hook is not declared.
            HookKindError: If the hook is an action.
        """
        self._add(HookKind.FILTER, hook_name, callback, priority, accepted_args)

    def remove_action(
        self, hook_name: HookRef, callback: Callback, priority: Optional[int] = None
    ) -> bool:
        """Remove a callback from an action hook at one priority.

        Returns:
            True if a registration was removed.
        """
        return self._remove(HookKind.ACTION, hook_name, callback, priority)

    def remove_filter(
        self, hook_name: HookRef, callback: Callback, priority: Optional[int] = None
    ) -> bool:
        """Remove a callback from a filter hook at one priority.

        Returns:
            True if a registration was removed.
        """
        return self._remove(HookKind.FILTER, hook_name, callback, priority)

    def has_action(
        self, hook_name: Optional[HookRef] = None, callback: Optional[Callback] = None
    ) -> Union[bool, int]:
        """Query action registrations.

        With no arguments, reports whether any callback is registered on
        any hook. With only a hook, whether that hook has callbacks. With
        a callback, the priority it is registered at or False. Note that
        priority 0 is falsy: compare the result with ``is False``.
        """
        return self._has(HookKind.ACTION, hook_name, callback)

    def has_filter(
        self, hook_name: Optional[HookRef] = None, callback: Optional[Callback] = None
    ) -> Union[bool, int]:
        """Query filter registrations. Same contract as has_action()."""
        return self._has(HookKind.FILTER, hook_name, callback)

    def has_filters(self) -> bool:
        """Whether any filter hook has at least one callback."""
        return any(
            self.registry.lookup(name).is_filter for name in self._store.hook_names()
        )

    def remove_all_callbacks(
        self, priority: Optional[int] = None, hook_name: Optional[HookRef] = None
    ) -> None:
        """Remove callbacks in bulk.

        Args:
            priority: Only clear this priority level. Every level when None.
            hook_name: Only clear this hook. Every hook when None.

        Raises:
            UnknownHookError: If hook_name is given but not declared.
        """
        if hook_name is not None:
            targets = [self._store.for_hook(self.registry.lookup(hook_name).name)]
        else:
            targets = [self._store.for_hook(name) for name in self._store.hook_names()]

        for callbacks in targets:
            if callbacks.clear(priority):
                self._uncollected = True
                self._resync(callbacks)
        self._collect()

        logger.debug(
            "Callbacks cleared",
            hook_name=hook_name_of(hook_name) if hook_name is not None else None,
            priority=priority,
            hook_count=len(targets),
        )

    def get_callbacks(self, hook_name: HookRef) -> list[tuple[int, CallbackEntry]]:
        """List (priority, entry) pairs of a hook in dispatch order."""
        callbacks = self._store.get(self.registry.lookup(hook_name).name)
        return list(callbacks.entries()) if callbacks is not None else []

    # =========================================================================
    # Dispatch
    # =========================================================================

    def apply_filters_sync(self, hook_name: HookRef, value: Any, *args: Any) -> Any:
        """Run a filter hook synchronously and return the filtered value.

        Each callback's return value replaces the current value, None
        included. With no callbacks the value is returned unchanged.

        Raises:
            UnknownHookError: If the hook is not declared.
            HookKindError: If the hook is an action.
            CallbackError: If a callback raises or returns an awaitable.
        """
        spec, callbacks = self._prepare(HookKind.FILTER, hook_name, 1 + len(args))
        if callbacks is None:
            return value

        with self._dispatching(spec, callbacks) as frame:
            for priority, entry in self._walk(frame, callbacks):
                value = self._invoke_sync(spec, priority, entry, (value, *args))
        return value

    async def apply_filters(self, hook_name: HookRef, value: Any, *args: Any) -> Any:
        """Run a filter hook, awaiting each callback before the next.

        Raises:
            UnknownHookError: If the hook is not declared.
            HookKindError: If the hook is an action.
            CallbackError: If a callback raises.
        """
        spec, callbacks = self._prepare(HookKind.FILTER, hook_name, 1 + len(args))
        if callbacks is None:
            return value

        with self._dispatching(spec, callbacks) as frame:
            for priority, entry in self._walk(frame, callbacks):
                value = await self._invoke(spec, priority, entry, (value, *args))
        return value

    async def do_action(self, hook_name: HookRef, *args: Any) -> None:
        """Run an action hook, awaiting each callback before the next.

        Raises:
            UnknownHookError: If the hook is not declared.
            HookKindError: If the hook is a filter.
            CallbackError: If a callback raises. Remaining callbacks are
                skipped.
        """
        spec, callbacks = self._prepare(HookKind.ACTION, hook_name, len(args))
        if callbacks is None:
            return

        with self._dispatching(spec, callbacks) as frame:
            for priority, entry in self._walk(frame, callbacks):
                await self._invoke(spec, priority, entry, args)

    def do_action_sync(self, hook_name: HookRef, *args: Any) -> None:
        """Run an action hook from code that cannot await.

        Callback failures are logged and the remaining callbacks still
        run. Async callbacks are scheduled on the running event loop, or
        run to completion when no loop is running.

        Raises:
            UnknownHookError: If the hook is not declared.
            HookKindError: If the hook is a filter.
        """
        spec, callbacks = self._prepare(HookKind.ACTION, hook_name, len(args))
        if callbacks is None:
            return

        with self._dispatching(spec, callbacks) as frame:
            for priority, entry in self._walk(frame, callbacks):
                try:
                    result = entry.call(args)
                except Exception as e:
                    logger.error(
                        "Action callback failed",
                        hook_name=spec.name,
                        priority=priority,
                        callback=entry.name,
                        error=str(e),
                        exc_info=True,
                    )
                    continue

                if inspect.isawaitable(result):
                    self._run_detached(spec, priority, entry, result)

    def current_priority(self) -> Union[int, bool]:
        """Priority being run by the innermost open dispatch, or False."""
        frame = self._iterations.current_frame()
        if frame is None or frame.current_priority is None:
            return False
        return frame.current_priority

    def doing_action(self, hook_name: Optional[HookRef] = None) -> bool:
        """Whether an action dispatch (optionally of one hook) is in flight."""
        frames = self._iterations.frames(
            hook_name_of(hook_name) if hook_name is not None else None
        )
        return any(frame.kind is HookKind.ACTION for frame in frames)

    # =========================================================================
    # Internals
    # =========================================================================

    def _add(
        self,
        kind: HookKind,
        hook_name: HookRef,
        callback: Callback,
        priority: Optional[int],
        accepted_args: Optional[int],
    ) -> None:
        spec = self.registry.require(hook_name, kind)
        if not callable(callback):
            raise TypeError(f"Callback for hook '{spec.name}' is not callable: {callback!r}")
        if priority is None:
            priority = self.settings.default_priority
        if accepted_args is None:
            accepted_args = natural_arity(callback)
        elif accepted_args < 0:
            raise ValueError(f"accepted_args must be >= 0, got {accepted_args}")

        entry = CallbackEntry(
            identity=self._store.identities.identify(callback),
            fn=callback,
            accepted_args=accepted_args,
        )
        callbacks = self._store.for_hook(spec.name)
        callbacks.add(entry, priority)
        self._resync(callbacks)

        logger.debug(
            "Callback registered",
            hook_name=spec.name,
            kind=kind.value,
            callback=entry.name,
            priority=priority,
            accepted_args=accepted_args,
        )

    def _remove(
        self,
        kind: HookKind,
        hook_name: HookRef,
        callback: Callback,
        priority: Optional[int],
    ) -> bool:
        spec = self.registry.require(hook_name, kind)
        if priority is None:
            priority = self.settings.default_priority

        identity = self._store.identities.peek(callback)
        callbacks = self._store.get(spec.name)
        if identity is None or callbacks is None:
            return False
        if not callbacks.remove(identity, priority):
            return False

        self._uncollected = True
        self._resync(callbacks)
        self._collect()
        logger.debug(
            "Callback removed",
            hook_name=spec.name,
            kind=kind.value,
            priority=priority,
        )
        return True

    def _has(
        self,
        kind: HookKind,
        hook_name: Optional[HookRef],
        callback: Optional[Callback],
    ) -> Union[bool, int]:
        if hook_name is None:
            if callback is None:
                return self._store.has_any()
            names = [
                name
                for name in self._store.hook_names()
                if self.registry.lookup(name).kind is kind
            ]
        else:
            names = [self.registry.require(hook_name, kind).name]
            if callback is None:
                return bool(self._store.get(names[0]))

        identity = self._store.identities.peek(callback)
        if identity is None:
            return False
        for name in names:
            callbacks = self._store.get(name)
            priority = callbacks.find(identity) if callbacks is not None else None
            if priority is not None:
                return priority
        return False

    def _resync(self, callbacks: HookCallbacks) -> None:
        if self._iterations.nesting_level:
            self._iterations.resync(callbacks.hook_name, callbacks.priorities)

    def _collect(self) -> None:
        # tokens must survive until every open dispatch has finished
        if not self._uncollected or self._iterations.nesting_level:
            return
        self._uncollected = False
        dropped = self._store.collect()
        if dropped:
            logger.debug("Callback identities released", count=dropped)

    @contextmanager
    def _dispatching(
        self, spec: HookSpec, callbacks: HookCallbacks
    ) -> Iterator[IterationFrame]:
        try:
            with self._iterations.open(spec.name, spec.kind, callbacks.priorities) as frame:
                yield frame
        finally:
            self._collect()

    def _prepare(
        self, kind: HookKind, hook_name: HookRef, arg_count: int
    ) -> tuple[HookSpec, Optional[HookCallbacks]]:
        spec = self.registry.require(hook_name, kind)
        if arg_count != spec.accepted_args:
            if self.settings.strict_arity:
                raise HookArityError(spec.name, spec.accepted_args, arg_count)
            logger.warning(
                "Hook dispatched with unexpected argument count",
                hook_name=spec.name,
                expected=spec.accepted_args,
                actual=arg_count,
            )

        callbacks = self._store.get(spec.name)
        if not callbacks:
            return spec, None

        logger.debug(
            "Dispatching hook",
            hook_name=spec.name,
            kind=kind.value,
            callback_count=len(callbacks),
            nesting_level=self.nesting_level,
        )
        return spec, callbacks

    @staticmethod
    def _walk(
        frame: IterationFrame, callbacks: HookCallbacks
    ) -> Iterator[tuple[int, CallbackEntry]]:
        # lazily re-reads the frame so mutations between steps are honoured
        while frame.advance():
            while True:
                entry = frame.next_entry(callbacks)
                if entry is None:
                    break
                yield frame.current_priority, entry  # type: ignore[misc]

    @staticmethod
    def _invoke_sync(
        spec: HookSpec, priority: int, entry: CallbackEntry, args: tuple[Any, ...]
    ) -> Any:
        try:
            result = entry.call(args)
        except HookError:
            raise
        except Exception as e:
            raise CallbackError(spec.name, priority, entry.fn, e) from e

        if inspect.isawaitable(result):
            if inspect.iscoroutine(result):
                result.close()
            error = TypeError(
                f"Callback {entry.name} returned an awaitable; "
                "use apply_filters() for async callbacks"
            )
            raise CallbackError(spec.name, priority, entry.fn, error) from error
        return result

    @staticmethod
    async def _invoke(
        spec: HookSpec, priority: int, entry: CallbackEntry, args: tuple[Any, ...]
    ) -> Any:
        try:
            result = entry.call(args)
            if inspect.isawaitable(result):
                result = await result
        except HookError:
            raise
        except Exception as e:
            raise CallbackError(spec.name, priority, entry.fn, e) from e
        return result

    def _run_detached(
        self,
        spec: HookSpec,
        priority: int,
        entry: CallbackEntry,
        awaitable: Awaitable[Any],
    ) -> None:
        async def guarded() -> None:
            try:
                await awaitable
            except Exception as e:
                logger.error(
                    "Async action callback failed",
                    hook_name=spec.name,
                    priority=priority,
                    callback=entry.name,
                    error=str(e),
                    exc_info=True,
                )

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            asyncio.run(guarded())
            return

        task = loop.create_task(guarded())
        self._background.add(task)
        task.add_done_callback(self._background.discard)


def create_hook_engine(
    settings: Optional[Settings] = None, declare_core: bool = True
) -> HookEngine:
    """Build an engine, declaring the core hook catalog by default.

    Args:
        settings: Optional settings instance.
        declare_core: Declare CORE_HOOKS in the new registry.

    Returns:
        A ready-to-use HookEngine.
    """
    registry = HookRegistry()
    if declare_core:
        declare_core_hooks(registry)
    return HookEngine(registry=registry, settings=settings)
