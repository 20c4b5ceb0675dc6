"""Callback storage and priority index.

Callbacks are kept per hook, grouped into priority buckets. Each bucket
maps a callback identity to its CallbackEntry, so registering the same
callback twice at the same priority overwrites in place instead of
adding a second invocation. Buckets keep insertion order, which is the
order callbacks at one priority run in.
"""

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Hashable, Iterator, Optional


Callback = Callable[..., Any]


@dataclass
class CallbackEntry:
    """A registered callback.

    Attributes:
        identity: Token shared by every registration of the same callback.
        fn: The callable itself.
        accepted_args: How many positional arguments to pass. None means
            pass everything the dispatch supplies.
    """

    identity: int
    fn: Callback
    accepted_args: Optional[int]

    @property
    def name(self) -> str:
        return getattr(self.fn, "__qualname__", None) or repr(self.fn)

    def call(self, args: tuple[Any, ...]) -> Any:
        """Invoke the callback with args truncated to accepted_args."""
        if self.accepted_args is None or self.accepted_args >= len(args):
            return self.fn(*args)
        return self.fn(*args[: self.accepted_args])


def natural_arity(fn: Callback) -> Optional[int]:
    """Count the positional parameters a callable takes.

    Returns None when the callable accepts ``*args`` or its signature
    cannot be introspected, meaning it should receive every argument.
    """
    try:
        signature = inspect.signature(fn)
    except (TypeError, ValueError):
        return None

    count = 0
    for param in signature.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return None
        if param.kind in (
            inspect.Parameter.POSITIONAL_ONLY,
            inspect.Parameter.POSITIONAL_OR_KEYWORD,
        ):
            count += 1
    return count


class CallbackIdentities:
    """Hands out one stable token per distinct callback.

    Callbacks are told apart by object identity, never by equality, so
    two distinct callables that compare equal keep separate tokens.
    Bound methods are recreated on every attribute access, so they are
    keyed by their instance and function and ``obj.handler`` keeps its
    identity across registrations.

    A token holds a strong reference to its callback until collect()
    finds it unused, which keeps the ids in its key from being reused.
    """

    def __init__(self) -> None:
        self._tokens: dict[Hashable, int] = {}
        self._held: dict[int, tuple[Hashable, Callback]] = {}
        self._next = 0

    @staticmethod
    def key_of(fn: Callback) -> Hashable:
        owner = getattr(fn, "__self__", None)
        if owner is None or inspect.ismodule(owner):
            return id(fn)
        func = getattr(fn, "__func__", None)
        if func is not None:
            return (id(owner), id(func))
        # builtin methods such as list.append on an instance
        return (id(owner), getattr(fn, "__name__", None) or id(fn))

    def identify(self, fn: Callback) -> int:
        key = self.key_of(fn)
        token = self._tokens.get(key)
        if token is None:
            self._next += 1
            token = self._tokens[key] = self._next
            self._held[token] = (key, fn)
        return token

    def peek(self, fn: Callback) -> Optional[int]:
        """Return the token of a callback already seen, without assigning one."""
        return self._tokens.get(self.key_of(fn))

    def collect(self, live: set[int]) -> int:
        """Forget every token not in live.

        Must only run while no dispatch is open: a callback removed and
        re-added mid-dispatch has to get its old token back.

        Returns:
            Number of tokens dropped.
        """
        dead = [token for token in self._held if token not in live]
        for token in dead:
            key, _ = self._held.pop(token)
            del self._tokens[key]
        return len(dead)

    def __len__(self) -> int:
        return len(self._held)


class HookCallbacks:
    """Priority buckets for a single hook.

    ``priorities`` is always exactly the sorted list of priorities that
    hold at least one entry.
    """

    def __init__(self, hook_name: str) -> None:
        self.hook_name = hook_name
        self._buckets: dict[int, dict[int, CallbackEntry]] = {}
        self._priorities: list[int] = []

    @property
    def priorities(self) -> list[int]:
        return list(self._priorities)

    def bucket(self, priority: int) -> dict[int, CallbackEntry]:
        """Return the live bucket at a priority (empty dict if none)."""
        return self._buckets.get(priority, {})

    def add(self, entry: CallbackEntry, priority: int) -> bool:
        """Store an entry, overwriting one with the same identity.

        Returns:
            True if this created a new priority level.
        """
        created = priority not in self._buckets
        self._buckets.setdefault(priority, {})[entry.identity] = entry
        if created:
            self._reindex()
        return created

    def remove(self, identity: int, priority: int) -> bool:
        """Remove the entry with this identity at this priority.

        Returns:
            True if an entry was removed.
        """
        bucket = self._buckets.get(priority)
        if not bucket or identity not in bucket:
            return False
        del bucket[identity]
        if not bucket:
            del self._buckets[priority]
            self._reindex()
        return True

    def clear(self, priority: Optional[int] = None) -> bool:
        """Drop one priority bucket, or every bucket when priority is None.

        Returns:
            True if anything was removed.
        """
        if priority is None:
            removed = bool(self._buckets)
            self._buckets.clear()
        else:
            removed = self._buckets.pop(priority, None) is not None
        if removed:
            self._reindex()
        return removed

    def find(self, identity: int) -> Optional[int]:
        """Return the lowest priority the identity is registered at."""
        for priority in self._priorities:
            if identity in self._buckets[priority]:
                return priority
        return None

    def entries(self) -> Iterator[tuple[int, CallbackEntry]]:
        for priority in self._priorities:
            for entry in self._buckets[priority].values():
                yield priority, entry

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._buckets.values())

    def __bool__(self) -> bool:
        return bool(self._priorities)

    def _reindex(self) -> None:
        self._priorities = sorted(self._buckets)


class CallbackStore:
    """All callback buckets of an engine, keyed by hook name."""

    def __init__(self) -> None:
        self._hooks: dict[str, HookCallbacks] = {}
        self.identities = CallbackIdentities()

    def for_hook(self, hook_name: str) -> HookCallbacks:
        """Return the callbacks of a hook, creating the holder on first use."""
        callbacks = self._hooks.get(hook_name)
        if callbacks is None:
            callbacks = self._hooks[hook_name] = HookCallbacks(hook_name)
        return callbacks

    def get(self, hook_name: str) -> Optional[HookCallbacks]:
        return self._hooks.get(hook_name)

    def hook_names(self) -> list[str]:
        """Names of hooks that currently hold at least one callback."""
        return [name for name, callbacks in self._hooks.items() if callbacks]

    def has_any(self) -> bool:
        return any(self._hooks.values())

    def collect(self) -> int:
        """Drop identity tokens no longer registered on any hook."""
        live = {
            entry.identity
            for callbacks in self._hooks.values()
            for _, entry in callbacks.entries()
        }
        return self.identities.collect(live)
