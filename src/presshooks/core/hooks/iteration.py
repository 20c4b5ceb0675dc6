"""Iteration controller - re-entrant, mutation-safe hook traversal.

Each in-flight dispatch owns an IterationFrame recording the priority it
is currently running and the priorities still ahead of it. Callbacks may
add or remove callbacks, or dispatch hooks themselves, while a frame is
open. Whenever a hook's callbacks change, every open frame on that hook
is resynchronised against the fresh priority index:

- priorities at or below the frame's current priority are never
  revisited, so a callback added below the current level only runs on
  the next dispatch;
- priorities above the current one are taken from the live index, so
  levels added ahead of the frame are visited and emptied levels are
  skipped;
- the current level is read live, entry by entry, so an entry added at
  the current level still runs in this pass, a not-yet-run entry that
  gets removed does not, and an entry runs at most once per level even
  if it removes and re-adds itself.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Iterator, Optional

from presshooks.core.context import (
    get_current_frame,
    reset_current_frame,
    set_current_frame,
)
from presshooks.core.hooks.callback_store import CallbackEntry, HookCallbacks
from presshooks.core.hooks.hook_registry import HookKind


@dataclass(eq=False)
class IterationFrame:
    """Traversal state of one dispatch.

    Attributes:
        hook_name: Hook being dispatched.
        kind: Kind of the hook being dispatched.
        remaining: Priorities after the current one still to visit.
        current_priority: Priority level being run, None before the first.
        owner: Controller that opened the frame.
        parent: Frame that was innermost when this one opened.
    """

    hook_name: str
    kind: HookKind
    remaining: list[int]
    current_priority: Optional[int] = None
    owner: Optional["IterationController"] = field(default=None, repr=False)
    parent: Optional["IterationFrame"] = field(default=None, repr=False)
    closed: bool = field(default=False, init=False)
    _visited: set[int] = field(default_factory=set, init=False, repr=False)

    def advance(self) -> bool:
        """Move to the next priority level. Returns False when done."""
        if not self.remaining:
            return False
        self.current_priority = self.remaining.pop(0)
        self._visited = set()
        return True

    def next_entry(self, callbacks: HookCallbacks) -> Optional[CallbackEntry]:
        """Return the next not-yet-run entry at the current level."""
        if self.current_priority is None:
            return None
        for identity, entry in callbacks.bucket(self.current_priority).items():
            if identity not in self._visited:
                self._visited.add(identity)
                return entry
        return None

    def resync(self, priorities: list[int]) -> None:
        """Recompute the remaining levels from the live priority index."""
        if self.current_priority is None:
            self.remaining = list(priorities)
        else:
            self.remaining = [p for p in priorities if p > self.current_priority]


class IterationController:
    """Tracks the open frames of one engine and keeps them in sync."""

    def __init__(self) -> None:
        self._frames: list[IterationFrame] = []

    @property
    def nesting_level(self) -> int:
        """Number of dispatches currently in flight."""
        return len(self._frames)

    def frames(self, hook_name: Optional[str] = None) -> list[IterationFrame]:
        """Open frames, outermost first, optionally for one hook."""
        if hook_name is None:
            return list(self._frames)
        return [frame for frame in self._frames if frame.hook_name == hook_name]

    @contextmanager
    def open(
        self, hook_name: str, kind: HookKind, priorities: list[int]
    ) -> Iterator[IterationFrame]:
        """Open a frame for a dispatch, closing it on every exit path."""
        frame = IterationFrame(
            hook_name=hook_name,
            kind=kind,
            remaining=list(priorities),
            owner=self,
            parent=get_current_frame(),
        )
        self._frames.append(frame)
        token = set_current_frame(frame)
        try:
            yield frame
        finally:
            frame.closed = True
            reset_current_frame(token)
            self._frames.remove(frame)

    def resync(self, hook_name: str, priorities: list[int]) -> None:
        """Apply a priority index change to every open frame on the hook."""
        for frame in self._frames:
            if frame.hook_name == hook_name:
                frame.resync(priorities)

    def current_frame(self) -> Optional[IterationFrame]:
        """Innermost open frame of this controller in the running context.

        Tasks spawned from inside a dispatch inherit its context, so
        frames that have since closed are skipped.
        """
        frame = get_current_frame()
        while frame is not None and (frame.owner is not self or frame.closed):
            frame = frame.parent
        return frame
