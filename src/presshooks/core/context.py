"""Dispatch context management using ContextVars.

Holds the innermost open dispatch frame for the running thread or
asyncio task, so code deep inside a callback can ask where it sits in
the hook traversal without explicit parameter passing. Independent
asyncio tasks dispatching at the same time each see their own frame.
"""

from contextvars import ContextVar, Token
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from presshooks.core.hooks.iteration import IterationFrame

# Global context variable for the innermost IterationFrame
_current_frame: ContextVar[Optional["IterationFrame"]] = ContextVar(
    "current_iteration_frame", default=None
)


def get_current_frame() -> Optional["IterationFrame"]:
    """Get the innermost open dispatch frame.

    Returns:
        The current IterationFrame or None outside any dispatch.
    """
    return _current_frame.get()


def set_current_frame(frame: Optional["IterationFrame"]) -> Token:
    """Set the innermost dispatch frame.

    Args:
        frame: The IterationFrame being entered.

    Returns:
        Token to pass to reset_current_frame() on exit.
    """
    return _current_frame.set(frame)


def reset_current_frame(token: Token) -> None:
    """Restore the frame that was current before set_current_frame()."""
    _current_frame.reset(token)
