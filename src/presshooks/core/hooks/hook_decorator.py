"""Hook decorator API for callback registration.

Enables the ``@engine.hook.action("server:started")`` syntax as an
alternative to calling add_action()/add_filter() directly.
"""

from typing import TYPE_CHECKING, Any, Callable, Optional, TypeVar

from presshooks.core.hooks.hook_registry import HookRef

if TYPE_CHECKING:
    from presshooks.core.hooks.hook_engine import HookEngine

F = TypeVar("F", bound=Callable[..., Any])


class HookDecorator:
    """Provides decorator syntax for callback registration.

    Example:
        @engine.hook.filter("svc.post.get:filter:result", priority=20)
        def redact(post):
            post["author_email"] = None
            return post
    """

    def __init__(self, engine: "HookEngine") -> None:
        """Initialize with the engine to register against."""
        self._engine = engine

    @property
    def engine(self) -> "HookEngine":
        """Get the underlying hook engine."""
        return self._engine

    def action(
        self,
        hook_name: HookRef,
        priority: Optional[int] = None,
        accepted_args: Optional[int] = None,
    ) -> Callable[[F], F]:
        """Register the decorated function on an action hook.

        Args:
            hook_name: Declared action hook.
            priority: Lower runs earlier.
            accepted_args: Positional arguments to pass.

        Returns:
            Decorator returning the function unchanged.
        """

        def decorator(func: F) -> F:
            self._engine.add_action(hook_name, func, priority, accepted_args)
            return func

        return decorator

    def filter(
        self,
        hook_name: HookRef,
        priority: Optional[int] = None,
        accepted_args: Optional[int] = None,
    ) -> Callable[[F], F]:
        """Register the decorated function on a filter hook."""

        def decorator(func: F) -> F:
            self._engine.add_filter(hook_name, func, priority, accepted_args)
            return func

        return decorator
