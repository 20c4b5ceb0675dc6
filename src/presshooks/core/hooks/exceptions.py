"""Exceptions raised by the hook engine.

Registry errors (duplicate or unknown hook names, kind and arity
mismatches) are programming mistakes and always surface at the call
site. Callback failures during dispatch are wrapped in CallbackError
with the original exception chained as ``__cause__``.
"""

from typing import Any, Callable


class HookError(Exception):
    """Base class for all hook engine errors."""

    pass


class DuplicateHookError(HookError):
    """Raised when a hook name is declared twice."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Hook '{name}' is already defined")


class UnknownHookError(HookError, LookupError):
    """Raised when registering against or dispatching an undeclared hook."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Hook '{name}' is not defined")


class HookKindError(HookError, TypeError):
    """Raised when an action API is used on a filter hook, or vice versa."""

    def __init__(self, name: str, expected: str, actual: str) -> None:
        self.name = name
        self.expected = expected
        self.actual = actual
        super().__init__(f"Hook '{name}' is a {actual} hook, not a {expected} hook")


class HookArityError(HookError, TypeError):
    """Raised in strict mode when a dispatch supplies the wrong argument count."""

    def __init__(self, name: str, expected: int, actual: int) -> None:
        self.name = name
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Hook '{name}' expects {expected} argument(s), dispatch supplied {actual}"
        )


class CallbackError(HookError):
    """Wraps an exception raised by a registered callback during dispatch.

    Attributes:
        hook_name: The hook being dispatched.
        priority: Priority level the failing callback was registered at.
        callback: The failing callback.
        original: The exception the callback raised.
    """

    def __init__(
        self,
        hook_name: str,
        priority: int,
        callback: Callable[..., Any],
        original: BaseException,
    ) -> None:
        self.hook_name = hook_name
        self.priority = priority
        self.callback = callback
        self.original = original
        name = getattr(callback, "__qualname__", repr(callback))
        super().__init__(
            f"Callback {name} failed on hook '{hook_name}' "
            f"at priority {priority}: {original!r}"
        )
