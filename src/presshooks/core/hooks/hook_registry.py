"""Hook registry - write-once catalog of declared hooks.

Every hook must be declared here before plugins may register callbacks
against it or business code may dispatch it. The registry is append-only
for the lifetime of the process: call sites can rely on a declared hook
never disappearing underneath them.

IMPORTANT: Declaring new hooks is non-breaking. There is intentionally
           no API for removing or redefining a hook.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Mapping, Optional, Union

from presshooks.core.hooks.exceptions import (
    DuplicateHookError,
    HookKindError,
    UnknownHookError,
)
from presshooks.core.logging import get_logger

logger = get_logger(__name__)


class HookKind(str, Enum):
    """The two kinds of hooks the engine supports."""

    ACTION = "action"  # side-effecting observers, return value ignored
    FILTER = "filter"  # transformers chained over a threaded value


@dataclass(frozen=True)
class HookSpec:
    """Declaration of a single hook.

    Attributes:
        name: Unique hook name.
        kind: Whether the hook is an action or a filter.
        accepted_args: Number of positional arguments a dispatch supplies.
            For filters this includes the value being filtered.
        description: Human-readable description for docs and tooling.
    """

    name: str
    kind: HookKind
    accepted_args: int
    description: Optional[str] = None

    def __str__(self) -> str:
        return self.name

    @property
    def is_action(self) -> bool:
        return self.kind is HookKind.ACTION

    @property
    def is_filter(self) -> bool:
        return self.kind is HookKind.FILTER


HookRef = Union[str, HookSpec]


def hook_name_of(hook: HookRef) -> str:
    """Return the plain name for a hook given as a string or a HookSpec."""
    return hook.name if isinstance(hook, HookSpec) else hook


class HookRegistry:
    """Catalog mapping hook names to their HookSpec.

    Example:
        registry = HookRegistry()
        user_created = registry.define_hook(
            "svc.user.create:action:after", HookKind.ACTION, 1
        )
        registry.lookup("svc.user.create:action:after") is user_created
    """

    def __init__(self) -> None:
        self._specs: dict[str, HookSpec] = {}

    def define_hook(
        self,
        name: str,
        kind: Union[HookKind, str],
        accepted_args: int,
        description: Optional[str] = None,
    ) -> HookSpec:
        """Declare a hook.

        Args:
            name: Unique hook name.
            kind: "action" or "filter" (or the HookKind member).
            accepted_args: Positional argument count a dispatch supplies.
            description: Optional description.

        Returns:
            The immutable HookSpec, usable as a typed handle wherever a
            hook name is accepted.

        Raises:
            DuplicateHookError: If the name is already declared.
            ValueError: If kind is not a known hook kind or
                accepted_args is negative.
        """
        if name in self._specs:
            raise DuplicateHookError(name)

        kind = HookKind(kind)
        if accepted_args < 0:
            raise ValueError(f"accepted_args must be >= 0, got {accepted_args}")

        spec = HookSpec(
            name=name,
            kind=kind,
            accepted_args=accepted_args,
            description=description,
        )
        self._specs[name] = spec

        logger.debug(
            "Hook defined",
            hook_name=name,
            kind=kind.value,
            accepted_args=accepted_args,
        )
        return spec

    def declare_hooks(self, specs: Mapping[str, Mapping[str, object]]) -> list[HookSpec]:
        """Declare many hooks from a mapping of name to spec fields.

        Each value must carry ``kind`` and ``accepted_args`` and may carry
        ``description``. Declaration stops at the first duplicate.
        """
        declared = []
        for name, fields in specs.items():
            declared.append(
                self.define_hook(
                    name,
                    fields["kind"],  # type: ignore[arg-type]
                    fields["accepted_args"],  # type: ignore[arg-type]
                    fields.get("description"),  # type: ignore[arg-type]
                )
            )
        return declared

    def lookup(self, hook: HookRef) -> HookSpec:
        """Return the HookSpec for a hook.

        Raises:
            UnknownHookError: If the hook was never declared.
        """
        name = hook_name_of(hook)
        spec = self._specs.get(name)
        if spec is None:
            raise UnknownHookError(name)
        return spec

    def require(self, hook: HookRef, kind: HookKind) -> HookSpec:
        """Look up a hook and check it is of the given kind.

        Raises:
            UnknownHookError: If the hook was never declared.
            HookKindError: If the hook is of the other kind.
        """
        spec = self.lookup(hook)
        if spec.kind is not kind:
            raise HookKindError(spec.name, expected=kind.value, actual=spec.kind.value)
        return spec

    def is_defined(self, hook: HookRef) -> bool:
        return hook_name_of(hook) in self._specs

    def names(self, kind: Optional[HookKind] = None) -> list[str]:
        """List declared hook names in declaration order, optionally by kind."""
        if kind is None:
            return list(self._specs)
        return [name for name, spec in self._specs.items() if spec.kind is kind]

    def __contains__(self, hook: object) -> bool:
        if not isinstance(hook, (str, HookSpec)):
            return False
        return self.is_defined(hook)

    def __iter__(self) -> Iterator[HookSpec]:
        return iter(list(self._specs.values()))

    def __len__(self) -> int:
        return len(self._specs)
