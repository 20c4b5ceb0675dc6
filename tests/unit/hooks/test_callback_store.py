"""Unit tests for callback storage, identities and arity detection."""

import functools
from dataclasses import dataclass

from presshooks.core.hooks.callback_store import (
    CallbackEntry,
    CallbackIdentities,
    CallbackStore,
    HookCallbacks,
    natural_arity,
)


def _entry(identity: int, fn=None, accepted_args=None) -> CallbackEntry:
    return CallbackEntry(identity=identity, fn=fn or (lambda *a: a), accepted_args=accepted_args)


class Greeter:
    def greet(self, name, punctuation):
        return f"hello {name}{punctuation}"


@dataclass(frozen=True)
class Prefixer:
    prefix: str

    def __call__(self, value):
        return self.prefix + value


class TestNaturalArity:
    """Tests for natural_arity()."""

    def test_positional_parameters_counted(self) -> None:
        """Test plain positional parameters."""
        assert natural_arity(lambda: None) == 0
        assert natural_arity(lambda a, b=1: None) == 2

    def test_keyword_only_parameters_ignored(self) -> None:
        """Test that keyword-only parameters are not counted."""
        assert natural_arity(lambda a, *, flag=False: None) == 1

    def test_var_positional_means_everything(self) -> None:
        """Test that *args yields None."""
        assert natural_arity(lambda a, *rest: None) is None

    def test_bound_method_excludes_self(self) -> None:
        """Test that self is not counted for bound methods."""
        assert natural_arity(Greeter().greet) == 2

    def test_partial(self) -> None:
        """Test that functools.partial reports its remaining parameters."""
        assert natural_arity(functools.partial(Greeter().greet, "you")) == 1

    def test_variadic_builtin(self) -> None:
        """Test that builtins taking *args receive everything."""
        assert natural_arity(print) is None


class TestCallbackEntry:
    """Tests for CallbackEntry.call()."""

    def test_truncates_to_accepted_args(self) -> None:
        """Test that extra arguments are dropped."""
        entry = _entry(1, accepted_args=2)

        assert entry.call((1, 2, 3)) == (1, 2)

    def test_zero_accepted_args(self) -> None:
        """Test that accepted_args=0 calls with no arguments."""
        entry = _entry(1, accepted_args=0)

        assert entry.call((1, 2)) == ()

    def test_none_passes_everything(self) -> None:
        """Test that accepted_args=None passes every argument."""
        entry = _entry(1)

        assert entry.call((1, 2, 3)) == (1, 2, 3)

    def test_short_dispatch_is_not_padded(self) -> None:
        """Test that fewer arguments than accepted_args are passed as-is."""
        entry = _entry(1, accepted_args=3)

        assert entry.call((1,)) == (1,)

    def test_name(self) -> None:
        """Test that the name is the callable's qualified name."""
        assert _entry(1, fn=Greeter().greet).name == "Greeter.greet"


class TestCallbackIdentities:
    """Tests for CallbackIdentities."""

    def test_same_function_same_token(self) -> None:
        """Test that a function keeps one token."""
        identities = CallbackIdentities()

        def fn():
            pass

        assert identities.identify(fn) == identities.identify(fn)

    def test_distinct_functions_distinct_tokens(self) -> None:
        """Test that different functions get different tokens."""
        identities = CallbackIdentities()

        assert identities.identify(lambda: 1) != identities.identify(lambda: 2)

    def test_bound_method_token_is_stable(self) -> None:
        """Test that re-accessed bound methods share a token."""
        identities = CallbackIdentities()
        greeter = Greeter()

        assert identities.identify(greeter.greet) == identities.identify(greeter.greet)
        assert identities.identify(greeter.greet) != identities.identify(Greeter().greet)

    def test_unhashable_callable(self) -> None:
        """Test that unhashable callables are identified by object identity."""

        class Unhashable:
            __hash__ = None  # type: ignore[assignment]

            def __call__(self):
                pass

        identities = CallbackIdentities()
        first, second = Unhashable(), Unhashable()

        assert identities.peek(first) is None
        token = identities.identify(first)
        assert identities.identify(first) == token
        assert identities.peek(first) == token
        assert identities.identify(second) != token

    def test_equal_callables_distinct_tokens(self) -> None:
        """Test that distinct callables comparing equal keep separate tokens."""
        identities = CallbackIdentities()
        first, second = Prefixer("a-"), Prefixer("a-")

        assert first == second
        assert identities.identify(first) != identities.identify(second)
        assert identities.peek(Prefixer("a-")) is None

    def test_builtin_method_token_is_stable(self) -> None:
        """Test that builtin methods of one instance share a token."""
        identities = CallbackIdentities()
        seen: list = []

        assert identities.identify(seen.append) == identities.identify(seen.append)
        assert identities.identify(seen.append) != identities.identify(seen.extend)
        assert identities.peek([].append) is None

    def test_collect_drops_unused_tokens(self) -> None:
        """Test that collect() forgets tokens outside the live set."""
        identities = CallbackIdentities()

        def kept():
            pass

        def dropped():
            pass

        kept_token = identities.identify(kept)
        identities.identify(dropped)

        assert identities.collect({kept_token}) == 1
        assert len(identities) == 1
        assert identities.peek(kept) == kept_token
        assert identities.peek(dropped) is None
        assert identities.identify(dropped) > kept_token

    def test_peek_does_not_assign(self) -> None:
        """Test that peek() never hands out a token."""
        identities = CallbackIdentities()

        def fn():
            pass

        assert identities.peek(fn) is None
        assert identities.peek(fn) is None
        token = identities.identify(fn)
        assert identities.peek(fn) == token


class TestHookCallbacks:
    """Tests for HookCallbacks buckets and the priority index."""

    def test_priority_index_sorted(self) -> None:
        """Test that priorities stay sorted as levels are added."""
        callbacks = HookCallbacks("h")

        assert callbacks.add(_entry(1), 20) is True
        assert callbacks.add(_entry(2), 5) is True
        assert callbacks.add(_entry(3), 20) is False

        assert callbacks.priorities == [5, 20]
        assert len(callbacks) == 3

    def test_overwrite_in_place(self) -> None:
        """Test that the same identity overwrites without moving."""
        callbacks = HookCallbacks("h")
        callbacks.add(_entry(1, accepted_args=1), 10)
        callbacks.add(_entry(2), 10)
        callbacks.add(_entry(1, accepted_args=2), 10)

        assert [entry.identity for entry in callbacks.bucket(10).values()] == [1, 2]
        assert callbacks.bucket(10)[1].accepted_args == 2

    def test_remove_drops_empty_level(self) -> None:
        """Test that emptying a bucket removes its priority."""
        callbacks = HookCallbacks("h")
        callbacks.add(_entry(1), 10)

        assert callbacks.remove(1, 5) is False
        assert callbacks.remove(2, 10) is False
        assert callbacks.remove(1, 10) is True
        assert callbacks.priorities == []
        assert not callbacks

    def test_priorities_returns_copy(self) -> None:
        """Test that callers cannot mutate the index."""
        callbacks = HookCallbacks("h")
        callbacks.add(_entry(1), 10)

        callbacks.priorities.append(99)

        assert callbacks.priorities == [10]

    def test_clear(self) -> None:
        """Test clear() for one priority and for all."""
        callbacks = HookCallbacks("h")
        callbacks.add(_entry(1), 1)
        callbacks.add(_entry(2), 2)

        assert callbacks.clear(3) is False
        assert callbacks.clear(1) is True
        assert callbacks.priorities == [2]
        assert callbacks.clear() is True
        assert callbacks.clear() is False

    def test_find_lowest_priority(self) -> None:
        """Test that find() reports the lowest registered priority."""
        callbacks = HookCallbacks("h")
        callbacks.add(_entry(1), 30)
        callbacks.add(_entry(1), 3)

        assert callbacks.find(1) == 3
        assert callbacks.find(2) is None

    def test_entries_in_dispatch_order(self) -> None:
        """Test that entries() walks priority then insertion order."""
        callbacks = HookCallbacks("h")
        callbacks.add(_entry(1), 20)
        callbacks.add(_entry(2), 10)
        callbacks.add(_entry(3), 10)

        assert [(p, e.identity) for p, e in callbacks.entries()] == [(10, 2), (10, 3), (20, 1)]


class TestCallbackStore:
    """Tests for CallbackStore."""

    def test_for_hook_creates_once(self) -> None:
        """Test that for_hook() returns the same holder each time."""
        store = CallbackStore()

        assert store.get("h") is None
        assert store.for_hook("h") is store.for_hook("h")

    def test_hook_names_only_non_empty(self) -> None:
        """Test that empty holders are not reported."""
        store = CallbackStore()
        store.for_hook("empty")
        store.for_hook("full").add(_entry(1), 10)

        assert store.hook_names() == ["full"]
        assert store.has_any() is True

        store.for_hook("full").clear()

        assert store.has_any() is False

    def test_collect_keeps_registered_identities(self) -> None:
        """Test that collect() only releases identities no hook holds."""
        store = CallbackStore()
        registered, removed = (lambda: 1), (lambda: 2)
        kept = store.identities.identify(registered)
        gone = store.identities.identify(removed)
        store.for_hook("a").add(_entry(kept, fn=registered), 10)
        store.for_hook("b").add(_entry(gone, fn=removed), 10)

        assert store.collect() == 0

        store.for_hook("b").remove(gone, 10)

        assert store.collect() == 1
        assert store.identities.peek(registered) == kept
        assert store.identities.peek(removed) is None
