"""Unit tests for HookRegistry and the core hook catalog."""

import pytest

from presshooks.core.hooks import (
    CORE_HOOKS,
    CoreHook,
    DuplicateHookError,
    HookKind,
    HookKindError,
    HookRegistry,
    HookSpec,
    UnknownHookError,
    declare_core_hooks,
    get_all_core_hooks,
)

# Every hook the host application dispatches.
HOST_HOOK_NAMES = [
    "plugin.disabled",
    "plugin.enabled",
    "plugin.mount:rest",
    "rest.posts.create:action:error",
    "rest.posts.delete:action:error",
    "rest.posts.get:action:error",
    "rest.posts.single:action:error",
    "rest.posts.update:action:error",
    "rest.user.login:action:error",
    "rest.user.update:action:error",
    "rest.users.create:action:after",
    "rest.users.create:action:error",
    "rest.users.get:action:error",
    "server:started",
    "server:starting",
    "svc.jwt.sign:action:after",
    "svc.jwt.sign:action:before",
    "svc.jwt.verify:action:after",
    "svc.jwt.verify:action:before",
    "svc.post.create:action:after",
    "svc.post.create:action:before",
    "svc.post.create:filter:result",
    "svc.post.delete:action:after",
    "svc.post.delete:action:before",
    "svc.post.delete:filter:result",
    "svc.post.get:action:after",
    "svc.post.get:action:before",
    "svc.post.get:filter:result",
    "svc.post.update:action:after",
    "svc.post.update:action:before",
    "svc.post.update:filter:input",
    "svc.post.update:filter:result",
    "svc.postMeta.create:action:after",
    "svc.postMeta.create:action:before",
    "svc.postMeta.delete:action:after",
    "svc.postMeta.delete:action:before",
    "svc.postMeta.delete:filter:result",
    "svc.postMeta.get:action:after",
    "svc.postMeta.get:action:before",
    "svc.postMeta.get:filter:result",
    "svc.postMeta.getBatch:action:after",
    "svc.postMeta.getBatch:action:before",
    "svc.postMeta.getBatch:filter:result",
    "svc.postMeta.set:action:after",
    "svc.postMeta.set:action:before",
    "svc.postMeta.set:filter:input",
    "svc.posts.get:action:after",
    "svc.posts.get:action:before",
    "svc.posts.get:filter:result",
    "svc.user.can:action:after",
    "svc.user.can:action:before",
    "svc.user.can:filter:result",
    "svc.user.create:action:after",
    "svc.user.create:action:before",
    "svc.user.create:filter:result",
    "svc.user.delete:action:after",
    "svc.user.delete:action:before",
    "svc.user.delete:filter:result",
    "svc.user.get:action:after",
    "svc.user.get:action:before",
    "svc.user.get:filter:result",
    "svc.user.login:action:after",
    "svc.user.login:action:before",
    "svc.user.login:action:error",
    "svc.user.login:filter:result",
    "svc.user.update:action:after",
    "svc.user.update:action:before",
    "svc.user.update:filter:input",
    "svc.user.update:filter:result",
    "svc.userMeta.batchUpdate:action:after",
    "svc.userMeta.batchUpdate:action:before",
    "svc.userMeta.batchUpdate:filter:input",
    "svc.userMeta.create:action:after",
    "svc.userMeta.create:action:before",
    "svc.userMeta.delete:action:after",
    "svc.userMeta.delete:action:before",
    "svc.userMeta.delete:filter:result",
    "svc.userMeta.get:action:after",
    "svc.userMeta.get:action:before",
    "svc.userMeta.get:filter:result",
    "svc.userMeta.getBatch:filter:result",
    "svc.userMeta.set:action:after",
    "svc.userMeta.set:action:before",
    "svc.userMeta.set:filter:input",
    "svc.userMeta.setRole:action:after",
    "svc.userMeta.setRole:action:before",
    "svc.users.get:action:after",
    "svc.users.get:action:before",
    "svc.users.get:filter:result",
]


class TestHookRegistry:
    """Tests for HookRegistry."""

    def test_define_and_lookup(self) -> None:
        """Test that a defined hook can be looked up by name."""
        registry = HookRegistry()

        spec = registry.define_hook("svc.thing.get:filter:result", HookKind.FILTER, 2, "Filter a thing")

        assert registry.lookup("svc.thing.get:filter:result") is spec
        assert spec == HookSpec("svc.thing.get:filter:result", HookKind.FILTER, 2, "Filter a thing")
        assert spec.is_filter is True
        assert spec.is_action is False
        assert str(spec) == "svc.thing.get:filter:result"

    def test_kind_accepts_string(self) -> None:
        """Test that the kind may be given as its string value."""
        registry = HookRegistry()

        spec = registry.define_hook("thing:done", "action", 1)

        assert spec.kind is HookKind.ACTION

    def test_duplicate_definition_raises(self) -> None:
        """Test that a hook name can only be declared once."""
        registry = HookRegistry()
        registry.define_hook("thing:done", HookKind.ACTION, 1)

        with pytest.raises(DuplicateHookError) as exc_info:
            registry.define_hook("thing:done", HookKind.FILTER, 1)

        assert exc_info.value.name == "thing:done"
        assert registry.lookup("thing:done").kind is HookKind.ACTION

    def test_invalid_kind_raises(self) -> None:
        """Test that unknown kinds are rejected."""
        with pytest.raises(ValueError):
            HookRegistry().define_hook("thing:done", "event", 1)

    def test_negative_accepted_args_raises(self) -> None:
        """Test that accepted_args must not be negative."""
        with pytest.raises(ValueError):
            HookRegistry().define_hook("thing:done", HookKind.ACTION, -1)

    def test_lookup_unknown_raises(self) -> None:
        """Test that looking up an undeclared hook raises UnknownHookError."""
        with pytest.raises(UnknownHookError) as exc_info:
            HookRegistry().lookup("thing:missing")

        assert exc_info.value.name == "thing:missing"
        assert isinstance(exc_info.value, LookupError)

    def test_lookup_accepts_spec(self) -> None:
        """Test that lookup() accepts a HookSpec handle."""
        registry = HookRegistry()
        spec = registry.define_hook("thing:done", HookKind.ACTION, 1)

        assert registry.lookup(spec) is spec

    def test_require_checks_kind(self) -> None:
        """Test that require() rejects the wrong kind."""
        registry = HookRegistry()
        registry.define_hook("thing:done", HookKind.ACTION, 1)

        with pytest.raises(HookKindError) as exc_info:
            registry.require("thing:done", HookKind.FILTER)

        assert exc_info.value.expected == "filter"
        assert exc_info.value.actual == "action"

    def test_declare_hooks(self) -> None:
        """Test bulk declaration from a mapping."""
        registry = HookRegistry()

        specs = registry.declare_hooks(
            {
                "a:action": {"kind": "action", "accepted_args": 1},
                "b:filter": {"kind": "filter", "accepted_args": 2, "description": "B"},
            }
        )

        assert [spec.name for spec in specs] == ["a:action", "b:filter"]
        assert registry.lookup("b:filter").description == "B"

    def test_names_iteration_and_membership(self) -> None:
        """Test names(), iteration, len() and membership."""
        registry = HookRegistry()
        registry.define_hook("a:action", HookKind.ACTION, 1)
        registry.define_hook("b:filter", HookKind.FILTER, 1)

        assert registry.names() == ["a:action", "b:filter"]
        assert registry.names(HookKind.FILTER) == ["b:filter"]
        assert [spec.name for spec in registry] == ["a:action", "b:filter"]
        assert len(registry) == 2
        assert "a:action" in registry
        assert "c:action" not in registry
        assert registry.is_defined("b:filter") is True


class TestCoreHooks:
    """Tests for the core hook catalog."""

    def test_catalog_matches_constants(self) -> None:
        """Test that every CoreHook constant has a catalog entry."""
        assert set(get_all_core_hooks()) == set(CORE_HOOKS)

    def test_kind_matches_name(self) -> None:
        """Test that hooks named ':filter:' are filters and ':action:' are actions."""
        for name, definition in CORE_HOOKS.items():
            if ":filter:" in name:
                assert definition["kind"] == "filter", name
            if ":action:" in name:
                assert definition["kind"] == "action", name

    def test_declare_core_hooks(self) -> None:
        """Test that the catalog can be declared into a registry."""
        registry = HookRegistry()

        specs = declare_core_hooks(registry)

        assert len(specs) == len(CORE_HOOKS)
        assert registry.lookup(CoreHook.SVC_USER_META_GET_RESULT).accepted_args == 3
        assert registry.lookup(CoreHook.SERVER_STARTING).accepted_args == 0
        assert registry.lookup(CoreHook.PLUGIN_ENABLED).is_action

    def test_declare_core_hooks_twice_raises(self) -> None:
        """Test that the catalog is write-once."""
        registry = HookRegistry()
        declare_core_hooks(registry)

        with pytest.raises(DuplicateHookError):
            declare_core_hooks(registry)

    def test_declare_core_hooks_covers_host_hooks(self) -> None:
        """Test that every hook the host dispatches is declared, and nothing else."""
        registry = HookRegistry()
        declare_core_hooks(registry)

        missing = [name for name in HOST_HOOK_NAMES if not registry.is_defined(name)]

        assert missing == []
        assert sorted(registry.names()) == sorted(HOST_HOOK_NAMES)

    def test_meta_and_lifecycle_hooks(self) -> None:
        """Test arity and kind of the meta, REST and plugin mount hooks."""
        registry = HookRegistry()
        declare_core_hooks(registry)

        assert registry.lookup(CoreHook.SVC_USER_META_BATCH_UPDATE_INPUT).accepted_args == 3
        assert registry.lookup(CoreHook.SVC_USER_META_DELETE_RESULT).is_filter
        assert registry.lookup(CoreHook.SVC_POST_META_GET_BATCH_AFTER).is_action
        assert registry.lookup(CoreHook.REST_USERS_CREATE_AFTER).is_action
        assert registry.lookup(CoreHook.PLUGIN_MOUNT_REST).is_action
