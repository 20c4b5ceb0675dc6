"""Pytest configuration for all tests."""

import pytest

from presshooks.core.config import Settings
from presshooks.core.hooks import HookEngine, HookKind, HookRegistry

FILTER_HOOK = "test.value:filter"
FILTER_ARGS_HOOK = "test.value:filter:args"
ACTION_HOOK = "test.event:action"
OTHER_ACTION_HOOK = "test.other:action"


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(_env_file=None, environment="testing")


@pytest.fixture
def registry() -> HookRegistry:
    """Registry with a small set of test hooks."""
    registry = HookRegistry()
    registry.define_hook(FILTER_HOOK, HookKind.FILTER, 1, "Filter a single value")
    registry.define_hook(FILTER_ARGS_HOOK, HookKind.FILTER, 3, "Filter a value with context")
    registry.define_hook(ACTION_HOOK, HookKind.ACTION, 1, "Observe an event")
    registry.define_hook(OTHER_ACTION_HOOK, HookKind.ACTION, 1, "Observe another event")
    return registry


@pytest.fixture
def engine(registry: HookRegistry, settings: Settings) -> HookEngine:
    """A fresh engine per test."""
    return HookEngine(registry=registry, settings=settings)
