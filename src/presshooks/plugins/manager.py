"""Plugin manager - activation and deactivation of plugins.

A plugin is either a plain activation function, or an object with
``activate(ctx)`` and an optional ``deactivate(ctx)``. An activation
function may return a disposer which is called on deactivation. Both
sync and async forms are accepted.

Plugins are registered programmatically or loaded from a plugins
directory laid out as ``<plugins_dir>/<slug>/plugin.json`` plus the
entry module named by the manifest, which must expose ``plugin``
(or ``activate``).

The set of active plugins lives in memory only.

Example:
    @define_plugin
    def banned_names(ctx):
        ctx.hooks.add_action("svc.users.get:action:before", audit_lookup)
        return lambda: ctx.logger.info("deactivated")

    manager = PluginManager(engine)
    manager.register("banned-names", banned_names)
    await manager.enable("banned-names")
"""

import importlib.util
import inspect
import json
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Optional

import structlog
from pydantic import ValidationError

from presshooks.core.config import Settings
from presshooks.core.hooks import CORE_HOOKS, CoreHook, HookEngine, HookKind
from presshooks.core.logging import LoggingContext, get_logger
from presshooks.plugins.manifest import PluginManifest

logger = get_logger(__name__)

ActivateFn = Callable[["PluginContext"], Any]


class PluginError(Exception):
    """Base class for plugin errors."""

    pass


class PluginLoadError(PluginError):
    """Raised when a plugin cannot be found, validated or imported."""

    def __init__(self, slug: str, reason: str) -> None:
        self.slug = slug
        self.reason = reason
        super().__init__(f"Cannot load plugin '{slug}': {reason}")


@dataclass
class PluginContext:
    """Handed to a plugin on activation and deactivation.

    Attributes:
        slug: The plugin's unique slug.
        hooks: The shared hook engine.
        settings: Engine settings.
        logger: Logger bound with the plugin slug.
    """

    slug: str
    hooks: HookEngine
    settings: Settings
    logger: structlog.stdlib.BoundLogger


def define_plugin(fn: ActivateFn) -> ActivateFn:
    """Mark a function as a plugin activation function."""
    return fn


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class FunctionPlugin:
    """Adapts an activation function to the activate/deactivate shape."""

    def __init__(self, activate_fn: ActivateFn) -> None:
        self._activate_fn = activate_fn
        self._disposer: Optional[Callable[[], Any]] = None

    async def activate(self, ctx: PluginContext) -> None:
        result = await _maybe_await(self._activate_fn(ctx))
        if callable(result):
            self._disposer = result

    async def deactivate(self, ctx: PluginContext) -> None:
        disposer, self._disposer = self._disposer, None
        if disposer is not None:
            await _maybe_await(disposer())


class ObjectPlugin:
    """Normalises an activate/deactivate object to async calls."""

    def __init__(self, target: Any) -> None:
        self._target = target

    async def activate(self, ctx: PluginContext) -> None:
        await _maybe_await(self._target.activate(ctx))

    async def deactivate(self, ctx: PluginContext) -> None:
        deactivate = getattr(self._target, "deactivate", None)
        if deactivate is not None:
            await _maybe_await(deactivate(ctx))


def to_plugin(exported: Any) -> FunctionPlugin | ObjectPlugin:
    """Wrap whatever a plugin module exports in a uniform plugin object.

    Raises:
        TypeError: If the export is neither a function nor an object
            with an activate() method.
    """
    if callable(getattr(exported, "activate", None)):
        return ObjectPlugin(exported)
    if callable(exported):
        return FunctionPlugin(exported)
    raise TypeError(f"Not a plugin: {exported!r}")


@dataclass
class LoadedPlugin:
    """A plugin ready for activation."""

    manifest: PluginManifest
    plugin: FunctionPlugin | ObjectPlugin
    module_name: Optional[str] = None


class PluginManager:
    """Enables and disables plugins against a shared hook engine."""

    def __init__(
        self,
        engine: HookEngine,
        settings: Optional[Settings] = None,
        plugins_dir: Optional[str | Path] = None,
    ) -> None:
        """Initialize the manager.

        Args:
            engine: Hook engine handed to plugins.
            settings: Optional settings; defaults to the engine's.
            plugins_dir: Directory to load plugins from; defaults to
                settings.plugins_dir.
        """
        self._engine = engine
        self._settings = settings if settings is not None else engine.settings
        directory = plugins_dir if plugins_dir is not None else self._settings.plugins_dir
        self._plugins_dir = Path(directory) if directory is not None else None
        self._available: dict[str, LoadedPlugin] = {}
        self._active: dict[str, LoadedPlugin] = {}

        # lifecycle hooks must exist even on engines built without the core catalog
        for name in (CoreHook.PLUGIN_ENABLED, CoreHook.PLUGIN_DISABLED):
            if not engine.registry.is_defined(name):
                engine.registry.define_hook(
                    name,
                    HookKind.ACTION,
                    1,
                    CORE_HOOKS[name]["description"],  # type: ignore[arg-type]
                )

    @property
    def active(self) -> list[str]:
        """Slugs of active plugins in activation order."""
        return list(self._active)

    def is_active(self, slug: str) -> bool:
        return slug in self._active

    def register(
        self,
        slug: str,
        plugin: Any,
        manifest: Optional[PluginManifest] = None,
    ) -> LoadedPlugin:
        """Make an in-process plugin available for enabling."""
        if manifest is None:
            manifest = PluginManifest(name=slug, version="0.0.0")
        loaded = LoadedPlugin(manifest=manifest, plugin=to_plugin(plugin))
        self._available[slug] = loaded
        return loaded

    def load(self, slug: str) -> LoadedPlugin:
        """Load a plugin from the plugins directory.

        Raises:
            PluginLoadError: If the directory, manifest or entry module is
                missing or invalid.
        """
        if self._plugins_dir is None:
            raise PluginLoadError(slug, "no plugins directory configured")

        root = self._plugins_dir / slug
        manifest_path = root / "plugin.json"
        if not manifest_path.is_file():
            raise PluginLoadError(slug, f"missing manifest {manifest_path}")

        try:
            manifest = PluginManifest.model_validate(
                json.loads(manifest_path.read_text(encoding="utf-8"))
            )
        except (json.JSONDecodeError, ValidationError) as e:
            raise PluginLoadError(slug, f"invalid manifest: {e}") from e

        module_name = f"presshooks_plugins.{slug.replace('-', '_')}"
        module_path = root / manifest.main
        spec = importlib.util.spec_from_file_location(module_name, module_path)
        if spec is None or spec.loader is None or not module_path.is_file():
            raise PluginLoadError(slug, f"missing entry module {module_path}")

        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        try:
            spec.loader.exec_module(module)
        except Exception as e:
            sys.modules.pop(module_name, None)
            raise PluginLoadError(slug, f"import failed: {e}") from e

        exported = getattr(module, "plugin", None) or getattr(module, "activate", None)
        try:
            plugin = to_plugin(exported)
        except TypeError as e:
            raise PluginLoadError(slug, "entry module exposes no plugin") from e

        loaded = LoadedPlugin(manifest=manifest, plugin=plugin, module_name=module_name)
        self._available[slug] = loaded
        logger.debug("Plugin loaded", slug=slug, version=manifest.version)
        return loaded

    async def init(self) -> list[str]:
        """Enable every plugin listed in settings.active_plugins.

        Returns:
            Slugs that were enabled successfully.
        """
        logger.info("Loading active plugins", plugins=self._settings.active_plugins)
        enabled = []
        for slug in self._settings.active_plugins:
            if await self.enable(slug):
                enabled.append(slug)
        logger.info("Plugin initialization complete", enabled=enabled)
        return enabled

    async def enable(self, slug: str) -> bool:
        """Activate a plugin and fire ``plugin.enabled``.

        Failures are logged and reported as False; the manager and the
        other plugins keep running.
        """
        if slug in self._active:
            logger.info("Plugin already enabled", slug=slug)
            return True

        try:
            loaded = self._available.get(slug) or self.load(slug)
            with LoggingContext(plugin=slug):
                await loaded.plugin.activate(self._context(slug))
        except Exception as e:
            logger.error("Failed to enable plugin", slug=slug, error=str(e), exc_info=True)
            return False

        self._active[slug] = loaded
        logger.info("Plugin enabled", slug=slug, version=loaded.manifest.version)

        await self._announce(CoreHook.PLUGIN_ENABLED, {"slug": slug, "manifest": loaded.manifest})
        return True

    async def disable(self, slug: str) -> bool:
        """Deactivate a plugin and fire ``plugin.disabled``."""
        loaded = self._active.get(slug)
        if loaded is None:
            logger.info("Plugin not active", slug=slug)
            return False

        try:
            with LoggingContext(plugin=slug):
                await loaded.plugin.deactivate(self._context(slug))
        except Exception as e:
            logger.error("Failed to disable plugin", slug=slug, error=str(e), exc_info=True)
            return False

        del self._active[slug]
        logger.info("Plugin disabled", slug=slug)

        await self._announce(CoreHook.PLUGIN_DISABLED, {"slug": slug})
        return True

    async def reload(self, slug: str) -> bool:
        """Disable a plugin, re-import it from disk if it came from there, and enable it."""
        logger.info("Reloading plugin", slug=slug)
        await self.disable(slug)

        loaded = self._available.get(slug)
        if loaded is not None and loaded.module_name is not None:
            sys.modules.pop(loaded.module_name, None)
            del self._available[slug]

        return await self.enable(slug)

    def _context(self, slug: str) -> PluginContext:
        return PluginContext(
            slug=slug,
            hooks=self._engine,
            settings=self._settings,
            logger=get_logger(f"presshooks.plugins.{slug}").bind(plugin=slug),
        )

    async def _announce(self, hook_name: str, payload: dict[str, Any]) -> None:
        try:
            await self._engine.do_action(hook_name, payload)
        except Exception as e:
            logger.error(
                "Plugin lifecycle hook failed",
                hook_name=hook_name,
                slug=payload["slug"],
                error=str(e),
                exc_info=True,
            )
