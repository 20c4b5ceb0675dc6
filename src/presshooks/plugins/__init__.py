"""Plugin loading and lifecycle management."""

from presshooks.plugins.manager import (
    PluginContext,
    PluginError,
    PluginLoadError,
    PluginManager,
    define_plugin,
)
from presshooks.plugins.manifest import PluginManifest

__all__ = [
    "PluginContext",
    "PluginError",
    "PluginLoadError",
    "PluginManager",
    "PluginManifest",
    "define_plugin",
]
