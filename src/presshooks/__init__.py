"""presshooks - WordPress-style action and filter hooks for Python hosts.

Plugins register prioritized callbacks against declared hooks; host code
dispatches those hooks at fixed extension points without knowing which
plugins are installed.
"""

__version__ = "0.1.0"

from presshooks.core.hooks import HookEngine, HookKind, create_hook_engine

__all__ = ["HookEngine", "HookKind", "create_hook_engine", "__version__"]
