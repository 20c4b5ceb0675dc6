"""Command-line interface for presshooks.

This module provides commands for inspecting the hook catalog, the
plugins directory and the effective configuration.
"""

import asyncio
import json
from pathlib import Path
from typing import NoReturn

import click

from presshooks import __version__
from presshooks.core.config import get_settings
from presshooks.core.hooks import HookKind, create_hook_engine
from presshooks.core.logging import configure_logging
from presshooks.plugins import PluginManager


@click.group()
@click.version_option(version=__version__, prog_name="presshooks")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    default=None,
    help="Set log level (overrides PRESSHOOKS_LOG_LEVEL)",
)
def cli(log_level: str | None) -> None:
    """presshooks - action and filter hooks for Python hosts."""
    settings = get_settings()
    if log_level is not None:
        settings = settings.model_copy(update={"log_level": log_level})
    configure_logging(settings)


@cli.command()
@click.option(
    "--kind",
    type=click.Choice([kind.value for kind in HookKind]),
    default=None,
    help="Only list hooks of this kind",
)
@click.option(
    "--with-plugins",
    is_flag=True,
    default=False,
    help="Enable active plugins and show their registered callbacks",
)
def hooks(kind: str | None, with_plugins: bool) -> None:
    """List the declared hooks."""
    engine = create_hook_engine()
    if with_plugins:
        asyncio.run(PluginManager(engine).init())

    selected = HookKind(kind) if kind is not None else None
    for name in engine.registry.names(selected):
        spec = engine.registry.lookup(name)
        click.echo(f"{spec.name:<40} {spec.kind.value:<7} {spec.accepted_args}  {spec.description or ''}")
        if with_plugins:
            for priority, entry in engine.get_callbacks(name):
                click.echo(f"    {priority:>5}  {entry.name}")


@cli.command()
@click.option(
    "--dir",
    "plugins_dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Plugins directory (overrides PRESSHOOKS_PLUGINS_DIR)",
)
def plugins(plugins_dir: Path | None) -> None:
    """List plugins found in the plugins directory."""
    settings = get_settings()
    directory = plugins_dir or (Path(settings.plugins_dir) if settings.plugins_dir else None)
    if directory is None or not directory.is_dir():
        click.echo("No plugins directory configured.", err=True)
        raise SystemExit(1)

    for manifest_path in sorted(directory.glob("*/plugin.json")):
        data = json.loads(manifest_path.read_text(encoding="utf-8"))
        slug = manifest_path.parent.name
        marker = "*" if slug in settings.active_plugins else " "
        click.echo(f"{marker} {slug:<30} {data.get('version', '?'):<10} {data.get('description', '')}")


@cli.command()
def info() -> None:
    """Display presshooks configuration."""
    settings = get_settings()

    click.echo(f"""
presshooks v{__version__}
{'=' * 40}

Configuration:
  Environment:      {settings.environment}
  Debug:            {settings.debug}

Hooks:
  Default Priority: {settings.default_priority}
  Strict Arity:     {settings.strict_arity}

Plugins:
  Directory:        {settings.plugins_dir or '-'}
  Active:           {', '.join(settings.active_plugins) or '-'}

Logging:
  Level:            {settings.log_level}
  Format:           {settings.log_format}
""")


def main() -> NoReturn:
    """Main entry point for the CLI.

    This function is called when the `presshooks` command is run
    or when using `python -m presshooks`.
    """
    cli()


if __name__ == "__main__":
    main()
