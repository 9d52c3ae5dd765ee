"""CLI entry point: i18nscope.

Subcommands:
    i18nscope detect /path/to/workspace                     # Frameworks + derived settings
    i18nscope detect /path/to/workspace --file src/main.ts  # Resolve from an active file
    i18nscope scan /path/to/workspace                       # Declared dependencies per manifest format
    i18nscope frameworks                                    # List supported frameworks
"""

from __future__ import annotations

import asyncio
import json
import sys
from pathlib import Path
from typing import Any

import click
from pydantic import ValidationError

from i18nscope.context.controller import ContextController
from i18nscope.core.config import ConfigStore
from i18nscope.core.errors import ConfigKeyError
from i18nscope.core.logging import setup_logging
from i18nscope.engines.manifest_scanner import get_package_dependencies
from i18nscope.frameworks.registry import create_default_registry


async def _detect(root: Path, active_file: Path | None, config: ConfigStore) -> dict[str, Any]:
    controller = ContextController(config)
    try:
        await controller.update_root_paths(
            str(root), str(active_file) if active_file is not None else None
        )
        settings = controller.settings
        return {
            "workspace_root": controller.workspace_root,
            "enabled": controller.enabled,
            "activation_folder": controller.nearest_enabled_framework_path,
            "frameworks": [f.id for f in controller.frameworks],
            "parsers": [p.id for p in settings.enabled_parsers],
            "keystyle": await controller.request_key_style(),
            "namespace_delimiter": settings.namespace_delimiter,
            "dir_structure": settings.dir_structure,
            "locales_paths": controller.locales_paths(),
            "path_matchers": [m.matcher for m in settings.path_matchers()],
            "locales": controller.visible_locales,
        }
    finally:
        controller.dispose()


def _load_config(settings: str | None) -> ConfigStore:
    if settings is None:
        return ConfigStore()
    try:
        return ConfigStore.from_file(Path(settings))
    except (json.JSONDecodeError, ValidationError, ConfigKeyError) as e:
        click.echo(f"Error: invalid settings file {settings}: {e}", err=True)
        sys.exit(1)


def _print_report(report: dict[str, Any]) -> None:
    if not report["frameworks"]:
        click.echo("No frameworks detected.")
        return

    state = "enabled" if report["enabled"] else "disabled"
    click.echo(f"Workspace {report['workspace_root']} ({state})\n")
    click.echo(f"  activation folder: {report['activation_folder']}")
    click.echo(f"  frameworks:        {', '.join(report['frameworks'])}")
    click.echo(f"  parsers:           {', '.join(report['parsers'])}")
    click.echo(f"  key style:         {report['keystyle']}")
    click.echo(f"  locales paths:     {', '.join(report['locales_paths'] or []) or '-'}")
    click.echo(f"  path matchers:     {', '.join(report['path_matchers']) or '-'}")
    click.echo(f"  locales:           {', '.join(report['locales']) or '-'}")


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose logging")
def main(verbose: bool) -> None:
    """i18nscope: detect i18n frameworks and locale settings in a workspace."""
    setup_logging("DEBUG" if verbose else None)


@main.command("detect")
@click.argument("root", type=click.Path(exists=True, file_okay=False))
@click.option("--file", "active_file", default=None, help="Active file (default: workspace root)")
@click.option("--settings", default=None, type=click.Path(exists=True, dir_okay=False),
              help="JSON settings file to read i18nscope.* options from")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def detect(root: str, active_file: str | None, settings: str | None, as_json: bool) -> None:
    """Resolve active frameworks and derived settings for ROOT."""
    root_path = Path(root).resolve()
    config = _load_config(settings)

    file_path = None
    if active_file:
        file_path = Path(active_file)
        if not file_path.is_absolute():
            file_path = root_path / file_path

    report = asyncio.run(_detect(root_path, file_path, config))
    if as_json:
        click.echo(json.dumps(report, indent=2))
    else:
        _print_report(report)


@main.command("scan")
@click.argument("root", type=click.Path(exists=True, file_okay=False))
def scan(root: str) -> None:
    """List declared dependency names under ROOT, per manifest format."""
    deps = get_package_dependencies(Path(root).resolve())
    for format_id, names in deps.items():
        if names is None:
            click.echo(f"{format_id}: not found")
            continue
        click.echo(f"{format_id}: {len(names)} dependencies")
        for name in sorted(names):
            click.echo(f"  {name}")


@main.command("frameworks")
def frameworks() -> None:
    """List supported frameworks in activation order."""
    for fw in create_default_registry().list_all():
        detection = ", ".join(
            f"{fmt}: {' '.join(names)}" for fmt, names in fw.detection.items()
        )
        click.echo(f"{fw.id:<16} {fw.display:<16} {detection or '(custom detector)'}")


if __name__ == "__main__":
    main()
