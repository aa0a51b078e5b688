"""
CLI commands for single-package operations.

Thin wrappers over ``pacstate.core.services.reconciler``.
"""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from pacstate.core.errors import ConfigurationError, PacstateError


def _reconciler(ctx: click.Context):
    """Build the reconciler from the resolved settings, or exit."""
    from pacstate.core.config.loader import load_settings
    from pacstate.core.services.reconciler import build_reconciler

    config_path: Path | None = ctx.obj.get("config_path")
    try:
        settings = load_settings(config_path)
        return build_reconciler(settings, mock_mode=ctx.obj.get("mock", False))
    except ConfigurationError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)


@click.group("pkg")
def packages() -> None:
    """Packages — query, list, install, remove, update, latest."""


# ── Observe ─────────────────────────────────────────────────────


@packages.command()
@click.argument("name")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def query(ctx: click.Context, name: str, as_json: bool) -> None:
    """Show the installed version of a package."""
    state = _reconciler(ctx).query(name)

    if as_json:
        click.echo(json.dumps(state.to_dict() if state else None, indent=2))
        return

    if state is None or not state.installed:
        click.secho(f"✗ {name} is not installed", fg="yellow")
        sys.exit(1)

    click.secho(f"✓ {name} ", fg="green", nl=False)
    click.echo(state.ensure)


@packages.command("list")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def list_packages(ctx: click.Context, as_json: bool) -> None:
    """List installed packages."""
    pkgs = _reconciler(ctx).instances()

    if pkgs is None:
        if as_json:
            click.echo(json.dumps({"error": "Package listing failed"}, indent=2))
        else:
            click.secho("❌ Package listing failed", fg="red")
        sys.exit(1)

    if as_json:
        click.echo(json.dumps([p.properties() for p in pkgs], indent=2))
        return

    click.secho(f"📦 Installed ({len(pkgs)}):", fg="cyan", bold=True)
    for p in pkgs:
        click.echo(f"   {p.name:<35} {p.ensure}")


@packages.command()
@click.argument("name")
@click.pass_context
def latest(ctx: click.Context, name: str) -> None:
    """Refresh the catalog and show the newest available version."""
    try:
        version = _reconciler(ctx).latest(name)
    except PacstateError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    click.echo(version)


# ── Act ─────────────────────────────────────────────────────────


@packages.command()
@click.argument("name")
@click.option("--source", "-s", default=None, help="Package file path or http/ftp/file URL.")
@click.pass_context
def install(ctx: click.Context, name: str, source: str | None) -> None:
    """Install a package from the repositories or a source."""
    reconciler = _reconciler(ctx)
    click.secho(f"📦 Installing {name}...", fg="cyan")

    try:
        reconciler.install(name, source=source)
    except PacstateError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    click.secho(f"✅ Installed {name}", fg="green", bold=True)


@packages.command()
@click.argument("name")
@click.pass_context
def remove(ctx: click.Context, name: str) -> None:
    """Remove a package."""
    reconciler = _reconciler(ctx)
    click.secho(f"🗑️  Removing {name}...", fg="cyan")

    try:
        reconciler.uninstall(name)
    except PacstateError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    click.secho(f"✅ Removed {name}", fg="green", bold=True)


@packages.command()
@click.argument("name")
@click.pass_context
def update(ctx: click.Context, name: str) -> None:
    """Upgrade a package from the repositories."""
    reconciler = _reconciler(ctx)
    click.secho(f"📦 Updating {name}...", fg="cyan")

    try:
        reconciler.update(name)
    except PacstateError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    click.secho(f"✅ Updated {name}", fg="green", bold=True)
