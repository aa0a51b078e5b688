"""
pacstate — CLI entrypoint.

Usage:
    python -m pacstate.main --help
    python -m pacstate.main pkg query vim
    python -m pacstate.main apply --dry-run
    python -m pacstate.main config check
"""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path

import click

from pacstate import __version__
from pacstate.core.observability.logging_config import (
    FILE_ENV_VAR,
    FILE_LEVEL_ENV_VAR,
    resolve_level,
    setup_logging,
)


@click.group()
@click.version_option(version=__version__, prog_name="pacstate")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to pacstate.yml (default: auto-detect).",
)
@click.option("--mock", is_flag=True, help="Simulate pacman (no real execution).")
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
    mock: bool,
) -> None:
    """pacstate — keep pacman packages in their declared state."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None
    ctx.obj["mock"] = mock

    # ── Logging setup (once, at process start) ──────────────────
    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get(FILE_ENV_VAR),
        log_file_level=os.environ.get(FILE_LEVEL_ENV_VAR),
    )


@cli.command()
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.option("--dry-run", is_flag=True, help="Show what would change without changing it.")
@click.option("--package", "-p", "only", multiple=True, help="Only reconcile these packages.")
@click.pass_context
def apply(ctx: click.Context, as_json: bool, dry_run: bool, only: tuple[str, ...]) -> None:
    """Reconcile every package declared in pacstate.yml.

    Examples:

        pacstate apply

        pacstate apply --dry-run

        pacstate apply -p vim -p htop
    """
    from pacstate.core.config.loader import load_manifest, with_env_overrides
    from pacstate.core.errors import ConfigurationError
    from pacstate.core.services.reconciler import build_reconciler
    from pacstate.core.use_cases.apply import apply_manifest

    try:
        manifest = load_manifest(ctx.obj.get("config_path"))
        settings = with_env_overrides(manifest.settings)
        reconciler = build_reconciler(settings, mock_mode=ctx.obj.get("mock", False))
    except ConfigurationError as e:
        if as_json:
            click.echo(json.dumps({"error": str(e)}, indent=2))
        else:
            click.secho(f"❌ {e}", fg="red")
        sys.exit(1)

    report = apply_manifest(
        manifest,
        reconciler,
        dry_run=dry_run,
        only=list(only) if only else None,
    )

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
        if report.failed > 0:
            sys.exit(1)
        return

    mode_label = "[dry-run] " if dry_run else "[mock] " if ctx.obj.get("mock") else ""
    click.secho(f"\n⚡ {mode_label}apply — {report.total} packages", fg="cyan", bold=True)
    click.echo()

    for r in report.results:
        if r.action == "failed":
            click.secho(f"   ✗ {r.name}", fg="red")
            if r.error:
                for line in r.error.split("\n")[:5]:
                    click.echo(f"     │ {line}")
        elif r.changed:
            click.secho(f"   ✓ {r.name} ", fg="green", nl=False)
            click.echo(f"{r.action} ({r.before or '-'} → {r.after or '-'})")
        else:
            click.echo(f"   · {r.name} unchanged ({r.before or 'absent'})")

    click.echo()
    status_color = {"ok": "green", "partial": "yellow", "failed": "red"}.get(report.status, "white")
    click.secho(
        f"   Result: {report.changed} changed, {report.failed} failed",
        fg=status_color,
        bold=True,
    )
    click.echo()

    if report.failed > 0:
        sys.exit(1)


@cli.group()
def config() -> None:
    """Manifest configuration commands."""


@config.command("check")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def config_check(ctx: click.Context, as_json: bool) -> None:
    """Validate pacstate.yml."""
    from pacstate.core.use_cases.config_check import check_config

    result = check_config(config_path=ctx.obj.get("config_path"))

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.valid else 1)

    if result.valid:
        assert result.manifest is not None  # guaranteed when valid
        click.secho("✅ Configuration is valid", fg="green", bold=True)
        click.echo(f"   Tool: {result.manifest.settings.tool}")
        click.echo(f"   Packages: {len(result.manifest.packages)}")
    else:
        click.secho("❌ Configuration errors:", fg="red", bold=True)
        for err in result.errors:
            click.echo(f"   • {err}")

    if result.warnings:
        click.echo()
        click.secho("⚠️  Warnings:", fg="yellow")
        for warn in result.warnings:
            click.echo(f"   • {warn}")

    if not result.valid:
        click.echo()
        sys.exit(1)

    click.echo()


# ── Register sub-command groups from pacstate/ui/cli/ ─────────────

from pacstate.ui.cli.packages import packages

cli.add_command(packages)


if __name__ == "__main__":
    cli()
