"""
kuduscript — CLI entrypoint.

Usage:
    python -m kuduscript.main --help
    python -m kuduscript.main deploymentscript --node -y
    python -m kuduscript.main types
"""

from __future__ import annotations

import json
import os
from pathlib import Path

import click

from kuduscript import __version__
from kuduscript.core.observability.logging_config import setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="kuduscript")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False),
    default=None,
    help="Path to a defaults file (default: <repositoryRoot>/.kuduscript.yml).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """kuduscript — generate Kudu deployment scripts for a repository."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    # ── Logging setup (once, at process start) ──────────────────
    if debug:
        level = "DEBUG"
    elif verbose:
        level = "INFO"
    elif quiet:
        level = "ERROR"
    else:
        level = os.environ.get("KUDUSCRIPT_LOG_LEVEL", "WARNING")

    setup_logging(
        level=level,
        log_file=os.environ.get("KUDUSCRIPT_LOG_FILE"),
        log_file_level=os.environ.get("KUDUSCRIPT_LOG_FILE_LEVEL"),
    )


@cli.command("types")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
def types(as_json: bool) -> None:
    """List supported project types and the flags that select them."""
    from kuduscript.core.models.project_type import REGISTRY

    if as_json:
        data = [
            {
                "type": t.value,
                "label": spec.label,
                "flag": spec.cli_flag,
                "project_patterns": list(spec.project_patterns),
                "requires_project": spec.requires_project,
                "requires_solution": spec.requires_solution,
            }
            for t, spec in REGISTRY.items()
        ]
        click.echo(json.dumps(data, indent=2))
        return

    click.secho("📦 Project types:", fg="cyan", bold=True)
    for t, spec in REGISTRY.items():
        patterns = f"  [{', '.join(spec.project_patterns)}]" if spec.requires_project else ""
        click.echo(f"   {spec.cli_flag:<24} {spec.label}{patterns}")
    click.echo()


# ── Register sub-commands from kuduscript/ui/cli/ ─────────────────

from kuduscript.ui.cli.deployment import deploymentscript  # noqa: E402

cli.add_command(deploymentscript)


if __name__ == "__main__":
    cli()
