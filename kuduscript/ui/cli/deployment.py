"""
CLI command for deployment script generation.

Thin wrapper over ``kuduscript.core.use_cases.generate``.
"""

from __future__ import annotations

import json
import sys
from collections.abc import Callable

import click

from kuduscript.core.models.project_type import REGISTRY, ProjectType
from kuduscript.core.models.script import ScriptType


def _param_name(project_type: ProjectType) -> str:
    return "type_" + project_type.value.replace("-", "_")


def project_type_options(func: Callable) -> Callable:
    """Add one selector option per registered project type."""
    for project_type, spec in reversed(REGISTRY.items()):
        if spec.takes_project_value:
            option = click.option(
                spec.cli_flag,
                _param_name(project_type),
                is_flag=False,
                flag_value="",
                default=None,
                metavar="[PROJECT_FILE]",
                help=f"Create a deployment script for {spec.label} (optionally the project file path).",
            )
        else:
            option = click.option(
                spec.cli_flag,
                _param_name(project_type),
                is_flag=True,
                default=False,
                help=f"Create a deployment script for {spec.label}.",
            )
        func = option(func)
    return func


def _prompt_confirm(message: str) -> bool:
    try:
        return click.confirm(message, default=False)
    except click.Abort:
        return False


@click.command("deploymentscript")
@click.option("-r", "--repositoryRoot", "repository_root", default=None,
              help="The root path for the repository (default: .).")
@project_type_options
@click.option("--projectFile", "project_file", default=None,
              help="The project file path (for types that build a project).")
@click.option("-s", "--solutionFile", "solution_file", default=None,
              help="The solution file path (sln).")
@click.option("-p", "--sitePath", "site_path", default=None,
              help="The path to the site being deployed (default: same as repositoryRoot).")
@click.option("-t", "--scriptType", "script_type", default=None,
              type=click.Choice([t.value for t in ScriptType], case_sensitive=False),
              help="The script output type (default: batch).")
@click.option("-o", "--outputPath", "output_path", default=None,
              help="The path to output generated script (default: same as repositoryRoot).")
@click.option("-y", "--suppressPrompt", "suppress_prompt", is_flag=True,
              help="Suppresses prompting to confirm you want to overwrite an existing destination file.")
@click.option("--no-dot-deployment", "no_dot_deployment", is_flag=True,
              help="Do not generate the .deployment file.")
@click.option("--no-solution", "no_solution", is_flag=True,
              help="Do not require a solution file path.")
@click.option("--include-dependencies", "include_dependencies", is_flag=True,
              help="Copy installed dependency directories (e.g. node_modules) instead of excluding them.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def deploymentscript(
    ctx: click.Context,
    repository_root: str | None,
    project_file: str | None,
    solution_file: str | None,
    site_path: str | None,
    script_type: str | None,
    output_path: str | None,
    suppress_prompt: bool,
    no_dot_deployment: bool,
    no_solution: bool,
    include_dependencies: bool,
    as_json: bool,
    **type_values: str | bool | None,
) -> None:
    """Generate a custom deployment script.

    Examples:

        kuduscript deploymentscript --node -y

        kuduscript deploymentscript --aspWAP src/Web/Web.csproj -s App.sln -t posh

        kuduscript deploymentscript --aspNetCore --no-solution -t bash
    """
    from kuduscript.core.errors import GenerationError
    from kuduscript.core.services.writer import always_confirm
    from kuduscript.core.use_cases.generate import build_request, generate_deployment_script

    type_flags = {t: type_values[_param_name(t)] for t in REGISTRY}

    try:
        request = build_request(
            type_flags,
            repository_root=repository_root,
            project_file=project_file,
            solution_file=solution_file,
            site_path=site_path,
            output_path=output_path,
            script_type=script_type.lower() if script_type else None,
            no_dot_deployment=no_dot_deployment,
            no_solution=no_solution,
            include_dependencies=include_dependencies,
            config_path=ctx.obj.get("config_path") if ctx.obj else None,
        )
    except GenerationError as e:
        if as_json:
            click.echo(json.dumps({"status": "failed", "error": e.to_dict()}, indent=2))
        else:
            click.secho(f"❌ {e}", fg="red", err=True)
        sys.exit(1)

    confirm = always_confirm if suppress_prompt else _prompt_confirm
    result = generate_deployment_script(request, confirm)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        sys.exit(0 if result.ok else 1)

    if result.error:
        click.secho(f"❌ {result.error}", fg="red", err=True)
        sys.exit(1)

    if result.status == "declined":
        click.secho("⚠️  Overwrite declined — nothing was written", fg="yellow", err=True)
        sys.exit(1)

    quiet = ctx.obj.get("quiet", False) if ctx.obj else False
    if not quiet:
        label = REGISTRY[request.project_type].label
        click.secho(f"\n🚀 {label} deployment script ({request.script_type.value})", fg="cyan", bold=True)
        if result.resolved and result.resolved.project_file:
            click.echo(f"   Project:  {result.resolved.project_file}")
        if result.resolved and result.resolved.solution_file:
            click.echo(f"   Solution: {result.resolved.solution_file}")
        for f in result.files:
            click.secho(f"   ✓ {f.path}", fg="green")
        click.echo()
