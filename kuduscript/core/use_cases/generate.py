"""
Generate use case — build a request, then locate, plan, render and write.

``build_request`` turns raw option values into a ``GenerationRequest``.
``generate_deployment_script`` (and its async twin) is the single entry
point the CLI calls; it never raises engine errors, it returns them in
a ``GenerateResult``.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from kuduscript.core.config.loader import find_defaults_file, load_defaults
from kuduscript.core.errors import GenerationError, InvalidInvocation
from kuduscript.core.models.project_type import REGISTRY, ProjectType
from kuduscript.core.models.request import GenerationRequest, ResolvedProject
from kuduscript.core.models.script import ScriptDocument, ScriptStep, ScriptType
from kuduscript.core.models.template import GeneratedFile
from kuduscript.core.services.locator import locate
from kuduscript.core.services.strategies import build_plan
from kuduscript.core.services.writer import (
    AsyncConfirmFn,
    ConfirmFn,
    OutputWriter,
    WriteOutcome,
)

logger = logging.getLogger(__name__)

MARKER_FILE = ".deployment"


def first_non_empty(*values):
    """Return the first value that is neither None nor an empty string."""
    for value in values:
        if value is not None and value != "":
            return value
    return None


def _flag_list() -> str:
    return ", ".join(spec.cli_flag for spec in REGISTRY.values())


def selected_type(type_flags: Mapping[ProjectType, str | bool | None]) -> ProjectType:
    """Return the single project type whose flag is set.

    A flag counts as set when its value is True or a string (an empty
    string means "given without a file path").

    Raises:
        InvalidInvocation: Zero or several flags are set.
    """
    selected = [t for t, value in type_flags.items() if value is not None and value is not False]
    if not selected:
        raise InvalidInvocation(f"Please specify one of these flags: {_flag_list()}")
    if len(selected) > 1:
        given = ", ".join(REGISTRY[t].cli_flag for t in selected)
        raise InvalidInvocation(
            f"Please specify only one of these flags: {_flag_list()} (got {given})"
        )
    return selected[0]


def _resolve(value: str | Path, base: Path) -> Path:
    path = Path(value).expanduser()
    return (path if path.is_absolute() else base / path).resolve()


def build_request(
    type_flags: Mapping[ProjectType, str | bool | None],
    *,
    repository_root: str | None = None,
    project_file: str | None = None,
    solution_file: str | None = None,
    site_path: str | None = None,
    output_path: str | None = None,
    script_type: str | None = None,
    no_dot_deployment: bool = False,
    no_solution: bool = False,
    include_dependencies: bool = False,
    config_path: Path | None = None,
) -> GenerationRequest:
    """Build a request from raw option values.

    Flag exclusivity and the script type are validated before any
    file-system access.  Each option is then taken from the first
    non-empty of: command line, defaults file, built-in default.

    Raises:
        InvalidInvocation: Bad flag combination or script type.
        ConfigError: The defaults file is invalid.
    """
    project_type = selected_type(type_flags)

    if script_type is not None and script_type not in ScriptType.__members__.values():
        choices = ", ".join(t.value for t in ScriptType)
        raise InvalidInvocation(f"Unknown script type '{script_type}' (expected one of: {choices})")

    cwd = Path.cwd()
    repo = _resolve(repository_root or ".", cwd)

    defaults_path = config_path or find_defaults_file(repo)
    defaults = load_defaults(defaults_path)
    defaults_base = defaults_path.parent.resolve() if defaults_path else repo

    def from_defaults(value: str | None) -> Path | None:
        return _resolve(value, defaults_base) if value else None

    flag_value = type_flags[project_type]
    flag_project = flag_value if isinstance(flag_value, str) else None
    explicit_project = first_non_empty(flag_project, project_file)

    request = GenerationRequest(
        repository_root=repo,
        site_path=first_non_empty(
            _resolve(site_path, cwd) if site_path else None,
            from_defaults(defaults.site_path),
            repo,
        ),
        output_path=first_non_empty(
            _resolve(output_path, cwd) if output_path else None,
            from_defaults(defaults.output_path),
            repo,
        ),
        project_type=project_type,
        project_file=_resolve(explicit_project, cwd) if explicit_project else None,
        solution_file=_resolve(solution_file, cwd) if solution_file else None,
        script_type=first_non_empty(script_type, defaults.script_type, ScriptType.BATCH),
        no_dot_deployment=no_dot_deployment or bool(defaults.no_dot_deployment),
        no_solution=no_solution or bool(defaults.no_solution),
        include_dependencies=include_dependencies or bool(defaults.include_dependencies),
        extra_excludes=tuple(defaults.exclude),
    )
    logger.debug("Built request: %s", request)
    return request


@dataclass
class GenerateResult:
    """Result of one generation call."""

    status: str = "ok"  # ok | declined | failed
    request: GenerationRequest | None = None
    resolved: ResolvedProject | None = None
    steps: list[ScriptStep] = field(default_factory=list)
    files: list[GeneratedFile] = field(default_factory=list)
    error: GenerationError | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    def to_dict(self) -> dict:
        result: dict = {"status": self.status}
        if self.error:
            result["error"] = self.error.to_dict()
            return result

        if self.request:
            result["project_type"] = self.request.project_type.value
            result["script_type"] = self.request.script_type.value
        if self.resolved:
            result["project_file"] = (
                str(self.resolved.project_file) if self.resolved.project_file else None
            )
            result["solution_file"] = (
                str(self.resolved.solution_file) if self.resolved.solution_file else None
            )
        result["steps"] = [s.name for s in self.steps]
        result["files"] = [
            {"path": str(f.path), "reason": f.reason, "written": f.written} for f in self.files
        ]
        return result


def prepare_files(request: GenerationRequest, result: GenerateResult) -> list[GeneratedFile]:
    """Locate, plan and render; fills *result* and returns the files to write."""
    resolved = locate(
        request.repository_root,
        request.project_type,
        project_file=request.project_file,
        solution_file=request.solution_file,
        no_solution=request.no_solution,
        site_path=request.site_path,
    )
    result.resolved = resolved

    steps = build_plan(resolved, request)
    result.steps = steps

    document = ScriptDocument(script_type=request.script_type, steps=tuple(steps))
    files = [
        GeneratedFile(
            path=request.output_path / document.file_name,
            content=document.render(),
            reason=f"Deployment script for {REGISTRY[request.project_type].label}",
        )
    ]

    marker = next((s.marker for s in steps if s.marker is not None), None)
    if marker is not None:
        files.append(
            GeneratedFile(
                path=request.repository_root / MARKER_FILE,
                content=marker.to_ini(),
                reason="Deployment marker",
            )
        )
    result.files = files
    return files


def _finish(result: GenerateResult, outcome: WriteOutcome) -> GenerateResult:
    result.status = "ok" if outcome is WriteOutcome.WRITTEN else "declined"
    logger.info("Generation finished: %s", result.status)
    return result


def _fail(result: GenerateResult, error: GenerationError) -> GenerateResult:
    logger.debug("Generation failed: %s", error, exc_info=True)
    result.status = "failed"
    result.error = error
    return result


def generate_deployment_script(request: GenerationRequest, confirm: ConfirmFn) -> GenerateResult:
    """Generate and write the deployment script for *request*.

    Args:
        request: Fully resolved request.
        confirm: Called with a message for each existing destination;
            returning False cancels the whole write.

    Returns:
        GenerateResult — ``ok``, ``declined`` or ``failed`` with ``error``.
    """
    result = GenerateResult(request=request)
    try:
        files = prepare_files(request, result)
        outcome = OutputWriter().write(files, confirm)
    except GenerationError as e:
        return _fail(result, e)
    return _finish(result, outcome)


async def generate_deployment_script_async(
    request: GenerationRequest, confirm: AsyncConfirmFn
) -> GenerateResult:
    """Async variant: awaits *confirm* instead of blocking on it.

    Locating, planning and rendering run in a worker thread; the event
    loop is free while the repository is scanned.
    """
    result = GenerateResult(request=request)
    try:
        files = await asyncio.to_thread(prepare_files, request, result)
        outcome = await OutputWriter().write_async(files, confirm)
    except GenerationError as e:
        return _fail(result, e)
    return _finish(result, outcome)
