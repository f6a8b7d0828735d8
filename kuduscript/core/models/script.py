"""
Script model — the flavor-neutral description of a deployment script.

Strategies produce an ordered list of ``ScriptStep`` objects.  Each step
holds commands whose arguments reference script variables through
``ScriptPath`` rather than literal paths, so the rendered script stays
relocatable.  Renderers turn the steps into batch, bash or PowerShell
text.
"""

from __future__ import annotations

from enum import IntEnum, StrEnum
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field


class ScriptType(StrEnum):
    """Output flavor of the generated script."""

    BATCH = "batch"
    BASH = "bash"
    POSH = "posh"


SCRIPT_FILE_NAMES: dict[ScriptType, str] = {
    ScriptType.BATCH: "deploy.cmd",
    ScriptType.BASH: "deploy.sh",
    ScriptType.POSH: "deploy.ps1",
}


class StepPhase(IntEnum):
    """Execution phases in the order they appear in a script."""

    SETUP = 0
    INSTALL = 10
    BUILD = 20
    SYNC = 30
    POST_SYNC = 40
    CLEANUP = 50
    MARKER = 60


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class ScriptPath(_Frozen):
    """A path anchored at a script variable.

    ``var=None`` anchors at the directory containing the script itself.
    ``parts`` are relative segments joined with the flavor's separator.
    ``executable`` appends ``.exe`` on Windows flavors.
    """

    var: str | None = None
    parts: tuple[str, ...] = ()
    executable: bool = False

    def join(self, *parts: str) -> ScriptPath:
        return ScriptPath(var=self.var, parts=self.parts + parts, executable=self.executable)


class Arg(_Frozen):
    """One command-line argument made of literal text and path pieces."""

    pieces: tuple[str | ScriptPath, ...]

    @property
    def has_path(self) -> bool:
        return any(isinstance(p, ScriptPath) for p in self.pieces)


def var(name: str, *parts: str, executable: bool = False) -> ScriptPath:
    """Shorthand for a path anchored at variable *name*."""
    return ScriptPath(var=name, parts=parts, executable=executable)


def arg(*pieces: str | ScriptPath) -> Arg:
    """Shorthand for an argument built from *pieces*."""
    return Arg(pieces=pieces)


def args(*items: str | ScriptPath | Arg) -> tuple[Arg, ...]:
    """Turn a mixed list of strings, paths and args into an argv tuple."""
    return tuple(i if isinstance(i, Arg) else Arg(pieces=(i,)) for i in items)


# ── Commands ────────────────────────────────────────────────────


class RunCommand(_Frozen):
    """Run a program; the script aborts if it exits non-zero."""

    kind: Literal["run"] = "run"
    argv: tuple[Arg, ...]
    cwd: ScriptPath | None = None


class SyncCommand(_Frozen):
    """Copy a file tree into the target with KuduSync."""

    kind: Literal["sync"] = "sync"
    source: ScriptPath
    target: ScriptPath
    excludes: tuple[str, ...] = ()


class WriteFileCommand(_Frozen):
    """Write literal lines to a file."""

    kind: Literal["write_file"] = "write_file"
    path: ScriptPath
    lines: tuple[str, ...]


class MakeDirCommand(_Frozen):
    kind: Literal["mkdir"] = "mkdir"
    path: ScriptPath


class RemoveDirCommand(_Frozen):
    kind: Literal["rmdir"] = "rmdir"
    path: ScriptPath


Command = Annotated[
    RunCommand | SyncCommand | WriteFileCommand | MakeDirCommand | RemoveDirCommand,
    Field(discriminator="kind"),
]


# ── Steps ───────────────────────────────────────────────────────


class ScriptVariable(_Frozen):
    """A variable assigned only when the environment leaves it undefined."""

    name: str
    default: Arg


class DeploymentMarker(_Frozen):
    """Manifest telling the hosting pipeline which script to invoke."""

    command: str
    script_type: ScriptType

    def to_ini(self) -> str:
        # Fixed layout so the marker bytes are stable across runs
        return f"[config]\ncommand = {self.command}\nscript_type = {self.script_type.value}\n"


class ScriptStep(_Frozen):
    """One logical step of a deployment script.

    Attributes:
        phase:           Ordering phase.
        name:            Stable identifier (e.g. ``installDependencies``).
        description:     Comment emitted above the step.
        commands:        Commands run in order.
        only_if_exists:  Run only when all of these paths exist.
        only_if_missing: Run only when none of these paths exist.
        variables:       Variables this step needs declared.
        marker:          Payload of the marker step; not rendered.
    """

    phase: StepPhase
    name: str
    description: str = ""
    commands: tuple[Command, ...] = ()
    only_if_exists: tuple[ScriptPath, ...] = ()
    only_if_missing: tuple[ScriptPath, ...] = ()
    variables: tuple[ScriptVariable, ...] = ()
    marker: DeploymentMarker | None = None

    @property
    def rendered(self) -> bool:
        """Whether the step produces script statements."""
        return self.phase is not StepPhase.MARKER


class ScriptDocument(_Frozen):
    """An ordered step sequence tagged with its output flavor."""

    script_type: ScriptType
    steps: tuple[ScriptStep, ...]

    @property
    def file_name(self) -> str:
        return SCRIPT_FILE_NAMES[self.script_type]

    def render(self) -> str:
        from kuduscript.core.services.renderers import get_renderer

        return get_renderer(self.script_type).render(self.steps)
