"""
Request models — what the caller asks for and what the locator found.

``GenerationRequest`` is built once by the request builder and passed by
value through the pipeline.  ``ResolvedProject`` is produced by the
locator for a single generation call.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from kuduscript.core.models.project_type import ProjectType
from kuduscript.core.models.script import ScriptType


class GenerationRequest(BaseModel):
    """Resolved options for one generation call.

    All paths are absolute; the request builder resolves them against
    the process working directory.
    """

    model_config = ConfigDict(frozen=True)

    repository_root: Path
    site_path: Path
    output_path: Path
    project_type: ProjectType
    project_file: Path | None = None
    solution_file: Path | None = None
    script_type: ScriptType = ScriptType.BATCH
    no_dot_deployment: bool = False
    no_solution: bool = False
    include_dependencies: bool = False
    extra_excludes: tuple[str, ...] = Field(default_factory=tuple)


class ResolvedProject(BaseModel):
    """Concrete files and directories for one generation call."""

    model_config = ConfigDict(frozen=True)

    repository_root: Path
    deploy_root: Path
    project_file: Path | None = None
    solution_file: Path | None = None

    @property
    def project_dir(self) -> Path | None:
        return self.project_file.parent if self.project_file else None

    def relative(self, path: Path) -> tuple[str, ...]:
        """Segments of *path* relative to the repository root."""
        rel = path.relative_to(self.repository_root)
        return tuple(p for p in rel.parts if p not in ("", "."))
