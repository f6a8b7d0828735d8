"""
Shared test fixtures and configuration.
"""

from collections.abc import Callable
from pathlib import Path

import pytest

from kuduscript.core.models.project_type import ProjectType
from kuduscript.core.models.request import GenerationRequest, ResolvedProject
from kuduscript.core.models.script import ScriptType


@pytest.fixture
def make_repo(tmp_path: Path) -> Callable[..., Path]:
    """Return a factory that lays out files under ``tmp_path / "repo"``."""

    def _make(files: dict[str, str] | None = None) -> Path:
        root = tmp_path / "repo"
        root.mkdir(exist_ok=True)
        for rel, content in (files or {}).items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        return root.resolve()

    return _make


@pytest.fixture
def make_request() -> Callable[..., GenerationRequest]:
    """Return a factory for requests rooted at a repository."""

    def _make(
        root: Path,
        project_type: ProjectType,
        script_type: ScriptType = ScriptType.BATCH,
        **kwargs,
    ) -> GenerationRequest:
        kwargs.setdefault("site_path", root)
        kwargs.setdefault("output_path", root)
        return GenerationRequest(
            repository_root=root,
            project_type=project_type,
            script_type=script_type,
            **kwargs,
        )

    return _make


@pytest.fixture
def resolved_for() -> Callable[..., ResolvedProject]:
    """Return a factory for resolved projects without touching disk."""

    def _make(root: Path, project: str | None = None, solution: str | None = None) -> ResolvedProject:
        return ResolvedProject(
            repository_root=root,
            deploy_root=root,
            project_file=root / project if project else None,
            solution_file=root / solution if solution else None,
        )

    return _make
