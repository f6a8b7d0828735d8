"""
Project locator — find the project and solution files a strategy needs.

Explicit paths are trusted (only their existence is checked).  Otherwise
the repository is searched recursively and exactly one match is
required.

Read-only — no writes.
"""

from __future__ import annotations

import logging
from pathlib import Path

from kuduscript.core.errors import AmbiguousError, NotFoundError, OutsideRepositoryError
from kuduscript.core.models.project_type import SOLUTION_PATTERNS, ProjectType, get_spec
from kuduscript.core.models.request import ResolvedProject

logger = logging.getLogger(__name__)

# Directories never searched: VCS metadata, installed deps, build output
_SKIP_DIRS = frozenset({".git", ".hg", ".svn", "node_modules", "bin", "obj"})


def find_candidates(root: Path, patterns: tuple[str, ...]) -> list[Path]:
    """Return files under *root* matching any of *patterns*, sorted."""
    found: set[Path] = set()
    for pattern in patterns:
        for path in root.rglob(pattern):
            rel_parts = path.relative_to(root).parts[:-1]
            if any(part in _SKIP_DIRS for part in rel_parts):
                continue
            if path.is_file():
                found.add(path)
    return sorted(found)


def find_single(root: Path, patterns: tuple[str, ...], what: str) -> Path:
    """Find exactly one file matching *patterns* under *root*.

    Raises:
        NotFoundError: Nothing matched.
        AmbiguousError: More than one file matched.
    """
    candidates = find_candidates(root, patterns)
    logger.debug("Searched %s for %s: %d candidate(s)", root, patterns, len(candidates))

    if not candidates:
        raise NotFoundError(
            f"No {what} matching {', '.join(patterns)} found under {root}",
            what=what,
            root=root,
            patterns=patterns,
        )
    if len(candidates) > 1:
        listing = ", ".join(str(c.relative_to(root)) for c in candidates)
        raise AmbiguousError(
            f"Found {len(candidates)} {what}s under {root} ({listing}); "
            f"specify which one to use",
            what=what,
            root=root,
            patterns=patterns,
            candidates=candidates,
        )
    return candidates[0]


def _check_explicit(path: Path, root: Path, what: str) -> Path:
    if not path.is_file():
        raise NotFoundError(f"The {what} does not exist: {path}", what=what, root=root)
    _check_inside(path, root, what)
    return path


def _check_inside(path: Path, root: Path, what: str) -> None:
    if not path.is_relative_to(root):
        raise OutsideRepositoryError(
            f"The {what} {path} is not under the repository root {root}",
            what=what,
            root=root,
        )


def locate(
    repository_root: Path,
    project_type: ProjectType,
    project_file: Path | None = None,
    solution_file: Path | None = None,
    no_solution: bool = False,
    site_path: Path | None = None,
) -> ResolvedProject:
    """Resolve the concrete files for a generation call.

    Args:
        repository_root: Absolute repository root.
        project_type: Selected project type.
        project_file: Explicit project file (skips the search).
        solution_file: Explicit solution file (skips the search).
        no_solution: Skip the solution file entirely.
        site_path: Deployable root (default: repository root).

    Returns:
        ResolvedProject with absolute paths.

    Raises:
        NotFoundError, AmbiguousError, OutsideRepositoryError.
    """
    if not repository_root.is_dir():
        raise NotFoundError(
            f"Repository root does not exist: {repository_root}",
            what="repository root",
            root=repository_root,
        )

    deploy_root = site_path or repository_root
    _check_inside(deploy_root, repository_root, "site path")

    spec = get_spec(project_type)

    resolved_project: Path | None = None
    if project_file is not None and (spec.requires_project or spec.accepts_project):
        resolved_project = _check_explicit(project_file, repository_root, "project file")
    elif spec.requires_project:
        resolved_project = find_single(repository_root, spec.project_patterns, "project file")

    resolved_solution: Path | None = None
    if spec.requires_solution and not no_solution:
        if solution_file is not None:
            resolved_solution = _check_explicit(solution_file, repository_root, "solution file")
        else:
            resolved_solution = find_single(repository_root, SOLUTION_PATTERNS, "solution file")

    logger.info(
        "Resolved %s project: project=%s solution=%s",
        project_type.value,
        resolved_project,
        resolved_solution,
    )
    return ResolvedProject(
        repository_root=repository_root,
        deploy_root=deploy_root,
        project_file=resolved_project,
        solution_file=resolved_solution,
    )
