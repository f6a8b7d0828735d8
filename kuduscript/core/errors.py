"""
Typed errors raised by the generation engine.

Services raise these; the generate use case turns them into a
``GenerateResult`` and the CLI picks the exit code.  None of them are
transient, so nothing is retried.
"""

from __future__ import annotations

from pathlib import Path


class GenerationError(Exception):
    """Base class for every engine failure."""

    kind = "generation"

    def to_dict(self) -> dict:
        return {"kind": self.kind, "message": str(self)}


class InvalidInvocation(GenerationError):
    """Bad option combination, detected before any file-system access."""

    kind = "invalid_invocation"


class UnsupportedTypeError(GenerationError):
    """A project type with no registered strategy (programming error)."""

    kind = "unsupported_type"


class WriteError(GenerationError):
    """The output writer could not persist a file."""

    kind = "write"

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Cannot write {path}: {reason}")
        self.path = path


class LocatorError(GenerationError):
    """Base for project / solution file resolution failures.

    Attributes:
        what:       Which file was searched for ("project file", ...).
        root:       Directory that was searched.
        patterns:   Glob patterns that were tried.
        candidates: Matching files, when any.
    """

    kind = "locator"

    def __init__(
        self,
        message: str,
        *,
        what: str,
        root: Path,
        patterns: tuple[str, ...] = (),
        candidates: list[Path] | None = None,
    ) -> None:
        super().__init__(message)
        self.what = what
        self.root = root
        self.patterns = patterns
        self.candidates = candidates or []

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update(
            what=self.what,
            root=str(self.root),
            patterns=list(self.patterns),
            candidates=[str(c) for c in self.candidates],
        )
        return data


class NotFoundError(LocatorError):
    """No file matched, or an explicit path does not exist."""

    kind = "not_found"


class AmbiguousError(LocatorError):
    """More than one file matched; the caller must pass one explicitly."""

    kind = "ambiguous"


class OutsideRepositoryError(LocatorError):
    """A path that must live under the repository root does not."""

    kind = "outside_repository"
