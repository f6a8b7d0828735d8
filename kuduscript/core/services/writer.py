"""
Output writer — persist generated files after overwrite confirmation.

Every existing destination is confirmed before anything is written, so
a declined prompt leaves the file system exactly as it was.

State machine:
    NOT_STARTED → CHECKING → {CONFIRMING → WRITING | SKIPPED} → DONE | FAILED
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Sequence
from enum import StrEnum
from pathlib import Path

from kuduscript.core.errors import WriteError
from kuduscript.core.models.template import GeneratedFile

logger = logging.getLogger(__name__)

ConfirmFn = Callable[[str], bool]
AsyncConfirmFn = Callable[[str], Awaitable[bool]]


class WriteState(StrEnum):
    NOT_STARTED = "not_started"
    CHECKING = "checking"
    CONFIRMING = "confirming"
    WRITING = "writing"
    SKIPPED = "skipped"
    DONE = "done"
    FAILED = "failed"


class WriteOutcome(StrEnum):
    WRITTEN = "written"
    DECLINED = "declined"


def always_confirm(message: str) -> bool:
    """Confirm function used in suppressed-prompt mode."""
    return True


def overwrite_message(path: Path) -> str:
    return f"The file: '{path}' already exists. Are you sure you want to overwrite it?"


class OutputWriter:
    """Write one batch of generated files.

    One instance per generation call; ``state`` records how far it got.
    """

    def __init__(self) -> None:
        self.state = WriteState.NOT_STARTED

    def _transition(self, state: WriteState) -> None:
        logger.debug("Writer %s → %s", self.state.value, state.value)
        self.state = state

    def _existing(self, files: Sequence[GeneratedFile]) -> list[GeneratedFile]:
        self._transition(WriteState.CHECKING)
        return [f for f in files if f.path.exists()]

    def _write_all(self, files: Sequence[GeneratedFile]) -> WriteOutcome:
        self._transition(WriteState.WRITING)
        for f in files:
            try:
                f.path.parent.mkdir(parents=True, exist_ok=True)
                # newline="" keeps CRLF batch output byte-exact
                f.path.write_text(f.content, encoding="utf-8", newline="")
            except OSError as e:
                self._transition(WriteState.FAILED)
                raise WriteError(f.path, e.strerror or str(e)) from e
            f.written = True
            logger.info("Wrote %s", f.path)
        self._transition(WriteState.DONE)
        return WriteOutcome.WRITTEN

    def _declined(self, path: Path) -> WriteOutcome:
        logger.info("Overwrite of %s declined; nothing written", path)
        self._transition(WriteState.SKIPPED)
        self._transition(WriteState.DONE)
        return WriteOutcome.DECLINED

    def write(self, files: Sequence[GeneratedFile], confirm: ConfirmFn) -> WriteOutcome:
        """Write *files*, asking *confirm* for each existing destination.

        Raises:
            WriteError: A file could not be written.
        """
        existing = self._existing(files)
        if existing:
            self._transition(WriteState.CONFIRMING)
            for f in existing:
                if not confirm(overwrite_message(f.path)):
                    return self._declined(f.path)
        return self._write_all(files)

    async def write_async(
        self, files: Sequence[GeneratedFile], confirm: AsyncConfirmFn
    ) -> WriteOutcome:
        """Same as :meth:`write` with an awaitable confirm function."""
        existing = self._existing(files)
        if existing:
            self._transition(WriteState.CONFIRMING)
            for f in existing:
                if not await confirm(overwrite_message(f.path)):
                    return self._declined(f.path)
        return self._write_all(files)


def write_file(path: Path, content: str, confirm: ConfirmFn) -> WriteOutcome:
    """Write a single file, confirming first when it already exists."""
    return OutputWriter().write([GeneratedFile(path=path, content=content)], confirm)
