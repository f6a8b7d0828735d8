"""
Generated file model — what the output writer persists.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel


class GeneratedFile(BaseModel):
    """A file produced by one generation call.

    Attributes:
        path:    Absolute destination path.
        content: Full file content.
        reason:  Why this file was generated.
        written: Set once the writer has persisted it.
    """

    path: Path
    content: str
    reason: str = ""
    written: bool = False
