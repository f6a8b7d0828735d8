"""
Defaults model — per-repository option defaults.

Loaded from ``.kuduscript.yml``.  Every field is optional; a value set
here is used only when the matching command-line option is absent.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from kuduscript.core.models.script import ScriptType


class ScriptDefaults(BaseModel):
    """Option defaults read from the repository's defaults file.

    Relative paths are resolved against the directory holding the file.
    """

    model_config = ConfigDict(extra="forbid")

    script_type: ScriptType | None = None
    site_path: str | None = None
    output_path: str | None = None
    no_dot_deployment: bool | None = None
    no_solution: bool | None = None
    include_dependencies: bool | None = None
    exclude: list[str] = Field(default_factory=list)
