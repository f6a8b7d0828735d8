"""
Renderers — turn a step sequence into batch, bash or PowerShell text.

Each renderer module exposes one ``ScriptRenderer`` subclass.  Rendering
is pure: the same steps and script type always give the same text.
"""

from __future__ import annotations

from collections.abc import Sequence

from kuduscript.core.models.script import ScriptStep, ScriptType
from kuduscript.core.services.renderers.base import ScriptRenderer
from kuduscript.core.services.renderers.bash import BashRenderer
from kuduscript.core.services.renderers.batch import BatchRenderer
from kuduscript.core.services.renderers.posh import PoshRenderer

_RENDERERS: dict[ScriptType, type[ScriptRenderer]] = {
    ScriptType.BATCH: BatchRenderer,
    ScriptType.BASH: BashRenderer,
    ScriptType.POSH: PoshRenderer,
}


def get_renderer(script_type: ScriptType) -> ScriptRenderer:
    """Return a renderer for *script_type*."""
    return _RENDERERS[ScriptType(script_type)]()


def render(steps: Sequence[ScriptStep], script_type: ScriptType) -> str:
    """Render *steps* as literal *script_type* text."""
    return get_renderer(script_type).render(steps)


__all__ = ["BashRenderer", "BatchRenderer", "PoshRenderer", "ScriptRenderer", "get_renderer", "render"]
