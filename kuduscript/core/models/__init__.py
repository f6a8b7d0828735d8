"""
Domain models — Pydantic types for script generation.

All models are re-exported here for convenient access:

    from kuduscript.core.models import GenerationRequest, ProjectType, ScriptStep
"""

from kuduscript.core.models.project_type import (
    REGISTRY,
    ProjectType,
    ProjectTypeSpec,
)
from kuduscript.core.models.request import GenerationRequest, ResolvedProject
from kuduscript.core.models.script import (
    Arg,
    DeploymentMarker,
    RunCommand,
    ScriptDocument,
    ScriptPath,
    ScriptStep,
    ScriptType,
    ScriptVariable,
    StepPhase,
    SyncCommand,
)
from kuduscript.core.models.template import GeneratedFile

__all__ = [
    # script.py
    "Arg",
    "DeploymentMarker",
    # template.py
    "GeneratedFile",
    # request.py
    "GenerationRequest",
    # project_type.py
    "ProjectType",
    "ProjectTypeSpec",
    "REGISTRY",
    "ResolvedProject",
    "RunCommand",
    "ScriptDocument",
    "ScriptPath",
    "ScriptStep",
    "ScriptType",
    "ScriptVariable",
    "StepPhase",
    "SyncCommand",
]
