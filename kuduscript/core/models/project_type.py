"""
Project type registry — the closed set of supported project kinds.

Each ``ProjectType`` has exactly one ``ProjectTypeSpec`` entry that
describes how the locator should search for it and which CLI flag
selects it.  Adding an ecosystem means adding one member here and one
strategy in ``services/strategies.py``.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class ProjectType(StrEnum):
    """Supported project kinds."""

    BASIC = "basic"
    WEBSITE = "website"
    NODE = "node"
    PHP = "php"
    PYTHON = "python"
    RUBY = "ruby"
    GO = "go"
    WAP = "wap"
    ASPNET_CORE = "aspnetcore"
    ASPNET_CORE_MSBUILD16 = "aspnetcore-msbuild16"
    DOTNET_CONSOLE = "dotnet-console"
    FUNCTION_APP = "function-app"


class ProjectTypeSpec(BaseModel):
    """Static facts about one project type.

    Attributes:
        label:            Human-readable name.
        cli_flag:         Flag that selects this type on the command line.
        project_patterns: Glob patterns for the authoritative project file.
        requires_project: A project file must be located (or given).
        requires_solution: A solution file must be located unless
                          ``no_solution`` is set.
        accepts_project:  An explicit project file is honoured even when
                          not required.
        takes_project_value: The CLI flag accepts an optional file path.
        dependency_dirs:  Installed-dependency directories excluded from
                          sync unless explicitly included.
    """

    model_config = ConfigDict(frozen=True)

    label: str
    cli_flag: str
    project_patterns: tuple[str, ...] = ()
    requires_project: bool = False
    requires_solution: bool = False
    accepts_project: bool = False
    takes_project_value: bool = False
    dependency_dirs: tuple[str, ...] = ()


SOLUTION_PATTERNS: tuple[str, ...] = ("*.sln",)

_DOTNET_WEB_PATTERNS = ("*.csproj", "*.fsproj")

REGISTRY: dict[ProjectType, ProjectTypeSpec] = {
    ProjectType.BASIC: ProjectTypeSpec(
        label="Basic website",
        cli_flag="--basic",
    ),
    ProjectType.WEBSITE: ProjectTypeSpec(
        label="Static website",
        cli_flag="--aspWebSite",
    ),
    ProjectType.NODE: ProjectTypeSpec(
        label="Node.js",
        cli_flag="--node",
        dependency_dirs=("node_modules",),
    ),
    ProjectType.PHP: ProjectTypeSpec(
        label="PHP",
        cli_flag="--php",
    ),
    ProjectType.PYTHON: ProjectTypeSpec(
        label="Python",
        cli_flag="--python",
        dependency_dirs=("env", ".venv", "__pycache__"),
    ),
    ProjectType.RUBY: ProjectTypeSpec(
        label="Ruby",
        # .bundle/config points bundler at vendor/bundle; both must ship
        cli_flag="--ruby",
    ),
    ProjectType.GO: ProjectTypeSpec(
        label="Go",
        cli_flag="--go",
        project_patterns=("go.mod",),
        requires_project=True,
    ),
    ProjectType.WAP: ProjectTypeSpec(
        label=".NET web application",
        cli_flag="--aspWAP",
        project_patterns=("*.csproj", "*.vbproj"),
        requires_project=True,
        requires_solution=True,
        takes_project_value=True,
    ),
    ProjectType.ASPNET_CORE: ProjectTypeSpec(
        label=".NET Core web application",
        cli_flag="--aspNetCore",
        project_patterns=_DOTNET_WEB_PATTERNS,
        requires_project=True,
        requires_solution=True,
        takes_project_value=True,
    ),
    ProjectType.ASPNET_CORE_MSBUILD16: ProjectTypeSpec(
        label=".NET Core web application (MSBuild 16)",
        cli_flag="--aspNetCoreMSBuild16",
        project_patterns=_DOTNET_WEB_PATTERNS,
        requires_project=True,
        requires_solution=True,
        takes_project_value=True,
    ),
    ProjectType.DOTNET_CONSOLE: ProjectTypeSpec(
        label=".NET console application",
        cli_flag="--dotNetConsole",
        project_patterns=("*.csproj",),
        requires_project=True,
        requires_solution=True,
        takes_project_value=True,
    ),
    ProjectType.FUNCTION_APP: ProjectTypeSpec(
        label="Azure Function App",
        cli_flag="--functionApp",
        project_patterns=("*.csproj",),
        accepts_project=True,
        takes_project_value=True,
    ),
}


def get_spec(project_type: ProjectType) -> ProjectTypeSpec:
    """Look up the registry entry for a project type."""
    return REGISTRY[project_type]


def supported_types() -> list[str]:
    """Return the registered project type names."""
    return [t.value for t in REGISTRY]
