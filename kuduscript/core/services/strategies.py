"""
Strategy dispatcher — map a project type to its ordered script steps.

Each strategy is a pure function ``(ResolvedProject, GenerationRequest)
-> list[ScriptStep]``.  ``build_plan`` wraps the selected strategy with
the shared setup step and the optional deployment marker step, then
orders everything by phase.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path, PurePosixPath, PureWindowsPath

from kuduscript.core.errors import UnsupportedTypeError
from kuduscript.core.models.project_type import ProjectType, get_spec
from kuduscript.core.models.request import GenerationRequest, ResolvedProject
from kuduscript.core.models.script import (
    SCRIPT_FILE_NAMES,
    DeploymentMarker,
    MakeDirCommand,
    RemoveDirCommand,
    RunCommand,
    ScriptPath,
    ScriptStep,
    ScriptType,
    ScriptVariable,
    StepPhase,
    SyncCommand,
    WriteFileCommand,
    arg,
    args,
    var,
)

logger = logging.getLogger(__name__)

Strategy = Callable[[ResolvedProject, GenerationRequest], list[ScriptStep]]

SOURCE = var("DEPLOYMENT_SOURCE")
TARGET = var("DEPLOYMENT_TARGET")
TEMP = var("DEPLOYMENT_TEMP")

# Always excluded from sync, on top of the script's own file name
BASE_EXCLUDES: tuple[str, ...] = (".git", ".hg", ".deployment")

_TEMP_VARIABLE = ScriptVariable(name="DEPLOYMENT_TEMP", default=arg(var("ARTIFACTS", "temp")))
_MSBUILD_VARIABLE = ScriptVariable(name="MSBUILD_PATH", default=arg("msbuild"))
_MSBUILD16_VARIABLE = ScriptVariable(name="MSBUILD_16_PATH", default=arg("msbuild"))

# iisnode handler registration, needed when a function app ships server.js
_IISNODE_WEB_CONFIG: tuple[str, ...] = (
    '<?xml version="1.0" encoding="utf-8"?>',
    "<configuration>",
    "  <system.webServer>",
    "    <handlers>",
    '      <add name="iisnode" path="server.js" verb="*" modules="iisnode"/>',
    "    </handlers>",
    "  </system.webServer>",
    "</configuration>",
)


# ── Shared step builders ────────────────────────────────────────


def _repo_path(resolved: ResolvedProject, path: Path) -> ScriptPath:
    """Reference *path* relative to ``REPOSITORY_ROOT``."""
    return var("REPOSITORY_ROOT", *resolved.relative(path))


def _setup_step(resolved: ResolvedProject, request: GenerationRequest) -> ScriptStep:
    """Declare the relocatable path variables every script uses."""
    repo_rel = Path(os.path.relpath(request.repository_root, request.output_path)).parts
    site_rel = resolved.relative(resolved.deploy_root)
    declared = (
        ("REPOSITORY_ROOT", ScriptPath(parts=repo_rel)),
        ("DEPLOYMENT_SOURCE", var("REPOSITORY_ROOT", *site_rel)),
        ("ARTIFACTS", var("REPOSITORY_ROOT", "..", "artifacts")),
        ("DEPLOYMENT_TARGET", var("ARTIFACTS", "wwwroot")),
        ("NEXT_MANIFEST_PATH", var("ARTIFACTS", "manifest")),
        ("PREVIOUS_MANIFEST_PATH", var("ARTIFACTS", "manifest")),
    )
    return ScriptStep(
        phase=StepPhase.SETUP,
        name="setup",
        description="Setup",
        variables=tuple(ScriptVariable(name=n, default=arg(p)) for n, p in declared),
    )


def sync_excludes(request: GenerationRequest) -> tuple[str, ...]:
    """Exclusion list for the sync step of *request*."""
    excludes = [*BASE_EXCLUDES, SCRIPT_FILE_NAMES[request.script_type]]
    if not request.include_dependencies:
        excludes.extend(get_spec(request.project_type).dependency_dirs)
    excludes.extend(request.extra_excludes)
    # Keep first occurrence, preserve order
    return tuple(dict.fromkeys(excludes))


def _sync_step(request: GenerationRequest, source: ScriptPath) -> ScriptStep:
    return ScriptStep(
        phase=StepPhase.SYNC,
        name="syncToOutput",
        description="KuduSync",
        commands=(SyncCommand(source=source, target=TARGET, excludes=sync_excludes(request)),),
    )


def _install_step(manifest: str, description: str, *argv: str) -> ScriptStep:
    """Run a package-manager install in the source when *manifest* exists."""
    return ScriptStep(
        phase=StepPhase.INSTALL,
        name="installDependencies",
        description=description,
        commands=(RunCommand(argv=args(*argv), cwd=SOURCE),),
        only_if_exists=(SOURCE.join(manifest),),
    )


def _prepare_temp_step() -> ScriptStep:
    return ScriptStep(
        phase=StepPhase.INSTALL,
        name="prepareBuildOutput",
        description="Prepare build output directory",
        commands=(RemoveDirCommand(path=TEMP), MakeDirCommand(path=TEMP)),
        variables=(_TEMP_VARIABLE,),
    )


def _cleanup_step() -> ScriptStep:
    return ScriptStep(
        phase=StepPhase.CLEANUP,
        name="cleanup",
        description="Remove build output directory",
        commands=(RemoveDirCommand(path=TEMP),),
    )


def _restore_target(resolved: ResolvedProject) -> ScriptPath:
    """Restore against the solution when there is one, else the project."""
    assert resolved.project_file is not None
    return _repo_path(resolved, resolved.solution_file or resolved.project_file)


# ── Interpreted / static strategies ─────────────────────────────


def basic_strategy(resolved: ResolvedProject, request: GenerationRequest) -> list[ScriptStep]:
    """Copy the site as-is."""
    return [_sync_step(request, SOURCE)]


def node_strategy(resolved: ResolvedProject, request: GenerationRequest) -> list[ScriptStep]:
    return [
        _install_step("package.json", "Install npm packages", "npm", "install", "--production"),
        _sync_step(request, SOURCE),
    ]


def php_strategy(resolved: ResolvedProject, request: GenerationRequest) -> list[ScriptStep]:
    return [
        _install_step(
            "composer.json",
            "Install composer packages",
            "composer", "install", "--no-dev", "--no-interaction",
            "--prefer-dist", "--optimize-autoloader",
        ),
        _sync_step(request, SOURCE),
    ]


def python_strategy(resolved: ResolvedProject, request: GenerationRequest) -> list[ScriptStep]:
    requirements = SOURCE.join("requirements.txt")
    return [
        ScriptStep(
            phase=StepPhase.INSTALL,
            name="installDependencies",
            description="Install packages from requirements.txt",
            commands=(
                RunCommand(
                    argv=args("python", "-m", "pip", "install", "--upgrade", "-r", requirements),
                    cwd=SOURCE,
                ),
            ),
            only_if_exists=(requirements,),
        ),
        _sync_step(request, SOURCE),
    ]


def ruby_strategy(resolved: ResolvedProject, request: GenerationRequest) -> list[ScriptStep]:
    return [
        _install_step(
            "Gemfile",
            "Install gems",
            "bundle", "install", "--deployment", "--without", "development", "test",
        ),
        _sync_step(request, SOURCE),
    ]


def go_strategy(resolved: ResolvedProject, request: GenerationRequest) -> list[ScriptStep]:
    """Download modules and build the binary into the deployable root."""
    assert resolved.project_dir is not None
    module_dir = _repo_path(resolved, resolved.project_dir)
    binary = var("DEPLOYMENT_SOURCE", "bin", "server", executable=True)
    return [
        ScriptStep(
            phase=StepPhase.INSTALL,
            name="installDependencies",
            description="Download Go modules",
            commands=(RunCommand(argv=args("go", "mod", "download"), cwd=module_dir),),
        ),
        ScriptStep(
            phase=StepPhase.BUILD,
            name="build",
            description="Build Go binary",
            commands=(RunCommand(argv=args("go", "build", "-o", binary, "."), cwd=module_dir),),
        ),
        _sync_step(request, SOURCE),
    ]


# ── Compiled .NET strategies ────────────────────────────────────


def wap_strategy(resolved: ResolvedProject, request: GenerationRequest) -> list[ScriptStep]:
    """.NET web application: nuget restore, msbuild pipeline into temp."""
    assert resolved.project_file is not None
    steps = [
        _prepare_temp_step(),
        ScriptStep(
            phase=StepPhase.INSTALL,
            name="restore",
            description="Restore NuGet packages",
            commands=(RunCommand(argv=args("nuget", "restore", _restore_target(resolved))),),
        ),
    ]
    steps.append(ScriptStep(
        phase=StepPhase.BUILD,
        name="build",
        description="Build to the temporary path",
        commands=(RunCommand(argv=args(
            var("MSBUILD_PATH"),
            _repo_path(resolved, resolved.project_file),
            "/nologo",
            "/verbosity:m",
            "/t:Build",
            "/t:pipelinePreDeployCopyAllFilesToOneFolder",
            arg("/p:_PackageTempDir=", TEMP),
            "/p:AutoParameterizationWebConfigConnectionStrings=false",
            "/p:Configuration=Release",
            "/p:UseSharedCompilation=false",
        )),),
        variables=(_MSBUILD_VARIABLE,),
    ))
    steps += [_sync_step(request, TEMP), _cleanup_step()]
    return steps


def _dotnet_publish_steps(
    resolved: ResolvedProject,
    request: GenerationRequest,
    output: ScriptPath,
) -> list[ScriptStep]:
    assert resolved.project_file is not None
    return [
        _prepare_temp_step(),
        ScriptStep(
            phase=StepPhase.INSTALL,
            name="restore",
            description="Restore NuGet packages",
            commands=(RunCommand(argv=args("dotnet", "restore", _restore_target(resolved))),),
        ),
        ScriptStep(
            phase=StepPhase.BUILD,
            name="publish",
            description="Build and publish",
            commands=(RunCommand(argv=args(
                "dotnet", "publish", _repo_path(resolved, resolved.project_file),
                "--output", output, "--configuration", "Release",
            )),),
        ),
        _sync_step(request, TEMP),
        _cleanup_step(),
    ]


def aspnetcore_strategy(resolved: ResolvedProject, request: GenerationRequest) -> list[ScriptStep]:
    return _dotnet_publish_steps(resolved, request, TEMP)


def aspnetcore_msbuild16_strategy(
    resolved: ResolvedProject, request: GenerationRequest
) -> list[ScriptStep]:
    """.NET Core built with the pinned MSBuild 16 toolchain."""
    assert resolved.project_file is not None
    msbuild = var("MSBUILD_16_PATH")
    return [
        _prepare_temp_step(),
        ScriptStep(
            phase=StepPhase.INSTALL,
            name="restore",
            description="Restore NuGet packages",
            commands=(RunCommand(argv=args(msbuild, _restore_target(resolved), "/t:Restore", "/p:Configuration=Release")),),
            variables=(_MSBUILD16_VARIABLE,),
        ),
        ScriptStep(
            phase=StepPhase.BUILD,
            name="publish",
            description="Build and publish",
            commands=(RunCommand(argv=args(
                msbuild,
                _repo_path(resolved, resolved.project_file),
                "/p:DeployOnBuild=true",
                "/p:Configuration=Release",
                arg("/p:PublishUrl=", TEMP),
            )),),
            variables=(_MSBUILD16_VARIABLE,),
        ),
        _sync_step(request, TEMP),
        _cleanup_step(),
    ]


def dotnet_console_strategy(resolved: ResolvedProject, request: GenerationRequest) -> list[ScriptStep]:
    """Console apps are deployed as a continuous WebJob."""
    job_dir = TEMP.join("app_data", "jobs", "continuous", "deployedJob")
    return _dotnet_publish_steps(resolved, request, job_dir)


def function_app_strategy(resolved: ResolvedProject, request: GenerationRequest) -> list[ScriptStep]:
    """Function app: compiled when a project file was given, else script-based."""
    if resolved.project_file is not None:
        steps = _dotnet_publish_steps(resolved, request, TEMP)
        deploy_root = TEMP
    else:
        steps = [
            _install_step("package.json", "Install npm packages", "npm", "install", "--production"),
            _sync_step(request, SOURCE),
        ]
        deploy_root = SOURCE

    steps.append(ScriptStep(
        phase=StepPhase.POST_SYNC,
        name="ensureHostingShim",
        description="Add iisnode web.config when server.js is deployed",
        commands=(WriteFileCommand(path=TARGET.join("web.config"), lines=_IISNODE_WEB_CONFIG),),
        only_if_exists=(deploy_root.join("server.js"),),
        only_if_missing=(TARGET.join("web.config"),),
    ))
    return steps


_STRATEGIES: dict[ProjectType, Strategy] = {
    ProjectType.BASIC: basic_strategy,
    ProjectType.WEBSITE: basic_strategy,
    ProjectType.NODE: node_strategy,
    ProjectType.PHP: php_strategy,
    ProjectType.PYTHON: python_strategy,
    ProjectType.RUBY: ruby_strategy,
    ProjectType.GO: go_strategy,
    ProjectType.WAP: wap_strategy,
    ProjectType.ASPNET_CORE: aspnetcore_strategy,
    ProjectType.ASPNET_CORE_MSBUILD16: aspnetcore_msbuild16_strategy,
    ProjectType.DOTNET_CONSOLE: dotnet_console_strategy,
    ProjectType.FUNCTION_APP: function_app_strategy,
}


# ── Public API ──────────────────────────────────────────────────


def select_strategy(project_type: ProjectType) -> Strategy:
    """Return the strategy registered for *project_type*.

    Raises:
        UnsupportedTypeError: No strategy is registered.
    """
    try:
        return _STRATEGIES[project_type]
    except KeyError:
        raise UnsupportedTypeError(f"Unsupported project type: {project_type!r}") from None


def marker_command(request: GenerationRequest) -> str:
    """Command line the hosting pipeline uses to invoke the script."""
    script = request.output_path / SCRIPT_FILE_NAMES[request.script_type]
    rel = Path(os.path.relpath(script, request.repository_root))
    if request.script_type is ScriptType.BASH:
        return f"bash {PurePosixPath(*rel.parts)}"
    windows_path = PureWindowsPath(*rel.parts)
    if request.script_type is ScriptType.POSH:
        return f"powershell -NoProfile -NoLogo -ExecutionPolicy Unrestricted -File {windows_path}"
    return str(windows_path)


def build_plan(resolved: ResolvedProject, request: GenerationRequest) -> list[ScriptStep]:
    """Full ordered step list for *request*: setup, strategy, marker."""
    strategy = select_strategy(request.project_type)
    steps = [_setup_step(resolved, request), *strategy(resolved, request)]

    if not request.no_dot_deployment:
        steps.append(ScriptStep(
            phase=StepPhase.MARKER,
            name="writeDeploymentMarker",
            description="Write .deployment",
            marker=DeploymentMarker(
                command=marker_command(request),
                script_type=request.script_type,
            ),
        ))

    # Stable sort keeps each strategy's own order within a phase
    ordered = sorted(steps, key=lambda s: s.phase)
    logger.debug("Plan for %s: %s", request.project_type.value, [s.name for s in ordered])
    return ordered
