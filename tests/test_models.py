"""
Tests for domain models — project type registry, script model, request models.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from kuduscript.core.models import (
    REGISTRY,
    DeploymentMarker,
    GenerationRequest,
    ProjectType,
    ResolvedProject,
    ScriptDocument,
    ScriptStep,
    ScriptType,
    StepPhase,
)
from kuduscript.core.models.project_type import supported_types
from kuduscript.core.models.script import arg, args, var

# ── Registry ─────────────────────────────────────────────────────────


class TestRegistry:
    def test_every_type_registered(self):
        assert set(REGISTRY) == set(ProjectType)

    def test_flags_unique(self):
        flags = [spec.cli_flag for spec in REGISTRY.values()]
        assert len(flags) == len(set(flags))

    def test_types_needing_project_have_patterns(self):
        for project_type, spec in REGISTRY.items():
            if spec.requires_project or spec.accepts_project:
                assert spec.project_patterns, project_type

    def test_interpreted_types_need_nothing(self):
        for project_type in (ProjectType.NODE, ProjectType.PHP, ProjectType.PYTHON,
                             ProjectType.RUBY, ProjectType.BASIC, ProjectType.WEBSITE):
            spec = REGISTRY[project_type]
            assert not spec.requires_project
            assert not spec.requires_solution

    def test_solution_implies_project(self):
        for spec in REGISTRY.values():
            if spec.requires_solution:
                assert spec.requires_project

    def test_node_excludes_node_modules(self):
        assert "node_modules" in REGISTRY[ProjectType.NODE].dependency_dirs

    def test_supported_types(self):
        names = supported_types()
        assert "node" in names
        assert "aspnetcore-msbuild16" in names

    def test_spec_frozen(self):
        with pytest.raises(ValidationError):
            REGISTRY[ProjectType.NODE].label = "changed"


# ── Script model ─────────────────────────────────────────────────────


class TestScriptPath:
    def test_join_keeps_anchor(self):
        p = var("DEPLOYMENT_SOURCE", "a").join("b", "c")
        assert p.var == "DEPLOYMENT_SOURCE"
        assert p.parts == ("a", "b", "c")

    def test_arg_has_path(self):
        assert arg("/p:X=", var("T")).has_path
        assert not arg("--production").has_path

    def test_args_wraps_strings_and_paths(self):
        argv = args("npm", var("X"), arg("a", "b"))
        assert len(argv) == 3
        assert argv[0].pieces == ("npm",)
        assert argv[2].pieces == ("a", "b")


class TestScriptStep:
    def test_marker_step_not_rendered(self):
        step = ScriptStep(
            phase=StepPhase.MARKER,
            name="writeDeploymentMarker",
            marker=DeploymentMarker(command="deploy.cmd", script_type=ScriptType.BATCH),
        )
        assert not step.rendered

    def test_phases_ordered(self):
        assert StepPhase.INSTALL < StepPhase.BUILD < StepPhase.SYNC < StepPhase.MARKER

    def test_document_file_names(self):
        for script_type, name in (
            (ScriptType.BATCH, "deploy.cmd"),
            (ScriptType.BASH, "deploy.sh"),
            (ScriptType.POSH, "deploy.ps1"),
        ):
            assert ScriptDocument(script_type=script_type, steps=()).file_name == name


class TestDeploymentMarker:
    def test_to_ini(self):
        marker = DeploymentMarker(command="bash deploy.sh", script_type=ScriptType.BASH)
        assert marker.to_ini() == "[config]\ncommand = bash deploy.sh\nscript_type = bash\n"


# ── Request models ───────────────────────────────────────────────────


class TestGenerationRequest:
    def test_defaults(self, tmp_path: Path):
        req = GenerationRequest(
            repository_root=tmp_path,
            site_path=tmp_path,
            output_path=tmp_path,
            project_type=ProjectType.NODE,
        )
        assert req.script_type is ScriptType.BATCH
        assert req.no_dot_deployment is False
        assert req.no_solution is False
        assert req.extra_excludes == ()

    def test_immutable(self, tmp_path: Path):
        req = GenerationRequest(
            repository_root=tmp_path,
            site_path=tmp_path,
            output_path=tmp_path,
            project_type=ProjectType.NODE,
        )
        with pytest.raises(ValidationError):
            req.script_type = ScriptType.BASH

    def test_script_type_from_string(self, tmp_path: Path):
        req = GenerationRequest(
            repository_root=tmp_path,
            site_path=tmp_path,
            output_path=tmp_path,
            project_type="go",
            script_type="posh",
        )
        assert req.project_type is ProjectType.GO
        assert req.script_type is ScriptType.POSH


class TestResolvedProject:
    def test_relative_parts(self, tmp_path: Path):
        resolved = ResolvedProject(
            repository_root=tmp_path,
            deploy_root=tmp_path,
            project_file=tmp_path / "src" / "Web" / "Web.csproj",
        )
        assert resolved.relative(resolved.project_file) == ("src", "Web", "Web.csproj")
        assert resolved.project_dir == tmp_path / "src" / "Web"
        assert resolved.relative(tmp_path) == ()
