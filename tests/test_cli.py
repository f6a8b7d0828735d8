"""
Tests for CLI commands — deploymentscript, types, and global options.
"""

import json
from pathlib import Path

from click.testing import CliRunner

from kuduscript.main import cli


class TestCLIGlobal:
    """Tests for global CLI behavior."""

    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "deploymentscript" in result.output
        assert "types" in result.output

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestTypesCommand:
    def test_lists_flags(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["types"])
        assert result.exit_code == 0
        for flag in ("--node", "--aspWAP", "--go", "--functionApp"):
            assert flag in result.output

    def test_json(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["types", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        by_type = {d["type"]: d for d in data}
        assert by_type["go"]["project_patterns"] == ["go.mod"]
        assert by_type["wap"]["requires_solution"] is True
        assert by_type["node"]["flag"] == "--node"


class TestDeploymentScriptCommand:
    """Tests for the deploymentscript command."""

    def _make_repo(self, tmp_path: Path, files: dict[str, str]) -> Path:
        root = tmp_path / "repo"
        for rel, content in files.items():
            path = root / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content)
        root.mkdir(exist_ok=True)
        return root.resolve()

    def test_help_lists_type_flags(self):
        runner = CliRunner()
        result = runner.invoke(cli, ["deploymentscript", "--help"])
        assert result.exit_code == 0
        for flag in ("--aspWAP", "--node", "--scriptType", "--suppressPrompt", "--no-solution"):
            assert flag in result.output

    def test_node_batch(self, tmp_path: Path):
        root = self._make_repo(tmp_path, {"package.json": "{}"})
        runner = CliRunner()
        result = runner.invoke(cli, ["deploymentscript", "-r", str(root), "--node", "-y"])
        assert result.exit_code == 0, result.output
        assert (root / "deploy.cmd").is_file()
        assert (root / ".deployment").read_text().startswith("[config]\ncommand = deploy.cmd\n")
        assert "✓" in result.output

    def test_script_type_case_insensitive(self, tmp_path: Path):
        root = self._make_repo(tmp_path, {"package.json": "{}"})
        runner = CliRunner()
        result = runner.invoke(cli, ["deploymentscript", "-r", str(root), "--node", "-t", "BASH", "-y"])
        assert result.exit_code == 0, result.output
        assert (root / "deploy.sh").read_text().startswith("#!/bin/bash")

    def test_no_type_flag(self, tmp_path: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["deploymentscript", "-r", str(tmp_path), "-y"])
        assert result.exit_code == 1
        assert "Please specify one of these flags" in result.output
        assert not (tmp_path / "deploy.cmd").exists()

    def test_two_type_flags(self, tmp_path: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["deploymentscript", "-r", str(tmp_path), "--node", "--php", "-y"])
        assert result.exit_code == 1
        assert "only one" in result.output
        assert not (tmp_path / "deploy.cmd").exists()

    def test_prompt_declined(self, tmp_path: Path):
        root = self._make_repo(tmp_path, {"package.json": "{}", "deploy.cmd": "custom"})
        runner = CliRunner()
        result = runner.invoke(cli, ["deploymentscript", "-r", str(root), "--node"], input="n\n")
        assert result.exit_code == 1
        assert "already exists" in result.output
        assert "declined" in result.output
        assert (root / "deploy.cmd").read_text() == "custom"
        assert not (root / ".deployment").exists()

    def test_prompt_accepted(self, tmp_path: Path):
        root = self._make_repo(tmp_path, {"package.json": "{}", "deploy.cmd": "custom"})
        runner = CliRunner()
        result = runner.invoke(cli, ["deploymentscript", "-r", str(root), "--node"], input="y\n")
        assert result.exit_code == 0, result.output
        assert (root / "deploy.cmd").read_text() != "custom"

    def test_wap_with_project_value(self, tmp_path: Path):
        root = self._make_repo(tmp_path, {"src/Web/Web.csproj": "<Project/>"})
        runner = CliRunner()
        result = runner.invoke(cli, [
            "deploymentscript",
            "-r", str(root),
            "--aspWAP", str(root / "src" / "Web" / "Web.csproj"),
            "--no-solution",
            "-t", "posh",
            "-y",
        ])
        assert result.exit_code == 0, result.output
        script = (root / "deploy.ps1").read_text()
        assert "${env:REPOSITORY_ROOT}\\src\\Web\\Web.csproj" in script

    def test_wap_flag_without_value_searches(self, tmp_path: Path):
        root = self._make_repo(tmp_path, {"Web/Web.csproj": "", "App.sln": ""})
        runner = CliRunner()
        result = runner.invoke(cli, ["deploymentscript", "-r", str(root), "--aspWAP", "-y"])
        assert result.exit_code == 0, result.output
        assert "Solution:" in result.output

    def test_go_ambiguous(self, tmp_path: Path):
        root = self._make_repo(tmp_path, {"svc1/go.mod": "", "svc2/go.mod": ""})
        runner = CliRunner()
        result = runner.invoke(cli, ["deploymentscript", "-r", str(root), "--go", "-y"])
        assert result.exit_code == 1
        assert "svc1" in result.output
        assert "svc2" in result.output
        assert not (root / "deploy.cmd").exists()

    def test_go_disambiguated_with_project_file(self, tmp_path: Path):
        root = self._make_repo(tmp_path, {"svc1/go.mod": "", "svc2/go.mod": ""})
        runner = CliRunner()
        result = runner.invoke(cli, [
            "deploymentscript",
            "-r", str(root),
            "--go",
            "--projectFile", str(root / "svc2" / "go.mod"),
            "-y",
        ])
        assert result.exit_code == 0, result.output
        assert "svc2" in (root / "deploy.cmd").read_text()

    def test_json_success(self, tmp_path: Path):
        root = self._make_repo(tmp_path, {"package.json": "{}"})
        runner = CliRunner()
        result = runner.invoke(cli, ["deploymentscript", "-r", str(root), "--node", "-y", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["status"] == "ok"
        assert data["project_type"] == "node"

    def test_json_invalid_invocation(self, tmp_path: Path):
        runner = CliRunner()
        result = runner.invoke(cli, ["deploymentscript", "-r", str(tmp_path), "--json"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["status"] == "failed"
        assert data["error"]["kind"] == "invalid_invocation"

    def test_global_config_option(self, tmp_path: Path):
        root = self._make_repo(tmp_path, {"package.json": "{}"})
        config = tmp_path / "defaults.yml"
        config.write_text("script_type: bash\n")
        runner = CliRunner()
        result = runner.invoke(cli, [
            "--config", str(config),
            "deploymentscript", "-r", str(root), "--node", "-y",
        ])
        assert result.exit_code == 0, result.output
        assert (root / "deploy.sh").is_file()

    def test_quiet(self, tmp_path: Path):
        root = self._make_repo(tmp_path, {"package.json": "{}"})
        runner = CliRunner()
        result = runner.invoke(cli, ["-q", "deploymentscript", "-r", str(root), "--node", "-y"])
        assert result.exit_code == 0
        assert "🚀" not in result.output
        assert (root / "deploy.cmd").is_file()
