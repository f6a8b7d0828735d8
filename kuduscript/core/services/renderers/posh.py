"""PowerShell (``deploy.ps1``) renderer."""

from __future__ import annotations

from kuduscript.core.models.script import (
    MakeDirCommand,
    RemoveDirCommand,
    RunCommand,
    ScriptStep,
    ScriptType,
    ScriptVariable,
    WriteFileCommand,
)
from kuduscript.core.services.renderers.base import ScriptRenderer


def single_quote(text: str) -> str:
    return "'" + text.replace("'", "''") + "'"


class PoshRenderer(ScriptRenderer):
    script_type = ScriptType.POSH
    separator = "\\"
    exe_suffix = ".exe"

    def var_ref(self, name: str | None) -> str:
        return "${PSScriptRoot}" if name is None else "${env:" + name + "}"

    def header(self) -> list[str]:
        return [
            *self.title_block(),
            "",
            '$ErrorActionPreference = "Stop"',
            "",
            "function Test-LastExit {",
            "  if ($LASTEXITCODE -ne 0) {",
            '    Write-Output "An error has occurred during web site deployment."',
            "    exit 1",
            "  }",
            "}",
        ]

    def footer(self) -> list[str]:
        return ['Write-Output "Finished successfully."']

    def declare(self, variable: ScriptVariable) -> list[str]:
        return [
            f"if (-not $env:{variable.name}) {{",
            f'  $env:{variable.name} = "{self.raw(variable.default)}"',
            "}",
        ]

    def sync_bootstrap(self) -> list[str]:
        return [
            "if (-not $env:KUDU_SYNC_CMD) {",
            '  Write-Output "Installing Kudu Sync"',
            "  & npm install kudusync -g --silent",
            "  Test-LastExit",
            '  $env:KUDU_SYNC_CMD = "${env:APPDATA}\\npm\\kuduSync.cmd"',
            "}",
        ]

    def run(self, cmd: RunCommand) -> list[str]:
        lines = [f"& {self.argv(cmd.argv)}", "Test-LastExit"]
        if cmd.cwd is not None:
            lines = [f'Push-Location "{self.path(cmd.cwd)}"', *lines, "Pop-Location"]
        return lines

    def write_file(self, cmd: WriteFileCommand) -> list[str]:
        values = ", ".join(single_quote(line) for line in cmd.lines)
        return [f'Set-Content -Path "{self.path(cmd.path)}" -Value @({values}) -Encoding UTF8']

    def make_dir(self, cmd: MakeDirCommand) -> list[str]:
        return [f'New-Item -ItemType Directory -Force -Path "{self.path(cmd.path)}" | Out-Null']

    def remove_dir(self, cmd: RemoveDirCommand) -> list[str]:
        target = self.path(cmd.path)
        return [f'if (Test-Path "{target}") {{ Remove-Item -Recurse -Force "{target}" }}']

    def guard(self, step: ScriptStep, body: list[str]) -> list[str]:
        tests = [f'(Test-Path "{self.path(p)}")' for p in step.only_if_exists]
        tests += [f'-not (Test-Path "{self.path(p)}")' for p in step.only_if_missing]
        if not tests:
            return body
        return [f"if ({' -and '.join(tests)}) {{", *self.indent(body), "}"]
