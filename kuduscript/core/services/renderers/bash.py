"""POSIX bash (``deploy.sh``) renderer."""

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
    return "'" + text.replace("'", "'\\''") + "'"


class BashRenderer(ScriptRenderer):
    script_type = ScriptType.BASH

    def var_ref(self, name: str | None) -> str:
        return "${SCRIPT_DIR}" if name is None else "${" + name + "}"

    def header(self) -> list[str]:
        return [
            "#!/bin/bash",
            "",
            *self.title_block(),
            "",
            "set -e",
            "set -o pipefail",
            "trap 'echo \"An error has occurred during web site deployment.\" >&2' ERR",
            "",
            'SCRIPT_DIR="$(cd "$(dirname "${BASH_SOURCE[0]}")" && pwd)"',
        ]

    def footer(self) -> list[str]:
        return ['echo "Finished successfully."']

    def declare(self, variable: ScriptVariable) -> list[str]:
        return [
            f'if [[ -z "${{{variable.name}:-}}" ]]; then',
            f'  {variable.name}="{self.raw(variable.default)}"',
            "fi",
        ]

    def sync_bootstrap(self) -> list[str]:
        return [
            'if [[ -z "${KUDU_SYNC_CMD:-}" ]]; then',
            '  echo "Installing Kudu Sync"',
            "  npm install kudusync -g --silent",
            "  KUDU_SYNC_CMD=kuduSync",
            "fi",
        ]

    def run(self, cmd: RunCommand) -> list[str]:
        lines = [self.argv(cmd.argv)]
        if cmd.cwd is not None:
            lines = [f'pushd "{self.path(cmd.cwd)}" > /dev/null', *lines, "popd > /dev/null"]
        return lines

    def write_file(self, cmd: WriteFileCommand) -> list[str]:
        values = " ".join(single_quote(line) for line in cmd.lines)
        return [f"printf '%s\\n' {values} > \"{self.path(cmd.path)}\""]

    def make_dir(self, cmd: MakeDirCommand) -> list[str]:
        return [f'mkdir -p "{self.path(cmd.path)}"']

    def remove_dir(self, cmd: RemoveDirCommand) -> list[str]:
        return [f'rm -rf "{self.path(cmd.path)}"']

    def guard(self, step: ScriptStep, body: list[str]) -> list[str]:
        tests = [f'[[ -e "{self.path(p)}" ]]' for p in step.only_if_exists]
        tests += [f'[[ ! -e "{self.path(p)}" ]]' for p in step.only_if_missing]
        if not tests:
            return body
        return [f"if {' && '.join(tests)}; then", *self.indent(body), "fi"]
