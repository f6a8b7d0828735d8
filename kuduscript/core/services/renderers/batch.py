"""Windows batch (``deploy.cmd``) renderer."""

from __future__ import annotations

from kuduscript.core.models.script import (
    MakeDirCommand,
    RemoveDirCommand,
    RunCommand,
    ScriptPath,
    ScriptStep,
    ScriptType,
    ScriptVariable,
    WriteFileCommand,
)
from kuduscript.core.services.renderers.base import ScriptRenderer

_ERROR_CHECK = "IF !ERRORLEVEL! NEQ 0 goto error"

# Escaped with a caret when outside double quotes
_CARET_CHARS = frozenset("^&|<>()")


def escape_echo(text: str) -> str:
    """Escape *text* for ``echo`` inside a delayed-expansion block."""
    out: list[str] = []
    in_quotes = False
    for ch in text:
        if ch == '"':
            in_quotes = not in_quotes
            out.append(ch)
        elif ch == "%":
            out.append("%%")
        elif ch == "!":
            out.append("^^!")
        elif ch in _CARET_CHARS and not in_quotes:
            out.append("^" + ch)
        else:
            out.append(ch)
    return "".join(out)


class BatchRenderer(ScriptRenderer):
    script_type = ScriptType.BATCH
    separator = "\\"
    exe_suffix = ".exe"
    comment_prefix = "::"
    newline = "\r\n"

    def var_ref(self, name: str | None) -> str:
        return "%~dp0" if name is None else f"%{name}%"

    def path(self, p: ScriptPath) -> str:
        if p.var is not None:
            return super().path(p)
        # %~dp0 already ends with a backslash
        text = "%~dp0" + (self.separator.join(p.parts) or ".")
        return text + self.exe_suffix if p.executable else text

    def header(self) -> list[str]:
        return [
            '@if "%SCM_TRACE_LEVEL%" NEQ "4" @echo off',
            "",
            *self.title_block(),
            "",
            "setlocal enabledelayedexpansion",
        ]

    def footer(self) -> list[str]:
        return [
            "goto end",
            "",
            ":: Execute command routine that will echo out when error",
            ":ExecuteCmd",
            "setlocal",
            "set _CMD_=%*",
            "call %_CMD_%",
            'if "%ERRORLEVEL%" NEQ "0" echo Failed exitCode=%ERRORLEVEL%, command=%_CMD_%',
            "exit /b %ERRORLEVEL%",
            "",
            ":error",
            "endlocal",
            "echo An error has occurred during web site deployment.",
            "call :exitSetErrorLevel",
            "call :exitFromFunction 2>nul",
            "",
            ":exitSetErrorLevel",
            "exit /b 1",
            "",
            ":exitFromFunction",
            "()",
            "",
            ":end",
            "endlocal",
            "echo Finished successfully.",
        ]

    def declare(self, variable: ScriptVariable) -> list[str]:
        return [
            f"IF NOT DEFINED {variable.name} (",
            f'  SET "{variable.name}={self.raw(variable.default)}"',
            ")",
        ]

    def sync_bootstrap(self) -> list[str]:
        return [
            "IF NOT DEFINED KUDU_SYNC_CMD (",
            "  echo Installing Kudu Sync",
            "  call npm install kudusync -g --silent",
            f"  {_ERROR_CHECK}",
            '  SET "KUDU_SYNC_CMD=%appdata%\\npm\\kuduSync.cmd"',
            ")",
        ]

    def run(self, cmd: RunCommand) -> list[str]:
        lines = [f"call :ExecuteCmd {self.argv(cmd.argv)}", _ERROR_CHECK]
        if cmd.cwd is not None:
            lines = [f'pushd "{self.path(cmd.cwd)}"', *lines, "popd"]
        return lines

    def write_file(self, cmd: WriteFileCommand) -> list[str]:
        body = [f"echo {escape_echo(line)}" if line else "echo." for line in cmd.lines]
        return ["(", *self.indent(body), f') > "{self.path(cmd.path)}"', _ERROR_CHECK]

    def make_dir(self, cmd: MakeDirCommand) -> list[str]:
        target = self.path(cmd.path)
        return [f'IF NOT EXIST "{target}" mkdir "{target}"', _ERROR_CHECK]

    def remove_dir(self, cmd: RemoveDirCommand) -> list[str]:
        target = self.path(cmd.path)
        return [f'IF EXIST "{target}" rd /s /q "{target}"']

    def guard(self, step: ScriptStep, body: list[str]) -> list[str]:
        conditions = [f'IF EXIST "{self.path(p)}"' for p in step.only_if_exists]
        conditions += [f'IF NOT EXIST "{self.path(p)}"' for p in step.only_if_missing]
        for condition in reversed(conditions):
            body = [f"{condition} (", *self.indent(body), ")"]
        return body
