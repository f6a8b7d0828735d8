"""
Renderer base — the flavor-independent part of turning steps into text.

Subclasses supply syntax only: how a variable or path is written, how a
command is invoked and checked, how guards and defaults look.  The
section layout (header, setup, sync bootstrap, numbered steps, footer)
lives here so all flavors encode the same behavior.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from kuduscript import __version__
from kuduscript.core.models.script import (
    Arg,
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
    args,
    var,
)

INDENT = "  "

# Characters that force an argument to be double-quoted
_QUOTE_TRIGGERS = frozenset(' \t;&|<>()"')


def collect_variables(steps: Sequence[ScriptStep]) -> list[ScriptVariable]:
    """Variables declared by *steps*, first declaration wins."""
    seen: dict[str, ScriptVariable] = {}
    for step in steps:
        for variable in step.variables:
            seen.setdefault(variable.name, variable)
    return list(seen.values())


def sync_argv(cmd: SyncCommand) -> tuple[Arg, ...]:
    """KuduSync invocation for a sync command."""
    return args(
        var("KUDU_SYNC_CMD"),
        "-v", "50",
        "-f", cmd.source,
        "-t", cmd.target,
        "-n", var("NEXT_MANIFEST_PATH"),
        "-p", var("PREVIOUS_MANIFEST_PATH"),
        "-i", ";".join(cmd.excludes),
    )


class ScriptRenderer(ABC):
    """Render a step sequence as one script flavor."""

    script_type: ScriptType
    separator: str = "/"
    exe_suffix: str = ""
    comment_prefix: str = "#"
    newline: str = "\n"

    # ── Syntax hooks ────────────────────────────────────────────

    @abstractmethod
    def var_ref(self, name: str | None) -> str:
        """Reference to variable *name*; None is the script directory."""

    @abstractmethod
    def header(self) -> list[str]: ...

    @abstractmethod
    def footer(self) -> list[str]: ...

    @abstractmethod
    def declare(self, variable: ScriptVariable) -> list[str]:
        """Assign *variable* unless the environment already defines it."""

    @abstractmethod
    def sync_bootstrap(self) -> list[str]:
        """Ensure ``KUDU_SYNC_CMD`` points at a KuduSync executable."""

    @abstractmethod
    def run(self, cmd: RunCommand) -> list[str]: ...

    @abstractmethod
    def write_file(self, cmd: WriteFileCommand) -> list[str]: ...

    @abstractmethod
    def make_dir(self, cmd: MakeDirCommand) -> list[str]: ...

    @abstractmethod
    def remove_dir(self, cmd: RemoveDirCommand) -> list[str]: ...

    @abstractmethod
    def guard(self, step: ScriptStep, body: list[str]) -> list[str]:
        """Wrap *body* in the step's exists / missing conditions."""

    # ── Shared building blocks ──────────────────────────────────

    def path(self, p: ScriptPath) -> str:
        """Unquoted rendering of a script path."""
        text = self.var_ref(p.var)
        if p.parts:
            text += self.separator + self.separator.join(p.parts)
        elif p.var is None:
            text += self.separator + "."
        if p.executable:
            text += self.exe_suffix
        return text

    def raw(self, a: Arg) -> str:
        return "".join(p if isinstance(p, str) else self.path(p) for p in a.pieces)

    def quote(self, a: Arg) -> str:
        text = self.raw(a)
        if a.has_path or any(c in _QUOTE_TRIGGERS for c in text):
            return f'"{text}"'
        return text

    def argv(self, argv: Sequence[Arg]) -> str:
        return " ".join(self.quote(a) for a in argv)

    def comment(self, text: str) -> str:
        return f"{self.comment_prefix} {text}"

    def banner(self, title: str) -> list[str]:
        return [self.comment(title), self.comment("-" * len(title))]

    def title_block(self) -> list[str]:
        rule = "-" * 22
        return [
            self.comment(rule),
            self.comment("KUDU Deployment Script"),
            self.comment(f"Version: {__version__}"),
            self.comment(rule),
        ]

    def command(self, cmd) -> list[str]:
        if isinstance(cmd, RunCommand):
            return self.run(cmd)
        if isinstance(cmd, SyncCommand):
            return self.run(RunCommand(argv=sync_argv(cmd)))
        if isinstance(cmd, WriteFileCommand):
            return self.write_file(cmd)
        if isinstance(cmd, MakeDirCommand):
            return self.make_dir(cmd)
        if isinstance(cmd, RemoveDirCommand):
            return self.remove_dir(cmd)
        raise TypeError(f"Unknown command: {cmd!r}")

    @staticmethod
    def indent(lines: list[str], depth: int = 1) -> list[str]:
        pad = INDENT * depth
        return [pad + line if line else line for line in lines]

    # ── Document ────────────────────────────────────────────────

    def render(self, steps: Sequence[ScriptStep]) -> str:
        """Render *steps* as literal script text."""
        lines = self.header()

        lines += ["", *self.banner("Setup"), ""]
        for variable in collect_variables(steps):
            lines += self.declare(variable)

        if any(isinstance(c, SyncCommand) for s in steps for c in s.commands):
            lines += ["", *self.sync_bootstrap()]

        lines += ["", *self.banner("Deployment"), ""]
        number = 0
        for step in steps:
            if not step.rendered or step.phase is StepPhase.SETUP:
                continue
            number += 1
            body: list[str] = []
            for cmd in step.commands:
                body += self.command(cmd)
            lines.append(self.comment(f"{number}. {step.description or step.name}"))
            lines += self.guard(step, body)
            lines.append("")

        lines += self.footer()
        return self.newline.join(lines) + self.newline
