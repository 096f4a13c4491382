"""Runtime execution context for a single run."""

from __future__ import annotations

import subprocess
from collections.abc import Callable, Mapping
from pathlib import Path

from rich.console import Console

from .commands import CommandBuilder
from .environment import EnvironmentConfig

Runner = Callable[[str, Path], int]


def run_shell(command: str, cwd: Path) -> int:
    """Run a command through the shell, inheriting the standard streams."""
    return subprocess.call(command, shell=True, cwd=cwd)


class Context:
    """Runtime state passed through the target chain."""

    def __init__(
        self,
        env: EnvironmentConfig,
        *,
        cwd: Path | None = None,
        dry_run: bool = False,
        console: Console | None = None,
        runner: Runner = run_shell,
        actions: Mapping[str, Callable[[Context], None]] | None = None,
    ) -> None:
        self.env = env
        self.cwd = cwd if cwd is not None else Path.cwd()
        self.dry_run = dry_run
        self.console = console if console is not None else Console(highlight=False)
        self.runner = runner
        self.actions = dict(actions or {})
        self.commands = CommandBuilder(env)

    def echo(self, text: str) -> None:
        self.console.print(text, markup=False, highlight=False, soft_wrap=True)

    def run(self, command: str) -> int:
        return self.runner(command, self.cwd)
