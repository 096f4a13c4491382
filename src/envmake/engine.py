"""Execution engine: plan a target's dependency graph and run it in order."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console

from .context import Context, Runner, run_shell
from .environment import EnvironmentConfig
from .errors import CyclicDependency, RecipeFailed, UnknownTarget
from .help import render
from .registry import Registry
from .strategies import strategy_for
from .targets import Target

logger = logging.getLogger(__name__)


@dataclass
class ExecutionResult:
    """Outcome of running one requested target."""

    failed: bool = False
    failing_target: str | None = None
    exit_code: int = 0
    command: str | None = None
    ran: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def _visit(
    name: str,
    registry: Registry,
    order: dict[str, Target],
    path: list[str],
    parent: str | None,
) -> None:
    """Depth-first post-order walk; dependencies land before dependents."""
    if name in order:
        return
    if name in path:
        raise CyclicDependency([*path[path.index(name) :], name])
    if name not in registry:
        raise UnknownTarget(name, required_by=parent)

    target = registry[name]
    path.append(name)
    for dep in target.depends_on:
        _visit(dep, registry, order, path, name)
    path.pop()
    order[name] = target


def plan(registry: Registry, *names: str) -> list[Target]:
    """Linearize the dependency graphs rooted at names, without repeats.

    Goals are planned in order into one shared sequence, so a target needed
    by several goals appears once.
    """
    order: dict[str, Target] = {}
    for name in names:
        _visit(name, registry, order, [], None)
    logger.debug("Plan for %s: %s", ", ".join(names), ", ".join(order))
    return list(order.values())


class Engine:
    """Runs targets from a registry against a resolved environment."""

    def __init__(
        self,
        registry: Registry,
        *,
        cwd: Path | None = None,
        console: Console | None = None,
        runner: Runner = run_shell,
    ) -> None:
        self.registry = registry
        self.cwd = cwd
        self.console = console if console is not None else Console(highlight=False)
        self.runner = runner
        self.actions: dict[str, Callable[[Context], None]] = {"help": self._help}

    def _help(self, ctx: Context) -> None:
        ctx.console.print(render(self.registry))

    def plan(self, *names: str) -> list[Target]:
        targets = plan(self.registry, *names)
        for target in targets:
            if target.builtin is not None and target.builtin not in self.actions:
                raise ValueError(f"Target '{target.name}' uses unknown builtin: '{target.builtin}'")
        return targets

    def run(
        self,
        goal: str | Sequence[str],
        env: EnvironmentConfig,
        *,
        dry_run: bool = False,
    ) -> ExecutionResult:
        """Run one goal or several, with dependencies, stopping at the first failure.

        Every goal is planned before any command runs, so planning errors
        (UnknownTarget, CyclicDependency) leave the workspace untouched.
        """
        names = [goal] if isinstance(goal, str) else list(goal)
        targets = self.plan(*names)
        ctx = Context(
            env,
            cwd=self.cwd,
            dry_run=dry_run,
            console=self.console,
            runner=self.runner,
            actions=self.actions,
        )
        ctx.echo(f"ENVIRONMENT: {env.label}")

        result = ExecutionResult()
        for target in targets:
            op = strategy_for(target)
            try:
                ran = op(ctx)
            except RecipeFailed as exc:
                logger.info("%s", exc)
                result.failed = True
                result.failing_target = exc.target
                result.exit_code = exc.exit_code
                result.command = exc.command
                return result
            (result.ran if ran else result.skipped).append(target.name)
        return result
