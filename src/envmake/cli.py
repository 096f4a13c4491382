"""Command line interface: ``envmake [TARGET | VAR=VALUE]...``."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Mapping, Sequence

from rich.console import Console

from . import environment, hcl
from .engine import Engine

logger = logging.getLogger(__name__)

EXIT_CONFIG_ERROR = 2

# make-style variables and the override each one maps to
TOOL_VARIABLES = {
    "PHP_BIN": "interpreter",
    "PHP_PROJECT_BIN": "project_tool",
    "PHP_COMPOSER_BIN": "dependency_manager",
}
VARIABLES = ("ENV", "PHP_ARGS", *TOOL_VARIABLES)


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="envmake",
        description="Run project targets in a docker or local environment.",
    )
    parser.add_argument(
        "goals",
        nargs="*",
        metavar="TARGET | VAR=VALUE",
        help=f"targets to run, or variable assignments ({', '.join(VARIABLES)})",
    )
    parser.add_argument(
        "-f",
        "--file",
        action="append",
        default=[],
        help="HCL target table to load instead of the bundled one (repeatable)",
    )
    parser.add_argument("--env", choices=["local", "docker"], help="execution environment")
    parser.add_argument(
        "-n", "--dry-run", action="store_true", help="print commands without running them"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def split_goals(goals: Sequence[str]) -> tuple[list[str], dict[str, str]]:
    """Separate target names from VAR=VALUE assignments."""
    targets: list[str] = []
    assignments: dict[str, str] = {}
    for goal in goals:
        name, sep, value = goal.partition("=")
        if not sep:
            targets.append(goal)
            continue
        if name not in VARIABLES:
            raise ValueError(f"Unknown variable: '{name}'")
        assignments[name] = value
    return targets, assignments


def resolve_environment(
    assignments: Mapping[str, str],
    environ: Mapping[str, str],
    *,
    mode: str | None = None,
) -> environment.EnvironmentConfig:
    """Resolve the environment; assignments win over the process environment."""
    variables = {key: environ[key] for key in VARIABLES if key in environ}
    variables.update(assignments)

    overrides = {
        override: variables[var] for var, override in TOOL_VARIABLES.items() if var in variables
    }
    return environment.resolve(
        mode if mode is not None else variables.get("ENV"),
        overrides,
        php_args=variables.get("PHP_ARGS", environment.DEFAULT_PHP_ARGS),
    )


def exit_status(code: int) -> int:
    """Map a subprocess return code to a shell exit status (-N becomes 128+N)."""
    return 128 - code if code < 0 else code


def main(argv: Sequence[str] | None = None) -> int:
    args = _parser().parse_intermixed_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        targets, assignments = split_goals(args.goals)
        env = resolve_environment(assignments, os.environ, mode=args.env)
        registry = hcl.registry(*args.file, context={"env": dict(os.environ)})
    except (OSError, ValueError) as exc:
        logger.error("%s", exc)
        return EXIT_CONFIG_ERROR

    if not targets:
        if registry.default_goal is None:
            logger.error("No targets defined")
            return EXIT_CONFIG_ERROR
        targets = [registry.default_goal]

    engine = Engine(registry, console=Console(highlight=False))
    try:
        result = engine.run(targets, env, dry_run=args.dry_run)
    except ValueError as exc:
        logger.error("%s", exc)
        return EXIT_CONFIG_ERROR
    if result.failed:
        return exit_status(result.exit_code)
    return 0


if __name__ == "__main__":
    sys.exit(main())
