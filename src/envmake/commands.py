"""Command builder: substitute ${...} placeholders in recipe lines."""

from __future__ import annotations

import logging
import re

from .environment import EnvironmentConfig

logger = logging.getLogger(__name__)

_PLACEHOLDER_PATTERN = re.compile(r"\$\$\{|(\$\{([^{}]+)\})")

PLACEHOLDERS = ("interpreter", "project_tool", "dependency_manager", "label", "mode")


class CommandBuilder:
    """Fill recipe templates from a resolved environment."""

    def __init__(self, env: EnvironmentConfig) -> None:
        self._values = {name: str(getattr(env, name)) for name in PLACEHOLDERS}

    def _replace(self, match: re.Match) -> str:  # type: ignore[type-arg]
        if match.group(0) == "$${":
            return "${"
        name = match.group(2).strip()
        if name not in self._values:
            # left for the shell, e.g. ${HOME}
            logger.debug("Leaving unknown placeholder '%s' unchanged", name)
            return match.group(1)
        return self._values[name]

    def build(self, line: str) -> str:
        """Return the concrete command for a single recipe template.

        Lines without ``${`` pass through unchanged. Use ``$${...}`` for a
        literal ``${...}``.
        """
        if "${" not in line:
            return line
        return _PLACEHOLDER_PATTERN.sub(self._replace, line)


def build(line: str, env: EnvironmentConfig) -> str:
    """Substitute the environment's invocation prefixes into a recipe line."""
    return CommandBuilder(env).build(line)
