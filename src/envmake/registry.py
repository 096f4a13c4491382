"""Target registry: the declared targets, merged by name."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Any

from .errors import UnknownTarget
from .targets import Target

logger = logging.getLogger(__name__)


class Registry(Mapping[str, Target]):
    """Named targets, populated once at startup and read-only afterwards."""

    def __init__(self, targets: list[Target] | None = None) -> None:
        self._targets: dict[str, Target] = {}
        for target in targets or []:
            self.add(target)

    @property
    def default_goal(self) -> str | None:
        """The first declared target, run when none is requested."""
        return next(iter(self._targets), None)

    def add(self, target: Target) -> None:
        """Register a target; a repeated name amends the earlier declaration."""
        existing = self._targets.get(target.name)
        if existing is None:
            logger.debug("Found target '%s'", target.name)
            self._targets[target.name] = target
        else:
            self._targets[target.name] = existing.merge(target)

    def load(self, data: dict[str, Any]) -> None:
        """Extract target blocks from a parsed HCL data dict.

        HCL2 structure for target blocks:
            {"target": [{"vendor": {"phony": false, ...}}, ...]}
        """
        for block in data.get("target", []):
            if not isinstance(block, dict):
                raise ValueError(f"Target block must have a name label: {block!r}")
            for name, attrs in block.items():
                if not isinstance(attrs, dict):
                    raise ValueError(f"Target block must have a name label: '{name}'")
                if "name" in attrs:
                    raise ValueError(f"Target '{name}': 'name' comes from the block label")
                self.add(Target(name=name, **attrs))

    def lookup(self, name: str) -> Target:
        try:
            return self._targets[name]
        except KeyError:
            raise UnknownTarget(name) from None

    def described(self) -> list[tuple[str, str]]:
        """(name, description) of every described target, sorted by name."""
        return sorted((t.name, t.description) for t in self._targets.values() if t.description)

    def __getitem__(self, name: str) -> Target:
        return self._targets[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._targets)

    def __len__(self) -> int:
        return len(self._targets)

    def __repr__(self) -> str:
        return f"Registry(targets={len(self._targets)})"
