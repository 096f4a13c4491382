"""Target model: a named recipe with dependencies."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from pydantic import BaseModel, Field

from .context import Context
from .errors import RecipeFailed

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecipeLine:
    """A recipe template with its make-style prefixes stripped.

    ``@`` suppresses the command echo, ``-`` ignores a non-zero exit status.
    """

    command: str
    quiet: bool = False
    ignore_errors: bool = False

    @classmethod
    def parse(cls, line: str) -> RecipeLine:
        quiet = ignore_errors = False
        text = line.lstrip()
        while text[:1] in ("@", "-"):
            if text[0] == "@":
                quiet = True
            else:
                ignore_errors = True
            text = text[1:].lstrip()
        return cls(command=text, quiet=quiet, ignore_errors=ignore_errors)


def _union(*groups: Iterable[str]) -> list[str]:
    """Concatenate groups, keeping the first occurrence of each item."""
    seen: dict[str, None] = {}
    for group in groups:
        for item in group:
            seen.setdefault(item, None)
    return list(seen)


class Target(BaseModel):
    """A named unit of work."""

    model_config = {"extra": "forbid"}

    name: str
    description: str = ""
    depends_on: list[str] = Field(default_factory=list)
    phony: bool = True
    recipe: list[str] = Field(default_factory=list)
    prerequisites: list[str] = Field(default_factory=list)
    artifact: str | None = None
    builtin: str | None = None

    @property
    def artifact_path(self) -> str:
        """Artifact backing a non-phony target; defaults to the target name."""
        return self.artifact or self.name

    def __iter__(self) -> Iterator[RecipeLine]:  # type: ignore[override]
        return (RecipeLine.parse(line) for line in self.recipe)

    def merge(self, other: Target) -> Target:
        """Amend this declaration with a later one of the same name."""
        if other.name != self.name:
            raise ValueError(f"Cannot merge target '{other.name}' into '{self.name}'")
        logger.debug("Amending target '%s'", self.name)
        return Target(
            name=self.name,
            description=other.description or self.description,
            depends_on=_union(self.depends_on, other.depends_on),
            phony=other.phony if "phony" in other.model_fields_set else self.phony,
            recipe=[*self.recipe, *other.recipe],
            prerequisites=_union(self.prerequisites, other.prerequisites),
            artifact=other.artifact or self.artifact,
            builtin=other.builtin or self.builtin,
        )

    def build(self, ctx: Context) -> None:
        """Execute the builtin action (if any) and every recipe line in order."""
        logger.debug("Building target '%s'", self.name)
        if self.builtin is not None:
            ctx.actions[self.builtin](ctx)

        for line in self:
            command = ctx.commands.build(line.command)
            if ctx.dry_run:
                ctx.echo(command)
                continue
            if not line.quiet:
                ctx.echo(command)
            code = ctx.run(command)
            if code == 0:
                continue
            if line.ignore_errors:
                logger.warning("Target '%s': ignoring exit code %d", self.name, code)
                continue
            raise RecipeFailed(self.name, command, code)
