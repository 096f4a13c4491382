"""HCL loading engine: parse .hcl target tables into a Registry."""

from __future__ import annotations

import logging
from importlib import resources
from pathlib import Path
from typing import Any

import hcl2
import jinja2
from lark.exceptions import LarkError

from .registry import Registry

logger = logging.getLogger(__name__)

BUILTIN_TABLE = "targets.hcl"


def loads(
    text: str,
    *,
    context: dict[str, Any] | None = None,
    source: str = "<string>",
) -> dict[str, Any]:
    """Parse HCL text after rendering it as a Jinja2 template with context."""
    ctx = context if context is not None else {}
    env = jinja2.Environment(
        undefined=jinja2.StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
    )
    try:
        template = env.from_string(text)
        text = template.render(ctx)
    except jinja2.TemplateError as exc:
        raise ValueError(f"{source}: {exc}") from exc
    try:
        return hcl2.loads(text)
    except LarkError as exc:
        raise ValueError(f"{source}: {exc}") from exc


def load(
    file: str | Path,
    *,
    context: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """Load and parse a single HCL file."""
    file = Path(file)
    logger.debug("Loading %s", file)
    return loads(file.read_text(), context=context, source=str(file))


def registry(
    *files: str | Path,
    context: dict[str, Any] | None = None,
) -> Registry:
    """Build a Registry from the given files, or the bundled table if none."""
    reg = Registry()
    if not files:
        table = resources.files(__package__).joinpath(BUILTIN_TABLE)
        reg.load(loads(table.read_text(), context=context, source=BUILTIN_TABLE))
    for file in files:
        reg.load(load(file, context=context))
    logger.debug("Loaded %d target(s)", len(reg))
    return reg
