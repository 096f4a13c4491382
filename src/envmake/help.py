"""Help renderer: list described targets."""

from __future__ import annotations

from rich.text import Text

from .registry import Registry

NAME_WIDTH = 30

PREAMBLE = (
    "You prepend/append the argument 'ENV=(local|docker)' to each target. This specifies,\n"
    "whether to execute the target within your local environment, or docker (default).\n"
)


def render(registry: Registry) -> Text:
    """Usage preamble plus one highlighted line per described target."""
    text = Text(PREAMBLE)
    text.append("\n")
    for name, description in registry.described():
        text.append(f"{name:<{NAME_WIDTH}}", style="green")
        text.append(f" {description}\n")
    text.rstrip()
    return text
