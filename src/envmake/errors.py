"""Error types raised while planning and running targets."""

from __future__ import annotations


class UnknownTarget(ValueError):
    """A requested or depended-upon target is not registered."""

    def __init__(self, name: str, *, required_by: str | None = None) -> None:
        self.name = name
        self.required_by = required_by
        msg = f"Unknown target: '{name}'"
        if required_by is not None:
            msg += f" (needed by '{required_by}')"
        super().__init__(msg)


class CyclicDependency(ValueError):
    """The dependency graph contains a cycle."""

    def __init__(self, cycle: list[str]) -> None:
        self.cycle = cycle
        super().__init__(f"Circular dependency detected: {' -> '.join(cycle)}")


class RecipeFailed(RuntimeError):
    """A recipe line exited with a non-zero status."""

    def __init__(self, target: str, command: str, exit_code: int) -> None:
        self.target = target
        self.command = command
        self.exit_code = exit_code
        super().__init__(f"Target '{target}' failed with exit code {exit_code}: {command}")
