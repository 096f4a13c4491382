"""Execution strategies: when a planned target's recipe actually runs."""

from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path

from .context import Context
from .targets import Target

logger = logging.getLogger(__name__)


def is_stale(target: Target, cwd: Path) -> bool:
    """True when the artifact is missing or older than any prerequisite.

    Metadata that cannot be read counts as stale.
    """
    artifact = cwd / target.artifact_path
    try:
        built = artifact.stat().st_mtime
    except FileNotFoundError:
        logger.debug("Artifact '%s' is missing", target.artifact_path)
        return True
    except OSError as exc:
        logger.warning("Cannot read '%s' (%s); assuming stale", target.artifact_path, exc)
        return True

    for name in target.prerequisites:
        try:
            changed = (cwd / name).stat().st_mtime
        except OSError as exc:
            logger.warning("Cannot read prerequisite '%s' (%s); assuming stale", name, exc)
            return True
        if changed > built:
            logger.debug("Prerequisite '%s' is newer than '%s'", name, target.artifact_path)
            return True
    return False


class TargetOp(ABC):
    """Wraps a Target with conditional execution logic."""

    def __init__(self, target: Target) -> None:
        self.target = target

    @abstractmethod
    def __call__(self, ctx: Context) -> bool:
        """Run the target if needed; return True when the recipe ran."""


class Always(TargetOp):
    """Phony target: run every time it is reached."""

    def __call__(self, ctx: Context) -> bool:
        logger.info("Running %s", self.target.name)
        self.target.build(ctx)
        return True


class WhenStale(TargetOp):
    """File-backed target: run only when the artifact is out of date."""

    def __call__(self, ctx: Context) -> bool:
        name = self.target.name
        if not is_stale(self.target, ctx.cwd):
            logger.info("Skipping %s; up to date", name)
            return False
        if ctx.dry_run:
            logger.info("[DRY RUN] Would run %s", name)
            self.target.build(ctx)
            return True

        logger.info("Running %s", name)
        self.target.build(ctx)
        self._touch(ctx.cwd / self.target.artifact_path)
        return True

    @staticmethod
    def _touch(artifact: Path) -> None:
        # a no-op install leaves the artifact untouched; mark it current
        if artifact.exists():
            os.utime(artifact)


def strategy_for(target: Target) -> TargetOp:
    return Always(target) if target.phony else WhenStale(target)
