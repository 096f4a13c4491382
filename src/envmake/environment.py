"""Environment resolver: turn a mode selector into tool invocation prefixes."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping

from pydantic import BaseModel

logger = logging.getLogger(__name__)

LOCAL = "local"
DOCKER = "docker"

DEFAULT_PHP_ARGS = "-d memory_limit=1024M"

# image, in-container project path
INTERPRETER_IMAGE = ("php:8.1-cli", "/opt/project")
PROJECT_IMAGE = ("phpunit:local", "/project")
DEPENDENCY_MANAGER_IMAGE = ("composer:2", "/app")

OVERRIDE_KEYS = ("interpreter", "project_tool", "dependency_manager")


class EnvironmentConfig(BaseModel):
    """Resolved invocation prefixes for one run."""

    model_config = {"frozen": True}

    mode: str
    label: str
    interpreter: str
    project_tool: str
    dependency_manager: str

    @property
    def is_local(self) -> bool:
        return self.mode == LOCAL


def container_prefix(image: str, path: str, *, cwd: str, uid: int, gid: int) -> str:
    """Build a `docker run` prefix mounting cwd at path, owned by uid:gid."""
    return f"docker run -i --rm --user {uid}:{gid} -v {cwd}:{path} -w {path} {image}"


def _join(*parts: str) -> str:
    return " ".join(part for part in parts if part)


def _label(mode: str | None) -> str:
    if mode is None:
        return "Docker (default)"
    if mode == LOCAL:
        return "Local (also DDEV)"
    return "Docker"


def resolve(
    mode: str | None = None,
    overrides: Mapping[str, str] | None = None,
    *,
    php_args: str = DEFAULT_PHP_ARGS,
    cwd: str | None = None,
    uid: int | None = None,
    gid: int | None = None,
) -> EnvironmentConfig:
    """Resolve the three tool invocations for the given mode selector.

    Any selector other than ``local`` (including none) selects the container
    defaults. Entries in ``overrides`` replace the resolved strings verbatim.
    """
    # an empty selector counts as unset, like `ifdef ENV`
    mode = mode or None
    overrides = dict(overrides or {})
    unknown = set(overrides) - set(OVERRIDE_KEYS)
    if unknown:
        raise ValueError(f"Unknown override(s): {', '.join(sorted(unknown))}")

    if mode == LOCAL:
        tools = {
            "interpreter": _join("php", php_args),
            "project_tool": _join("php", php_args, "./vendor/bin/guides"),
            "dependency_manager": "composer",
        }
    else:
        cwd = cwd if cwd is not None else os.getcwd()
        uid = uid if uid is not None else os.getuid()
        gid = gid if gid is not None else os.getgid()
        ids = {"cwd": cwd, "uid": uid, "gid": gid}
        tools = {
            "interpreter": _join(container_prefix(*INTERPRETER_IMAGE, **ids), "php", php_args),
            "project_tool": container_prefix(*PROJECT_IMAGE, **ids),
            "dependency_manager": _join(container_prefix(*DEPENDENCY_MANAGER_IMAGE, **ids), "composer"),
        }

    for key, value in overrides.items():
        logger.debug("Overriding %s with '%s'", key, value)
        tools[key] = value

    env = EnvironmentConfig(
        mode=LOCAL if mode == LOCAL else DOCKER,
        label=_label(mode),
        **tools,
    )
    logger.debug("Resolved environment: %s", env.label)
    return env
