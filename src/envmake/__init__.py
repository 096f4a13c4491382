"""envmake - run project targets in a docker or local environment."""

from .engine import Engine as Engine
from .engine import ExecutionResult as ExecutionResult
from .environment import EnvironmentConfig as EnvironmentConfig
from .environment import resolve as resolve
from .errors import CyclicDependency as CyclicDependency
from .errors import RecipeFailed as RecipeFailed
from .errors import UnknownTarget as UnknownTarget
from .registry import Registry as Registry
from .targets import Target as Target
