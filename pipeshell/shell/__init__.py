"""Shell package: registry, executor and the Shell facade."""

from .common import CommandResult
from .core import Shell
from .executor import PipelineExecutor
from .registry import CommandRegistry

__all__ = ["Shell", "CommandResult", "CommandRegistry", "PipelineExecutor"]
