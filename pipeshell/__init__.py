"""pipeshell package: an interactive command shell with pipes and redirection."""

from .config import ShellConfig, load_config
from .exceptions import ParseError, PlanError, RedirectionError, ShellError, SpawnError
from .history import History
from .plan import CommandStage, Pipeline, Redirection, build_pipeline
from .shell import CommandRegistry, CommandResult, PipelineExecutor, Shell
from .shell_parser import is_filename, parse_line, parse_tokens, tokenize
from .syntax import RedirectionOp

__all__ = [
    "Shell",
    "CommandResult",
    "CommandRegistry",
    "PipelineExecutor",
    "CommandStage",
    "Pipeline",
    "Redirection",
    "RedirectionOp",
    "build_pipeline",
    "is_filename",
    "parse_line",
    "parse_tokens",
    "tokenize",
    "History",
    "ShellConfig",
    "load_config",
    "ShellError",
    "ParseError",
    "PlanError",
    "SpawnError",
    "RedirectionError",
]
