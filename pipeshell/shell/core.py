"""Core Shell implementation."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable, Mapping, Sequence
from pathlib import Path
from typing import NoReturn

from ..exceptions import ParseError, PlanError
from ..history import History
from ..plan import build_pipeline
from ..shell_parser import parse_tokens, tokenize
from ..syntax import format_tree
from .common import BuiltinHandler, CommandResult, ShellBuiltin
from .executor import PipelineExecutor
from .host import Spawner, spawn_process
from .registry import BUILTIN_CATALOG, DEFAULT_ALIASES, CommandRegistry

logger = logging.getLogger(__name__)

EXIT_PARSE_FAILED = 2


class Shell:
    """Parses input lines and runs them as pipelines."""

    def __init__(
        self,
        registry: CommandRegistry | None = None,
        *,
        aliases: Mapping[str, str] | None = None,
        spawner: Spawner = spawn_process,
        terminate: Callable[[int], NoReturn] = sys.exit,
        history: History | None = None,
    ) -> None:
        self.terminate = terminate
        self.history = history
        if registry is None:
            registry = self._default_registry(DEFAULT_ALIASES if aliases is None else aliases)
        self.registry = registry
        self.executor = PipelineExecutor(self.registry, spawner=spawner)

    # ------------------------------------------------------------------
    # Registry construction
    # ------------------------------------------------------------------
    def _bind_builtin(self, func: ShellBuiltin) -> BuiltinHandler:
        def bound(paths: Sequence[Path]) -> None:
            func(self, paths)

        return bound

    def _default_registry(self, aliases: Mapping[str, str]) -> CommandRegistry:
        # Import command modules for their side effects (registration)
        from . import commands  # noqa: F401

        builtins: dict[str, BuiltinHandler] = {}
        descriptions: dict[str, str] = {}
        for spec in BUILTIN_CATALOG.iter_builtins():
            builtins[spec.name] = self._bind_builtin(spec.handler)
            if spec.description:
                descriptions[spec.name] = spec.description
        return CommandRegistry(builtins, aliases, descriptions=descriptions)

    # ------------------------------------------------------------------
    # Dispatcher
    # ------------------------------------------------------------------
    def exec(self, line: str) -> CommandResult:
        tokens = tokenize(line)
        if not tokens:
            return CommandResult()
        logger.debug("tokens: %r", tokens)
        try:
            expr = parse_tokens(tokens)
            pipeline = build_pipeline(expr)
        except (ParseError, PlanError) as exc:
            return CommandResult(stderr=f"{exc}\n", exit_code=EXIT_PARSE_FAILED)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("parse tree:\n%s", format_tree(expr))
        return self.executor.execute(pipeline)


__all__ = ["Shell"]
