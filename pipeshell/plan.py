"""Flatten a parsed syntax tree into an ordered list of command stages."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from .exceptions import PlanError
from .shell_parser import PIPE_TOKEN
from .syntax import (
    Command,
    CommandExpr,
    Expr,
    File,
    Pipe,
    PipeExpr,
    RedirectionExpr,
    RedirectionOp,
    RedirectionOpNode,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Redirection:
    op: RedirectionOp
    targets: tuple[Path, ...]

    @property
    def source(self) -> Path:
        """File fed to an input redirection; only the first target is read."""

        return self.targets[0]


@dataclass
class CommandStage:
    command: str
    args: list[str] = field(default_factory=list)
    redirection: Redirection | None = None

    def to_tokens(self) -> list[str]:
        return [self.command, *self.args]


@dataclass
class Pipeline:
    stages: list[CommandStage]

    def __post_init__(self) -> None:
        if not self.stages:
            raise PlanError("a pipeline needs at least one stage")

    @property
    def redirection(self) -> Redirection | None:
        for stage in self.stages:
            if stage.redirection is not None:
                return stage.redirection
        return None

    def to_tokens(self) -> list[str]:
        tokens: list[str] = []
        for idx, stage in enumerate(self.stages):
            if idx:
                tokens.append(PIPE_TOKEN)
            tokens.extend(stage.to_tokens())
        redirection = self.redirection
        if redirection is not None:
            tokens.append(redirection.op.token)
            tokens.extend(str(target) for target in redirection.targets)
        return tokens


class _StageBuilder:
    """Accumulates the stage currently being read from the tree."""

    def __init__(self) -> None:
        self.command = ""
        self.args: list[str] = []
        self.redirection: Redirection | None = None

    def read_command_expr(self, node: CommandExpr) -> None:
        for child in node.children:
            if isinstance(child, Command):
                self.command = child.name
            elif isinstance(child, File):
                self.args.append(child.name)
            else:
                raise PlanError(f"unexpected {child.kind.value} in command expression")

    def read_redirection_expr(self, node: RedirectionExpr) -> None:
        op: RedirectionOp | None = None
        targets: list[Path] = []
        for child in node.children:
            if isinstance(child, RedirectionOpNode):
                op = child.op
            elif isinstance(child, File):
                targets.append(Path(child.name))
            else:
                raise PlanError(f"unexpected {child.kind.value} in redirection expression")
        if op is None or not targets:
            raise PlanError("redirection expression needs an operator and a file")
        self.redirection = Redirection(op, tuple(targets))

    def finish(self) -> CommandStage:
        if not self.command:
            raise PlanError("stage has no command name")
        return CommandStage(self.command, self.args, self.redirection)


def build_pipeline(expr: Expr) -> Pipeline:
    """Walk ``expr`` left to right, cutting a new stage at every pipe."""

    stages: list[CommandStage] = []
    current = _StageBuilder()
    children = list(expr.children)
    idx = 0
    while idx < len(children):
        node = children[idx]
        if isinstance(node, CommandExpr):
            current.read_command_expr(node)
        elif isinstance(node, RedirectionExpr):
            current.read_redirection_expr(node)
        elif isinstance(node, PipeExpr):
            stages.append(current.finish())
            current = _StageBuilder()
            children = [child for child in node.children if not isinstance(child, Pipe)]
            idx = 0
            continue
        else:
            raise PlanError(f"unexpected {node.kind.value} at pipeline level")
        idx += 1
    stages.append(current.finish())

    pipeline = Pipeline(stages)
    _relocate_input_redirection(pipeline)
    logger.debug("built pipeline %r", pipeline)
    return pipeline


def _relocate_input_redirection(pipeline: Pipeline) -> None:
    # Input feeds the head of a chain; output and append stay on the tail.
    last = pipeline.stages[-1]
    if len(pipeline.stages) < 2 or last.redirection is None:
        return
    if last.redirection.op is RedirectionOp.INPUT:
        pipeline.stages[0].redirection = last.redirection
        last.redirection = None


__all__ = ["CommandStage", "Pipeline", "Redirection", "build_pipeline"]
