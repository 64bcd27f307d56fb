"""Syntax tree produced by the command parser."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union


class RedirectionOp(Enum):
    OUTPUT = ">"
    APPEND = ">>"
    INPUT = "<"

    @property
    def token(self) -> str:
        return self.value

    @classmethod
    def from_token(cls, token: str) -> RedirectionOp | None:
        for op in cls:
            if op.value == token:
                return op
        return None


class NodeKind(Enum):
    EXPR = "Expr"
    COMMAND_EXPR = "CommandExpr"
    PIPE_EXPR = "PipeExpr"
    REDIRECTION_EXPR = "RedirectionExpr"
    COMMAND = "Command"
    FILE = "File"
    PIPE = "Pipe"
    REDIRECTION_OP = "RedirectionOp"


# ----------------------------------------------------------------------
# Leaves
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class Command:
    name: str
    kind: NodeKind = field(default=NodeKind.COMMAND, init=False, repr=False)
    children: tuple[()] = field(default=(), init=False, repr=False)


@dataclass(frozen=True)
class File:
    name: str
    kind: NodeKind = field(default=NodeKind.FILE, init=False, repr=False)
    children: tuple[()] = field(default=(), init=False, repr=False)


@dataclass(frozen=True)
class Pipe:
    kind: NodeKind = field(default=NodeKind.PIPE, init=False, repr=False)
    children: tuple[()] = field(default=(), init=False, repr=False)


@dataclass(frozen=True)
class RedirectionOpNode:
    op: RedirectionOp
    kind: NodeKind = field(default=NodeKind.REDIRECTION_OP, init=False, repr=False)
    children: tuple[()] = field(default=(), init=False, repr=False)


# ----------------------------------------------------------------------
# Branches
# ----------------------------------------------------------------------
@dataclass(frozen=True)
class CommandExpr:
    """A command followed by its (possibly empty) file arguments."""

    command: Command
    files: tuple[File, ...] = ()
    kind: NodeKind = field(default=NodeKind.COMMAND_EXPR, init=False, repr=False)

    @property
    def children(self) -> tuple[Command | File, ...]:
        return (self.command, *self.files)


@dataclass(frozen=True)
class RedirectionExpr:
    """A redirection operator and the non-empty list of files it targets."""

    op: RedirectionOpNode
    files: tuple[File, ...]
    kind: NodeKind = field(default=NodeKind.REDIRECTION_EXPR, init=False, repr=False)

    def __post_init__(self) -> None:
        if not self.files:
            raise ValueError("RedirectionExpr requires at least one file")

    @property
    def children(self) -> tuple[RedirectionOpNode | File, ...]:
        return (self.op, *self.files)


@dataclass(frozen=True)
class PipeExpr:
    """``|`` followed by the next command and an optional continuation."""

    command_expr: CommandExpr
    tail: PipeExpr | RedirectionExpr | None = None
    pipe: Pipe = field(default_factory=Pipe)
    kind: NodeKind = field(default=NodeKind.PIPE_EXPR, init=False, repr=False)

    @property
    def children(self) -> tuple[Pipe | CommandExpr | PipeExpr | RedirectionExpr, ...]:
        if self.tail is None:
            return (self.pipe, self.command_expr)
        return (self.pipe, self.command_expr, self.tail)


@dataclass(frozen=True)
class Expr:
    """Root of a parsed input line."""

    command_expr: CommandExpr
    tail: PipeExpr | RedirectionExpr | None = None
    kind: NodeKind = field(default=NodeKind.EXPR, init=False, repr=False)

    @property
    def children(self) -> tuple[CommandExpr | PipeExpr | RedirectionExpr, ...]:
        if self.tail is None:
            return (self.command_expr,)
        return (self.command_expr, self.tail)


Node = Union[
    Expr,
    CommandExpr,
    PipeExpr,
    RedirectionExpr,
    Command,
    File,
    Pipe,
    RedirectionOpNode,
]


def format_tree(node: Node, indent: int = 0) -> str:
    """Render a node and its descendants one per line, for debug output."""

    pad = "  " * indent
    if isinstance(node, (Command, File)):
        line = f"{pad}{node.kind.value}({node.name!r})"
    elif isinstance(node, RedirectionOpNode):
        line = f"{pad}{node.kind.value}({node.op.token!r})"
    else:
        line = f"{pad}{node.kind.value}"
    lines = [line]
    lines.extend(format_tree(child, indent + 1) for child in node.children)
    return "\n".join(lines)


__all__ = [
    "RedirectionOp",
    "NodeKind",
    "Command",
    "File",
    "Pipe",
    "RedirectionOpNode",
    "CommandExpr",
    "RedirectionExpr",
    "PipeExpr",
    "Expr",
    "Node",
    "format_tree",
]
