"""Recursive-descent parser for pipelines and redirections.

Grammar::

    Expr            := CommandExpr ( PipeExpr | RedirectionExpr )?
    CommandExpr     := Command FileList
    PipeExpr        := '|' CommandExpr ( PipeExpr | RedirectionExpr )?
    RedirectionExpr := RedirectionOp FileList
    FileList        := ( File FileList ) | <empty>

Command names are not checked here; whether a name is a builtin or an
external program is decided when the plan is executed.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .exceptions import ParseError
from .syntax import (
    Command,
    CommandExpr,
    Expr,
    File,
    PipeExpr,
    RedirectionExpr,
    RedirectionOp,
    RedirectionOpNode,
)

logger = logging.getLogger(__name__)

PIPE_TOKEN = "|"
REDIRECTION_TOKENS = frozenset(op.token for op in RedirectionOp)
OPERATOR_TOKENS = REDIRECTION_TOKENS | {PIPE_TOKEN}


def tokenize(line: str) -> list[str]:
    return line.split()


def is_filename(token: str) -> bool:
    return token not in OPERATOR_TOKENS


class _Parser:
    def __init__(self, tokens: Sequence[str]) -> None:
        self.tokens = list(tokens)
        self.index = 0

    # ------------------------------------------------------------------
    # Token helpers
    # ------------------------------------------------------------------
    def _at_end(self) -> bool:
        return self.index >= len(self.tokens)

    def _peek(self) -> str:
        return self.tokens[self.index]

    def _advance(self) -> str:
        token = self.tokens[self.index]
        self.index += 1
        return token

    # ------------------------------------------------------------------
    # Grammar rules
    # ------------------------------------------------------------------
    def parse_expr(self) -> Expr:
        command_expr = self.parse_command_expr()
        tail = self.parse_tail()
        if not self._at_end():
            raise ParseError(f"expected end of input, got {self._peek()!r}", self.index)
        return Expr(command_expr, tail)

    def parse_tail(self) -> PipeExpr | RedirectionExpr | None:
        if self._at_end():
            return None
        if self._peek() == PIPE_TOKEN:
            return self.parse_pipe_expr()
        return self.parse_redirection_expr()

    def parse_command_expr(self) -> CommandExpr:
        command = self.parse_command()
        return CommandExpr(command, self.parse_file_list())

    def parse_pipe_expr(self) -> PipeExpr:
        self._advance()
        command_expr = self.parse_command_expr()
        return PipeExpr(command_expr, self.parse_tail())

    def parse_redirection_expr(self) -> RedirectionExpr:
        op = self.parse_redirection_op()
        files = self.parse_file_list()
        if not files:
            raise ParseError(f"expected a file after {op.op.token!r}", self.index)
        return RedirectionExpr(op, files)

    def parse_command(self) -> Command:
        if self._at_end():
            raise ParseError("expected a command but reached end of input", self.index)
        return Command(self._advance())

    def parse_redirection_op(self) -> RedirectionOpNode:
        token = self._peek()
        op = RedirectionOp.from_token(token)
        if op is None:
            raise ParseError(f"expected a redirection operator, got {token!r}", self.index)
        self._advance()
        return RedirectionOpNode(op)

    def parse_file_list(self) -> tuple[File, ...]:
        files: list[File] = []
        while not self._at_end() and is_filename(self._peek()):
            files.append(File(self._advance()))
        return tuple(files)


def parse_tokens(tokens: Sequence[str]) -> Expr:
    """Parse ``tokens`` into a syntax tree, raising :class:`ParseError`."""

    expr = _Parser(tokens).parse_expr()
    logger.debug("parsed %r into %r", list(tokens), expr)
    return expr


def parse_line(line: str) -> Expr:
    return parse_tokens(tokenize(line))


__all__ = [
    "OPERATOR_TOKENS",
    "PIPE_TOKEN",
    "REDIRECTION_TOKENS",
    "is_filename",
    "parse_line",
    "parse_tokens",
    "tokenize",
]
