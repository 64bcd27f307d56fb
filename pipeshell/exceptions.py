"""Exception hierarchy for pipeshell."""

from __future__ import annotations


class ShellError(Exception):
    """Base class for errors raised by the shell core."""


class ParseError(ShellError):
    """Raised when a token sequence does not match the command grammar."""

    def __init__(self, message: str, index: int) -> None:
        super().__init__(message)
        self.message = message
        self.index = index

    def __str__(self) -> str:
        return f"parse error at token {self.index}: {self.message}"


class PlanError(ShellError):
    """Raised when a syntax tree cannot be flattened into stages."""


class SpawnError(ShellError):
    """Raised when an external program cannot be started."""

    def __init__(self, program: str, reason: str) -> None:
        super().__init__(f"{program}: {reason}")
        self.program = program
        self.reason = reason


class RedirectionError(ShellError):
    """Raised when a redirection source or target cannot be used."""


__all__ = ["ShellError", "ParseError", "PlanError", "SpawnError", "RedirectionError"]
