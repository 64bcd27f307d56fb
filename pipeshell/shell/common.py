"""Shared shell types."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .core import Shell


@dataclass(slots=True)
class CommandResult:
    stdout: str = ""
    stderr: str = ""
    exit_code: int = 0


BuiltinHandler = Callable[[Sequence[Path]], None]
ShellBuiltin = Callable[["Shell", Sequence[Path]], None]


__all__ = ["CommandResult", "BuiltinHandler", "ShellBuiltin"]
