"""Builtins for controlling and inspecting the shell itself."""

from __future__ import annotations

import sys
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from ..registry import BUILTIN_CATALOG

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from ..core import Shell

CLEAR_SCREEN = "\x1b[2J\x1b[H"


@BUILTIN_CATALOG.command("exit", description="Leave the shell")
def exit(shell: "Shell", _: Sequence[Path]) -> None:  # noqa: A001
    shell.terminate(0)


@BUILTIN_CATALOG.command("clear", description="Clear the terminal screen")
def clear(shell: "Shell", _: Sequence[Path]) -> None:
    sys.stdout.write(CLEAR_SCREEN)
    sys.stdout.flush()


@BUILTIN_CATALOG.command("help", description="Show builtins and aliases")
def help(shell: "Shell", _: Sequence[Path]) -> None:  # noqa: A001
    registry = shell.registry
    lines = ["Builtins:"]
    for name in registry.builtin_names():
        desc = registry.describe(name)
        lines.append(f"  {name} - {desc}" if desc else f"  {name}")
    lines.append("Aliases:")
    for name in registry.alias_names():
        lines.append(f"  {name} - {registry.describe(name)}")
    lines.append("Anything else is run as an external program.")
    print("\n".join(lines))


@BUILTIN_CATALOG.command("history", description="Show previously entered lines")
def history(shell: "Shell", _: Sequence[Path]) -> None:
    if shell.history is None:
        print("history is not available")
        return
    for idx, line in enumerate(shell.history.lines, start=1):
        print(f"{idx:>5}  {line}")
