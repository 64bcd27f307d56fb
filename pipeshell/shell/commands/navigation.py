"""Working-directory builtins."""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from ..registry import BUILTIN_CATALOG

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from ..core import Shell


def change_folder(paths: Sequence[Path]) -> None:
    # No arguments is a no-op, like bash without $HOME handling.
    if not paths:
        return
    if len(paths) > 1:
        print("cd: too many arguments")
        return
    target = paths[0]
    if target.is_dir():
        try:
            os.chdir(target)
        except OSError as exc:
            print(f"Failed to change folder with error: {exc}")
    elif target.is_file():
        print(f'"{target}" is a file not a directory')
    else:
        print(f'"{target}" no such file or directory')


@BUILTIN_CATALOG.command("cd", description="Change the working directory")
def cd(shell: "Shell", paths: Sequence[Path]) -> None:
    change_folder(paths)


@BUILTIN_CATALOG.command("cf", description="Change folder (same as cd)")
def cf(shell: "Shell", paths: Sequence[Path]) -> None:
    change_folder(paths)
