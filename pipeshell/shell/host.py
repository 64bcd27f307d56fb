"""Spawning external programs on the host."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable, Sequence
from enum import Enum
from typing import IO, Union

from ..exceptions import SpawnError

logger = logging.getLogger(__name__)


class StdioMode(Enum):
    INHERIT = "inherit"
    PIPE = "pipe"


Stdio = Union[StdioMode, IO[bytes]]
Spawner = Callable[..., "subprocess.Popen[bytes]"]


def _stdio_arg(stream: Stdio) -> int | IO[bytes] | None:
    if stream is StdioMode.INHERIT:
        return None
    if stream is StdioMode.PIPE:
        return subprocess.PIPE
    return stream


def spawn_process(
    argv: Sequence[str],
    *,
    stdin: Stdio = StdioMode.INHERIT,
    stdout: Stdio = StdioMode.PIPE,
) -> "subprocess.Popen[bytes]":
    """Start ``argv`` and return the running process.

    ``stdin`` may also be a readable file object, such as the stdout of an
    upstream process or a redirection source opened by the caller. Standard
    error is always inherited so diagnostics reach the terminal directly.
    """

    if not argv:
        raise SpawnError("", "missing program name")
    program = argv[0]
    try:
        process = subprocess.Popen(
            list(argv),
            stdin=_stdio_arg(stdin),
            stdout=_stdio_arg(stdout),
        )
    except FileNotFoundError:
        raise SpawnError(program, "command not found") from None
    except PermissionError:
        raise SpawnError(program, "permission denied") from None
    except OSError as exc:
        raise SpawnError(program, exc.strerror or str(exc)) from exc
    logger.debug("spawned %r as pid %s", list(argv), process.pid)
    return process


__all__ = ["Spawner", "Stdio", "StdioMode", "spawn_process"]
