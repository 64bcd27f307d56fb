"""GNU readline integration: history recall, filename completion, prompt colour."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from types import ModuleType

from .history import History

logger = logging.getLogger(__name__)

# Only whitespace separates words, so paths with dots or dashes complete whole.
COMPLETER_DELIMS = " \t\n"

_PROMPT_START = "\001\x1b[32m\002"
_PROMPT_END = "\001\x1b[0m\002"


def _load_readline() -> ModuleType | None:
    try:
        import readline
    except ImportError:
        return None
    return readline


def filename_candidates(text: str) -> list[str]:
    """Return the paths that complete ``text``, directories with a trailing slash."""

    head, _, prefix = text.rpartition(os.sep)
    if head:
        folder = Path(os.path.expanduser(head + os.sep))
        shown = head + os.sep
    else:
        folder = Path(os.sep) if text.startswith(os.sep) else Path(".")
        shown = os.sep if text.startswith(os.sep) else ""
    try:
        entries = sorted(folder.iterdir(), key=lambda entry: entry.name)
    except OSError:
        return []
    matches: list[str] = []
    for entry in entries:
        if not entry.name.startswith(prefix):
            continue
        if entry.name.startswith(".") and not prefix.startswith("."):
            continue
        suffix = os.sep if entry.is_dir() else ""
        matches.append(f"{shown}{entry.name}{suffix}")
    return matches


def complete_filename(text: str, state: int) -> str | None:
    """readline completer: the ``state``-th candidate for ``text``."""

    matches = filename_candidates(text)
    if state < len(matches):
        return matches[state]
    return None


def setup_readline(history: History) -> bool:
    """Configure readline for the REPL and seed it with ``history``.

    Lines reach readline's history only through :func:`record_readline`, so
    entries that :class:`History` rejects (blank, leading space, repeats) are
    not recalled either. Returns ``False`` when readline is unavailable.
    """

    readline = _load_readline()
    if readline is None:
        logger.debug("readline unavailable; line editing disabled")
        return False
    readline.set_auto_history(False)
    readline.set_completer(complete_filename)
    readline.set_completer_delims(COMPLETER_DELIMS)
    if "libedit" in (readline.__doc__ or ""):
        readline.parse_and_bind("bind ^I rl_complete")
    else:
        readline.parse_and_bind("tab: complete")
    readline.clear_history()
    for line in history.lines:
        readline.add_history(line)
    return True


def record_readline(line: str) -> None:
    readline = _load_readline()
    if readline is not None:
        readline.add_history(line)


def colour_prompt(prompt: str) -> str:
    """Wrap ``prompt`` in green; the escapes are marked zero-width for readline."""

    return f"{_PROMPT_START}{prompt}{_PROMPT_END}"


__all__ = [
    "COMPLETER_DELIMS",
    "colour_prompt",
    "complete_filename",
    "filename_candidates",
    "record_readline",
    "setup_readline",
]
