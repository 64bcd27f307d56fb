"""Input history, persisted as one line per entry."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)


def load_history(path: Path) -> list[str]:
    """Return saved lines, or an empty list when there is nothing usable."""

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return []
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("could not read history from %s: %s", path, exc)
        return []
    return [line for line in text.splitlines() if line.strip()]


def save_history(path: Path, lines: Iterable[str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("".join(f"{line}\n" for line in lines), encoding="utf-8")


class History:
    """Ordered session history.

    Lines that start with a space are not recorded and a line equal to the
    previous entry is stored once.
    """

    def __init__(self, lines: Iterable[str] = (), *, max_entries: int = 1000) -> None:
        self.max_entries = max_entries
        self.lines: list[str] = list(lines)[-max_entries:]

    def add(self, line: str) -> bool:
        if not line.strip() or line.startswith(" "):
            return False
        entry = line.strip()
        if self.lines and self.lines[-1] == entry:
            return False
        self.lines.append(entry)
        if len(self.lines) > self.max_entries:
            del self.lines[: len(self.lines) - self.max_entries]
        return True

    @classmethod
    def load(cls, path: Path, *, max_entries: int = 1000) -> History:
        return cls(load_history(path), max_entries=max_entries)

    def save(self, path: Path) -> None:
        save_history(path, self.lines)



__all__ = ["History", "load_history", "save_history"]
