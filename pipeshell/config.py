"""Process-wide settings read from the environment."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

APP_NAME = "pipeshell"
HISTORY_FILENAME = "history.txt"
DEFAULT_PROMPT = ">> "
DEFAULT_BANNER = "Welcome to pipeshell! Type 'help' for builtins, 'exit' to leave."
_TRUTHY = {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class ShellConfig:
    history_path: Path | None
    prompt: str = DEFAULT_PROMPT
    debug: bool = False
    banner: str = DEFAULT_BANNER


def config_dir(environ: Mapping[str, str]) -> Path | None:
    xdg = environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / APP_NAME
    home = environ.get("HOME")
    if home:
        return Path(home) / ".config" / APP_NAME
    return None


def load_config(environ: Mapping[str, str] | None = None) -> ShellConfig:
    env = os.environ if environ is None else environ
    override = env.get("PIPESHELL_HISTORY")
    if override:
        history_path: Path | None = Path(override).expanduser()
    else:
        folder = config_dir(env)
        history_path = folder / HISTORY_FILENAME if folder is not None else None
    debug = env.get("PIPESHELL_DEBUG", "").strip().lower() in _TRUTHY
    return ShellConfig(history_path=history_path, debug=debug)


def ensure_history_file(path: Path | None) -> bool:
    """Create the history file and its folder; False means run without it."""

    if path is None:
        logger.warning("could not find a configuration folder; history is disabled")
        return False
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.touch(exist_ok=True)
    except OSError as exc:
        logger.warning("could not create %s (%s); history is disabled", path, exc)
        return False
    return True


__all__ = ["ShellConfig", "config_dir", "ensure_history_file", "load_config"]
