"""Command-line interface for pipeshell."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from .config import ShellConfig, ensure_history_file, load_config
from .history import History
from .line_editor import colour_prompt, record_readline, setup_readline
from .shell import CommandResult, Shell

logger = logging.getLogger(__name__)


def _configure_logging(config: ShellConfig) -> None:
    logging.basicConfig(
        level=logging.DEBUG if config.debug else logging.WARNING,
        format="[%(name)s] %(levelname)s: %(message)s",
    )


def _write_result(result: CommandResult) -> None:
    if result.stdout:
        sys.stdout.write(result.stdout)
        if not result.stdout.endswith("\n"):
            sys.stdout.write("\n")
    if result.stderr:
        sys.stderr.write(result.stderr)


def _open_history(config: ShellConfig) -> tuple[History, Path | None]:
    """Load saved history; the returned path is ``None`` when it cannot persist."""

    path = config.history_path
    if ensure_history_file(path) and path is not None:
        history = History.load(path)
    else:
        history, path = History(), None
    setup_readline(history)
    return history, path


def _prompt(config: ShellConfig) -> str:
    prompt = f"{os.getcwd()} {config.prompt}"
    if sys.stdout.isatty():
        return colour_prompt(prompt)
    return prompt


def _run_shell(config: ShellConfig) -> int:
    history, history_path = _open_history(config)
    shell = Shell(history=history)
    print(config.banner)
    while True:
        try:
            line = input(_prompt(config))
        except KeyboardInterrupt:
            print("^C")
            continue
        except EOFError:
            print("Exiting!")
            return 0
        if not line.strip():
            continue
        if history.add(line):
            record_readline(line.strip())
            if history_path is not None:
                try:
                    history.save(history_path)
                except OSError as exc:
                    logger.warning("could not save history: %s", exc)
        try:
            result = shell.exec(line)
        except KeyboardInterrupt:
            print("^C")
            continue
        _write_result(result)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="pipeshell",
        description="Interactive shell with pipes and file redirection.",
    )
    parser.parse_args(argv)
    config = load_config()
    _configure_logging(config)
    exit_code = _run_shell(config)
    raise SystemExit(exit_code)


__all__ = ["main"]
