"""Run a planned pipeline: builtins in-process, everything else on the host."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from pathlib import Path

from ..exceptions import RedirectionError, SpawnError
from ..plan import CommandStage, Pipeline, Redirection
from ..syntax import RedirectionOp
from .common import BuiltinHandler, CommandResult
from .host import Spawner, StdioMode, spawn_process
from .registry import CommandRegistry

logger = logging.getLogger(__name__)

EXIT_SPAWN_FAILED = 127
EXIT_STREAM_FAILED = 1


def _render(messages: Sequence[str]) -> str:
    return "".join(f"{message}\n" for message in messages)


def _decode(raw: bytes) -> str:
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise RedirectionError(f"could not decode command output as UTF-8: {exc.reason}") from exc


def _unreadable(source: Path, exc: OSError) -> RedirectionError:
    return RedirectionError(f"{source}: cannot read input: {exc.strerror or exc}")


def read_source(redirection: Redirection) -> bytes:
    """Return the contents of the file an input redirection reads from."""

    source = redirection.source
    try:
        return source.read_bytes()
    except OSError as exc:
        raise _unreadable(source, exc) from exc


def write_targets(redirection: Redirection, text: str) -> list[str]:
    """Write ``text`` to every target, returning one message per failure."""

    mode = "w" if redirection.op is RedirectionOp.OUTPUT else "a"
    failures: list[str] = []
    for target in redirection.targets:
        try:
            with target.open(mode, encoding="utf-8", newline="") as fp:
                fp.write(text)
        except OSError as exc:
            failures.append(f"{target}: cannot write output: {exc.strerror or exc}")
    return failures


class PipelineExecutor:
    """Resolves stages against a registry, spawns processes and wires stdio."""

    def __init__(
        self,
        registry: CommandRegistry,
        *,
        spawner: Spawner = spawn_process,
    ) -> None:
        self.registry = registry
        self.spawner = spawner

    def execute(self, pipeline: Pipeline) -> CommandResult:
        logger.debug("executing %d stage(s): %r", len(pipeline.stages), pipeline.stages)
        if len(pipeline.stages) == 1:
            return self._run_single(pipeline.stages[0])
        return self._run_chain(pipeline)

    # ------------------------------------------------------------------
    # Single stage
    # ------------------------------------------------------------------
    def _run_single(self, stage: CommandStage) -> CommandResult:
        redirection = stage.redirection
        handler = self.registry.get_builtin(stage.command)
        if handler is not None:
            messages: list[str] = []
            if redirection is not None and redirection.op is RedirectionOp.INPUT:
                try:
                    messages.append(self._ignored_input(redirection.source, stage.command))
                except RedirectionError as exc:
                    return CommandResult(stderr=_render([str(exc)]), exit_code=EXIT_STREAM_FAILED)
            messages.extend(self._call_builtin(handler, stage))
            return self._deliver(b"", 0, redirection, messages)

        feed: bytes | None = None
        stdin = StdioMode.INHERIT
        if redirection is not None and redirection.op is RedirectionOp.INPUT:
            try:
                feed = read_source(redirection)
            except RedirectionError as exc:
                return CommandResult(stderr=_render([str(exc)]), exit_code=EXIT_STREAM_FAILED)
            stdin = StdioMode.PIPE

        argv = self.registry.argv_for(stage.command, stage.args)
        try:
            process = self.spawner(argv, stdin=stdin, stdout=StdioMode.PIPE)
        except SpawnError as exc:
            return CommandResult(stderr=_render([str(exc)]), exit_code=EXIT_SPAWN_FAILED)
        # communicate() writes the feed, closes stdin and drains stdout.
        raw, _ = process.communicate(feed)
        return self._deliver(raw, process.returncode, redirection, [])

    # ------------------------------------------------------------------
    # Pipe chain
    # ------------------------------------------------------------------
    def _run_chain(self, pipeline: Pipeline) -> CommandResult:
        redirection = pipeline.redirection
        input_source: Path | None = None
        if redirection is not None and redirection.op is RedirectionOp.INPUT:
            input_source = redirection.source

        messages: list[str] = []
        first = pipeline.stages[0]
        if input_source is not None and self.registry.is_builtin(first.command):
            try:
                messages.append(self._ignored_input(input_source, first.command))
            except RedirectionError as exc:
                return CommandResult(stderr=_render([str(exc)]), exit_code=EXIT_STREAM_FAILED)
        started: list[subprocess.Popen[bytes]] = []
        previous: subprocess.Popen[bytes] | None = None
        for idx, stage in enumerate(pipeline.stages):
            handler = self.registry.get_builtin(stage.command)
            if handler is not None:
                messages.append(
                    f"builtin {stage.command!r} breaks the pipe chain; "
                    "it runs on its own and the next stage starts fresh"
                )
                if previous is not None and previous.stdout is not None:
                    previous.stdout.close()
                messages.extend(self._call_builtin(handler, stage))
                previous = None
                continue

            argv = self.registry.argv_for(stage.command, stage.args)
            source = input_source if idx == 0 else None
            try:
                previous = self._spawn_stage(argv, previous, source)
            except SpawnError as exc:
                messages.append(str(exc))
                return CommandResult(stderr=_render(messages), exit_code=EXIT_SPAWN_FAILED)
            except RedirectionError as exc:
                messages.append(str(exc))
                return CommandResult(stderr=_render(messages), exit_code=EXIT_STREAM_FAILED)
            started.append(previous)

        raw = b""
        exit_code = 0
        if previous is not None:
            raw = self._drain(previous)
            exit_code = previous.returncode
        for process in started:
            if process is not previous:
                process.wait()
        return self._deliver(raw, exit_code, redirection, messages)

    def _spawn_stage(
        self,
        argv: list[str],
        upstream: subprocess.Popen[bytes] | None,
        source: Path | None,
    ) -> subprocess.Popen[bytes]:
        if upstream is not None and upstream.stdout is not None:
            handoff = upstream.stdout
            try:
                return self.spawner(argv, stdin=handoff, stdout=StdioMode.PIPE)
            finally:
                # The child owns its copy now; ours would keep the pipe open.
                handoff.close()
        if source is not None:
            try:
                with source.open("rb") as fp:
                    return self.spawner(argv, stdin=fp, stdout=StdioMode.PIPE)
            except OSError as exc:
                raise _unreadable(source, exc) from exc
        process = self.spawner(argv, stdin=StdioMode.PIPE, stdout=StdioMode.PIPE)
        if process.stdin is not None:
            process.stdin.close()
        return process

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _drain(self, process: subprocess.Popen[bytes]) -> bytes:
        # stdin is either owned by the child or already closed here.
        if process.stdout is None:
            process.wait()
            return b""
        with process.stdout as stream:
            raw = stream.read()
        process.wait()
        return raw

    def _ignored_input(self, source: Path, command: str) -> str:
        """Check a source that a builtin will not read and describe why it is unused."""

        try:
            with source.open("rb"):
                pass
        except OSError as exc:
            raise _unreadable(source, exc) from exc
        return f"input from {source} is ignored by builtin {command!r}"

    def _call_builtin(self, handler: BuiltinHandler, stage: CommandStage) -> list[str]:
        logger.debug("running builtin %s with %r", stage.command, stage.args)
        try:
            handler([Path(arg) for arg in stage.args])
        except Exception as exc:  # unexpected failure path
            logger.debug("builtin %s raised", stage.command, exc_info=True)
            return [f"{stage.command} failed: {exc}"]
        return []

    def _deliver(
        self,
        raw: bytes,
        exit_code: int,
        redirection: Redirection | None,
        messages: list[str],
    ) -> CommandResult:
        try:
            text = _decode(raw)
        except RedirectionError as exc:
            messages.append(str(exc))
            return CommandResult(stderr=_render(messages), exit_code=EXIT_STREAM_FAILED)
        if redirection is None or redirection.op is RedirectionOp.INPUT:
            return CommandResult(stdout=text, stderr=_render(messages), exit_code=exit_code)
        logger.debug("writing %d chars to %r", len(text), redirection.targets)
        failures = write_targets(redirection, text)
        if failures:
            messages.extend(failures)
            exit_code = EXIT_STREAM_FAILED
        return CommandResult(stderr=_render(messages), exit_code=exit_code)


__all__ = ["PipelineExecutor", "read_source", "write_targets"]
