from pathlib import Path

import pytest

from pipeshell.plan import build_pipeline
from pipeshell.shell.common import CommandResult
from pipeshell.shell.executor import PipelineExecutor
from pipeshell.shell.host import StdioMode, spawn_process
from pipeshell.shell.registry import CommandRegistry
from pipeshell.shell_parser import parse_line


class Recorder:
    def __init__(self, fail: bool = False) -> None:
        self.calls: list[list[Path]] = []
        self.fail = fail

    def __call__(self, paths) -> None:
        self.calls.append(list(paths))
        if self.fail:
            raise RuntimeError("boom")


@pytest.fixture
def workdir(tmp_path, monkeypatch) -> Path:
    monkeypatch.chdir(tmp_path)
    (tmp_path / "fruit.txt").write_text("pear\napple\nfig\n")
    return tmp_path


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def executor(recorder) -> PipelineExecutor:
    registry = CommandRegistry({"rec": recorder}, {"show": "cat", "lines": "wc -l"})
    return PipelineExecutor(registry)


def run(executor: PipelineExecutor, line: str) -> CommandResult:
    return executor.execute(build_pipeline(parse_line(line)))


def test_single_external_command(executor, workdir):
    result = run(executor, "echo hello world")
    assert result.stdout == "hello world\n"
    assert result.stderr == ""
    assert result.exit_code == 0


def test_exit_code_of_failing_program(executor, workdir):
    result = run(executor, "cat missing.txt")
    assert result.exit_code != 0
    assert result.stdout == ""


def test_alias_is_resolved_before_spawning(executor, workdir):
    assert run(executor, "show fruit.txt").stdout == "pear\napple\nfig\n"
    assert run(executor, "lines fruit.txt").stdout.split() == ["3", "fruit.txt"]


def test_output_redirection_truncates(executor, workdir):
    (workdir / "out.txt").write_text("old contents that are longer\n")
    result = run(executor, "echo new > out.txt")
    assert result.stdout == ""
    assert result.exit_code == 0
    assert (workdir / "out.txt").read_text() == "new\n"


def test_append_redirection_creates_then_appends(executor, workdir):
    run(executor, "echo one >> log.txt")
    run(executor, "echo two >> log.txt")
    assert (workdir / "log.txt").read_text() == "one\ntwo\n"


def test_output_goes_to_every_target(executor, workdir):
    run(executor, "echo hi > a.txt b.txt")
    assert (workdir / "a.txt").read_text() == "hi\n"
    assert (workdir / "b.txt").read_text() == "hi\n"


def test_input_redirection_single_stage(executor, workdir):
    result = run(executor, "sort < fruit.txt")
    assert result.stdout == "apple\nfig\npear\n"


def test_input_redirection_missing_file(executor, workdir):
    result = run(executor, "cat < nope.txt")
    assert result.exit_code == 1
    assert "nope.txt" in result.stderr
    assert "cannot read input" in result.stderr


def test_unwritable_target_is_reported(executor, workdir):
    (workdir / "folder").mkdir()
    result = run(executor, "echo hi > folder ok.txt")
    assert result.exit_code == 1
    assert "folder: cannot write output" in result.stderr
    assert (workdir / "ok.txt").read_text() == "hi\n"


def test_undecodable_output_is_reported(executor, workdir):
    (workdir / "blob.bin").write_bytes(b"\xff\xfe\xfa")
    result = run(executor, "cat blob.bin")
    assert result.exit_code == 1
    assert result.stdout == ""
    assert "UTF-8" in result.stderr


def test_unknown_program(executor, workdir):
    result = run(executor, "no-such-program-here arg")
    assert result.exit_code == 127
    assert "no-such-program-here: command not found" in result.stderr


def test_two_stage_pipe(executor, workdir):
    result = run(executor, "cat fruit.txt | sort")
    assert result.stdout == "apple\nfig\npear\n"
    assert result.exit_code == 0


def test_three_stage_pipe_prints_last_output(executor, workdir):
    result = run(executor, "cat fruit.txt | sort -r | head -n 1")
    assert result.stdout == "pear\n"


def test_pipe_with_output_redirection(executor, workdir):
    result = run(executor, "cat fruit.txt | sort | head -n 2 > top.txt")
    assert result.stdout == ""
    assert (workdir / "top.txt").read_text() == "apple\nfig\n"


def test_pipe_with_input_redirection_feeds_first_stage(executor, workdir):
    result = run(executor, "sort | head -n 1 < fruit.txt")
    assert result.stdout == "apple\n"


def test_pipe_with_missing_input(executor, workdir):
    result = run(executor, "sort | head -n 1 < nope.txt")
    assert result.exit_code == 1
    assert "cannot read input" in result.stderr


def test_missing_input_is_reported_when_first_stage_is_builtin(executor, recorder, workdir):
    result = run(executor, "rec | sort < missing.txt")
    assert result.exit_code == 1
    assert "missing.txt: cannot read input" in result.stderr
    assert recorder.calls == []


def test_builtin_first_stage_notes_ignored_input(executor, recorder, workdir):
    result = run(executor, "rec | sort < fruit.txt")
    assert recorder.calls == [[]]
    assert "input from fruit.txt is ignored by builtin 'rec'" in result.stderr
    assert result.stdout == ""
    assert result.exit_code == 0


def test_single_builtin_with_input_redirection(executor, recorder, workdir):
    result = run(executor, "rec < fruit.txt")
    assert recorder.calls == [[]]
    assert "ignored by builtin 'rec'" in result.stderr
    missing = run(executor, "rec < missing.txt")
    assert missing.exit_code == 1
    assert "cannot read input" in missing.stderr
    assert recorder.calls == [[]]


def test_spawn_failure_aborts_pipeline(executor, workdir):
    result = run(executor, "cat fruit.txt | no-such-program-here | sort")
    assert result.exit_code == 127
    assert "no-such-program-here" in result.stderr
    assert result.stdout == ""


def test_builtin_runs_in_process(executor, recorder, workdir):
    result = run(executor, "rec a b/c")
    assert recorder.calls == [[Path("a"), Path("b/c")]]
    assert result == CommandResult()


def test_builtin_output_redirection_writes_empty_output(executor, recorder, workdir):
    (workdir / "out.txt").write_text("stale\n")
    run(executor, "rec > out.txt")
    assert recorder.calls == [[]]
    assert (workdir / "out.txt").read_text() == ""


def test_builtin_mid_pipe_breaks_the_chain(executor, recorder, workdir):
    result = run(executor, "cat fruit.txt | rec x | sort")
    assert recorder.calls == [[Path("x")]]
    assert "breaks the pipe chain" in result.stderr
    assert result.stdout == ""
    assert result.exit_code == 0


def test_builtin_at_end_of_pipe(executor, recorder, workdir):
    result = run(executor, "cat fruit.txt | rec")
    assert recorder.calls == [[]]
    assert result.stdout == ""


def test_builtin_failure_is_reported(workdir):
    executor = PipelineExecutor(CommandRegistry({"bad": Recorder(fail=True)}))
    result = run(executor, "bad")
    assert "bad failed: boom" in result.stderr


def test_stdout_is_handed_to_the_next_stage(workdir):
    seen = []

    def spawner(argv, *, stdin, stdout):
        seen.append((argv[0], stdin, stdout))
        return spawn_process(argv, stdin=stdin, stdout=stdout)

    executor = PipelineExecutor(CommandRegistry(), spawner=spawner)
    result = executor.execute(build_pipeline(parse_line("cat fruit.txt | sort | head -n 1")))
    assert result.stdout == "apple\n"
    assert [name for name, _, _ in seen] == ["cat", "sort", "head"]
    assert seen[0][1] is StdioMode.PIPE
    assert all(not isinstance(stdin, StdioMode) for _, stdin, _ in seen[1:])
    assert all(stdout is StdioMode.PIPE for _, _, stdout in seen)
    # The parent's copies of the hand-off handles are closed.
    assert all(stdin.closed for _, stdin, _ in seen[1:])


def test_single_stage_inherits_stdin(workdir):
    seen = []

    def spawner(argv, *, stdin, stdout):
        seen.append(stdin)
        return spawn_process(argv, stdin=stdin, stdout=stdout)

    executor = PipelineExecutor(CommandRegistry(), spawner=spawner)
    executor.execute(build_pipeline(parse_line("echo hi")))
    assert seen == [StdioMode.INHERIT]
