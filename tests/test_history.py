from pipeshell.history import History, load_history, save_history


def test_load_missing_file_returns_empty(tmp_path):
    assert load_history(tmp_path / "missing.txt") == []


def test_save_then_load(tmp_path):
    path = tmp_path / "nested" / "history.txt"
    save_history(path, ["ls .", "cat a | sort"])
    assert path.read_text() == "ls .\ncat a | sort\n"
    assert load_history(path) == ["ls .", "cat a | sort"]


def test_load_skips_blank_lines(tmp_path):
    path = tmp_path / "history.txt"
    path.write_text("ls\n\n   \npwd\n")
    assert load_history(path) == ["ls", "pwd"]


def test_load_tolerates_undecodable_file(tmp_path):
    path = tmp_path / "history.txt"
    path.write_bytes(b"\xff\xfe")
    assert load_history(path) == []


def test_add_skips_duplicates_and_leading_space():
    history = History()
    assert history.add("ls")
    assert not history.add("ls")
    assert not history.add(" secret")
    assert not history.add("   ")
    assert history.add("pwd")
    assert history.lines == ["ls", "pwd"]


def test_add_trims_to_max_entries():
    history = History(max_entries=2)
    for line in ("a", "b", "c"):
        history.add(line)
    assert history.lines == ["b", "c"]


def test_history_round_trip(tmp_path):
    path = tmp_path / "history.txt"
    history = History(["one"])
    history.add("two")
    history.save(path)
    assert History.load(path).lines == ["one", "two"]
