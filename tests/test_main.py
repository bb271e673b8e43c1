import io
import json
import locale

import pytest
import structlog

import main


@pytest.fixture
def run_main(tmp_path, monkeypatch, capsys):
    """Runs main() in tmp_path with a scripted stdin; returns (exit code, stdout)."""
    monkeypatch.chdir(tmp_path)
    collations = []
    monkeypatch.setattr(main.locale, "setlocale", lambda category, name: collations.append((category, name)))

    def _run(script):
        monkeypatch.setattr("sys.stdin", io.StringIO(script))
        with pytest.raises(SystemExit) as exit_info:
            main.main()
        return exit_info.value.code, capsys.readouterr().out

    _run.collations = collations
    yield _run
    structlog.reset_defaults()


def log_lines(tmp_path):
    return (tmp_path / "todos.log").read_text(encoding="utf-8").splitlines()


def test_quit_exits_zero(run_main, tmp_path):
    code, out = run_main("aBuy milk\nq")
    assert code == 0
    assert "See you soon!" in out
    assert json.loads((tmp_path / "todos.json").read_text(encoding="utf-8"))[0]["title"] == "Buy milk"
    assert run_main.collations == [(locale.LC_COLLATE, "")]

    lines = log_lines(tmp_path)
    assert any("event='session_started'" in line for line in lines)
    assert any("event='todo_added'" in line for line in lines)
    assert any("event='session_ended'" in line for line in lines)


def test_first_run_creates_empty_store(run_main, tmp_path):
    code, out = run_main("q")
    assert code == 0
    assert (tmp_path / "todos.json").read_text(encoding="utf-8") == "[]"
    assert "- No TODOs found" in out


def test_end_of_input_exits_zero(run_main, tmp_path):
    code, _ = run_main("")
    assert code == 0
    assert any("event='session_interrupted'" in line for line in log_lines(tmp_path))


def test_ctrl_c_exits_zero(run_main, tmp_path):
    code, out = run_main("\x03")
    assert code == 0
    assert "An error occurred" not in out


def test_corrupt_store_exits_one(run_main, tmp_path):
    (tmp_path / "todos.json").write_text("{not json", encoding="utf-8")
    code, out = run_main("q")
    assert code == 1
    assert "An error occurred:" in out
    lines = log_lines(tmp_path)
    assert any("event='session_failed'" in line and "level='error'" in line for line in lines)
    assert "JSONDecodeError" in (tmp_path / "todos.log").read_text(encoding="utf-8")


def test_missing_locale_falls_back(run_main, tmp_path, monkeypatch):
    def unsupported(category, name):
        raise locale.Error("unsupported locale setting")

    monkeypatch.setattr(main.locale, "setlocale", unsupported)
    code, out = run_main("q")
    assert code == 0
    assert "Traceback" not in out
    lines = log_lines(tmp_path)
    assert any("event='locale_unavailable'" in line and "level='warning'" in line for line in lines)


def test_setup_collation_swallows_only_locale_errors(monkeypatch):
    def broken(category, name):
        raise ValueError("bad category")

    monkeypatch.setattr(main.locale, "setlocale", broken)
    with pytest.raises(ValueError):
        main.setup_collation()
