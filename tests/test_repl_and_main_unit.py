from pathlib import Path

import pytest

import main as entry
from console import storage
from console.evaluator import Evaluator
from console.parser import ParseError
from console.repl import BANNER, CLEAR_SCREEN, Repl
from engine.matrix import Matrix
from engine.value import Scalar


@pytest.fixture(autouse=True)
def _tmp_db(monkeypatch, tmp_path: Path):
    data_dir = tmp_path / "data"
    monkeypatch.setattr(storage, "_DATA_DIR", str(data_dir))
    monkeypatch.setattr(storage, "_DATA_FILE", str(data_dir / "matcalc.json"))


def _scripted(lines):
    """Return (repl, output) where the repl reads *lines* then hits EOF."""
    feed = iter(lines)
    output = []

    def fake_input(prompt: str) -> str:
        try:
            return next(feed)
        except StopIteration:
            raise EOFError from None

    repl = Repl(input_fn=fake_input, output=output.append, show_banner=False)
    return repl, output


# ── Repl ────────────────────────────────────────────────────────────────

def test_friendly_error_for_parse_value_and_internal() -> None:
    assert Repl._friendly_error(ParseError("Unexpected end of input", 3)).startswith(
        "Syntax error: Unexpected end of input"
    )
    assert Repl._friendly_error(ValueError("bad")) == "Error: bad"
    assert Repl._friendly_error(RuntimeError("boom")) == "Internal error: boom"


def test_render_scalar_and_matrix() -> None:
    repl = Repl()
    assert repl.render("x", Scalar(0.5)) == "x = 0.5000"
    assert repl.render("A", Matrix.from_rows([[1, 2]])) == "A = \n\n   1   2\n"
    repl.precision = 1
    assert repl.render("x", Scalar(0.25)) == "x = 0.2"


def test_session_prints_last_statement() -> None:
    repl, output = _scripted(["x = 3", "y = x * 2; y + 1", "", "pi"])
    repl.run()
    assert output == ["x = 3", "ans = 7", "ans = 3.1416", ""]
    assert repl.evaluator.variables["y"] == Scalar(6)


def test_errors_do_not_end_the_session() -> None:
    repl, output = _scripted(["1 +", "foo", "1 / 0", "2"])
    repl.run()
    assert output[0].startswith("Syntax error:")
    assert output[1] == 'Error: The variable "foo" is not defined.'
    assert output[2] == "Error: 1/0 is not defined."
    assert output[3] == "ans = 2"


def test_unexpected_exception_is_reported(monkeypatch) -> None:
    repl, output = _scripted([])

    def explode(source):
        raise RuntimeError("boom")

    monkeypatch.setattr(repl.evaluator, "run", explode)
    assert repl.handle("1 + 1") is True
    assert output == ["Internal error: boom"]


@pytest.mark.parametrize("command", ["exit", "quit", "  exit  "])
def test_exit_commands(command) -> None:
    repl, output = _scripted([command, "1 + 1"])
    repl.run()
    assert output == []


def test_clc_and_who() -> None:
    repl, output = _scripted(["clc", "b = 1", "who"])
    repl.run()
    assert output[0] == CLEAR_SCREEN
    assert output[2] == "b  e  pi"


def test_banner_is_shown_once() -> None:
    output = []
    repl = Repl(input_fn=lambda prompt: "exit", output=output.append)
    repl.run()
    assert output == [BANNER]


def test_keyboard_interrupt_ends_session() -> None:
    output = []

    def interrupt(prompt):
        raise KeyboardInterrupt

    Repl(input_fn=interrupt, output=output.append, show_banner=False).run()
    assert output == [""]


def test_history_is_recorded_and_listed() -> None:
    repl, output = _scripted(["1 + 1", "2 * 3", "history"])
    repl.run()
    assert [r["expression"] for r in storage.get_history()] == ["2 * 3", "1 + 1"]
    assert output[2:4] == ["1 + 1  ->  ans = 2", "2 * 3  ->  ans = 6"]


def test_history_can_be_disabled() -> None:
    repl, _ = _scripted(["1 + 1"])
    repl.save_history = False
    repl.run()
    assert storage.get_history() == []


def test_failed_lines_are_not_recorded() -> None:
    repl, _ = _scripted(["1 / 0"])
    repl.run()
    assert storage.get_history() == []


def test_custom_evaluator_is_used() -> None:
    ev = Evaluator({"k": Scalar(5)})
    output = []
    repl = Repl(evaluator=ev, output=output.append, show_banner=False)
    repl.handle("k + 1")
    assert output == ["ans = 6"]
    assert ev.variables["ans"] == Scalar(6)


# ── main ────────────────────────────────────────────────────────────────

@pytest.fixture
def logging_calls(monkeypatch):
    calls = []
    monkeypatch.setattr(entry, "setup_logging", lambda *args: calls.append(args))
    return calls


def test_main_eval_prints_result(capsys, logging_calls) -> None:
    assert entry.main(["-e", "A = [1, 2; 3, 4]; det(A)"]) == 0
    assert capsys.readouterr().out == "ans = -2\n"
    assert logging_calls == [("WARNING", None)]


def test_main_eval_reports_errors(capsys, logging_calls) -> None:
    assert entry.main(["-e", "1 +"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("Syntax error:")


def test_main_precision_flag(capsys, logging_calls) -> None:
    entry.main(["--precision", "2", "-e", "pi"])
    assert capsys.readouterr().out == "ans = 3.14\n"


def test_main_uses_stored_settings(capsys, logging_calls) -> None:
    storage.save_settings({"precision": 6, "log_level": "DEBUG"})
    entry.main(["-e", "pi"])
    assert capsys.readouterr().out == "ans = 3.141593\n"
    assert logging_calls == [("DEBUG", None)]


def test_main_log_flags(logging_calls) -> None:
    entry.main(["--log-level", "INFO", "--log-file", "calc.log", "-e", "1"])
    assert logging_calls == [("INFO", "calc.log")]


def test_main_without_eval_runs_repl(monkeypatch, logging_calls) -> None:
    started = []
    monkeypatch.setattr(Repl, "run", lambda self: started.append(self))
    assert entry.main(["--no-history"]) == 0
    assert len(started) == 1
    assert started[0].save_history is False
