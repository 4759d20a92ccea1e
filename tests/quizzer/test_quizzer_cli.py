from __future__ import annotations

import builtins
import io
import json
import sys
from pathlib import Path
from typing import Iterable

import pytest
from rich.console import Console

from fixtures import scripted, write_csv
from timed_quiz.quizzer import cli as quiz_cli
from timed_quiz.quizzer.config import QuizConfig
from timed_quiz.quizzer.questions import QuestionSet
from timed_quiz.quizzer.runner import ExhaustionPolicy

CAPITALS = [["2+2?", "4"], ["Capital of France?", "Paris"]]


def _config(**overrides) -> QuizConfig:
    values = dict(
        file=Path("problems.csv"),
        time_limit=None,
        shuffle=False,
        wait_for_start=False,
        on_exhausted=ExhaustionPolicy.TERMINATE,
        show_responses=False,
        delimiter=",",
        log_level="INFO",
    )
    values.update(overrides)
    return QuizConfig(**values)


def _feed_input(monkeypatch: pytest.MonkeyPatch, lines: Iterable[str]) -> None:
    provider = scripted(lines)

    def fake_input(prompt: str = "") -> str:
        try:
            return provider()
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr(builtins, "input", fake_input)
    monkeypatch.setattr(sys, "stdin", io.StringIO())


def test_run_quiz_prints_summary() -> None:
    console = Console(record=True, width=100)
    questions = QuestionSet.build(CAPITALS)

    code = quiz_cli.run_quiz(
        questions,
        _config(show_responses=True, wait_for_start=True),
        console=console,
        input_provider=scripted(["", "4", "Lyon"]),
    )

    rendered = console.export_text()
    assert code == 0
    assert "1) 2+2?" in rendered
    assert "2) Capital of France?" in rendered
    assert "You have completed the quiz." in rendered
    assert "50.00%" in rendered
    assert "Responses" in rendered


def test_run_quiz_raise_policy_reports_partial_result() -> None:
    console = Console(record=True, width=100)
    questions = QuestionSet.build(CAPITALS)

    code = quiz_cli.run_quiz(
        questions,
        _config(on_exhausted=ExhaustionPolicy.RAISE),
        console=console,
        input_provider=scripted(["4"]),
    )

    rendered = console.export_text()
    assert code == 1
    assert "Answer input ended" in rendered
    assert "Error:" in rendered


def test_main_runs_quiz_from_csv(
    tmp_path: Path,
    quiz_home: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    csv_path = write_csv(tmp_path / "problems.csv", CAPITALS)
    _feed_input(monkeypatch, ["", " 4 ", "Paris"])

    code = quiz_cli.main([str(csv_path), "--no-shuffle", "--time-limit", "0"])

    out = capsys.readouterr().out
    assert code == 0
    assert "There is no time limit." in out
    assert "You have completed the quiz." in out
    assert "100.00%" in out

    log_file = quiz_home / "logs" / "quizzer.log"
    events = [
        json.loads(line)["message"]
        for line in log_file.read_text(encoding="utf-8").splitlines()
    ]
    assert "quiz started" in events
    assert "quiz finished" in events


def test_main_counts_unanswered_when_input_ends(
    tmp_path: Path,
    quiz_home: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    csv_path = write_csv(tmp_path / "problems.csv", CAPITALS)
    _feed_input(monkeypatch, ["4"])

    code = quiz_cli.main([str(csv_path), "--no-shuffle", "--no-wait"])

    out = capsys.readouterr().out
    assert code == 0
    assert "Answer input ended" in out
    assert "Unanswered" in out
    assert "50.00%" in out


def test_main_reports_malformed_file(
    tmp_path: Path,
    quiz_home: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    csv_path = write_csv(tmp_path / "problems.csv", [["onlyprompt"]])
    _feed_input(monkeypatch, [])

    code = quiz_cli.main([str(csv_path), "--no-wait"])

    out = capsys.readouterr().out
    assert code == 1
    assert "Row 1 has 1 field(s)" in out
    assert "1)" not in out


def test_main_rejects_wrong_extension(
    tmp_path: Path, quiz_home: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    code = quiz_cli.main([str(tmp_path / "problems.txt")])

    assert code == 1
    assert "Unsupported question file" in capsys.readouterr().out


def test_main_config_error_exits_with_usage(
    tmp_path: Path, quiz_home: Path
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        quiz_cli.main(["--time-limit", "-5"])

    assert excinfo.value.code == 2


def test_main_rejects_non_finite_time_limit(
    quiz_home: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        quiz_cli.main(["--time-limit", "inf"])

    assert excinfo.value.code == 2
    assert "finite" in capsys.readouterr().err


def test_config_init_writes_template(
    quiz_home: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    code = quiz_cli.main(["config", "init"])

    target = quiz_home / "config" / "quiz.toml"
    assert code == 0
    assert target.exists()
    assert "[quiz]" in target.read_text(encoding="utf-8")
    assert str(target) in capsys.readouterr().out

    again = quiz_cli.main(["config", "init"])
    assert again == 1
    assert quiz_cli.main(["config", "init", "--force"]) == 0


def test_config_init_to_explicit_path(
    tmp_path: Path, quiz_home: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)

    code = quiz_cli.main(["config", "init", "--path", "custom.toml"])

    assert code == 0
    assert (tmp_path / "custom.toml").exists()


def test_check_main_counts_questions(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    csv_path = write_csv(tmp_path / "problems.csv", CAPITALS)

    code = quiz_cli.check_main([str(csv_path)])

    assert code == 0
    assert "2 question(s)" in capsys.readouterr().out


def test_check_main_reports_errors(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    csv_path = write_csv(tmp_path / "problems.csv", [["a", "b", "c"]])

    code = quiz_cli.check_main([str(csv_path)])

    assert code == 1
    assert "Row 1 has 3 field(s)" in capsys.readouterr().err


def test_check_main_rejects_long_delimiter(tmp_path: Path) -> None:
    with pytest.raises(SystemExit):
        quiz_cli.check_main([str(tmp_path / "p.csv"), "--delimiter", "ab"])
