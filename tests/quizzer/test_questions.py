from __future__ import annotations

import pytest

from timed_quiz.quizzer.errors import EmptyQuestionSet, MalformedRecord
from timed_quiz.quizzer.questions import Question, QuestionSet


def test_build_preserves_order_and_length() -> None:
    rows = [("2+2?", "4"), ("Capital of France?", "Paris"), ("5-3?", "2")]

    questions = QuestionSet.build(rows)

    assert len(questions) == 3
    assert [q.prompt for q in questions] == [r[0] for r in rows]
    assert questions[1] == Question("Capital of France?", "Paris")
    assert questions[-1].answer == "2"


def test_build_accepts_empty_strings() -> None:
    questions = QuestionSet.build([["", ""]])

    assert questions[0] == Question("", "")


def test_single_field_row_is_malformed() -> None:
    with pytest.raises(MalformedRecord) as excinfo:
        QuestionSet.build([["onlyprompt"]])

    assert excinfo.value.position == 1
    assert excinfo.value.field_count == 1


def test_bare_string_row_is_one_field() -> None:
    with pytest.raises(MalformedRecord, match="Row 2 has 1 field"):
        QuestionSet.build([["a", "1"], "ab"])


def test_malformed_row_reports_its_position() -> None:
    rows = [["a", "1"], ["b", "2"], ["c", "3", "extra"]]

    with pytest.raises(MalformedRecord, match="Row 3 has 3 field"):
        QuestionSet.build(rows)


def test_no_rows_is_an_empty_set() -> None:
    with pytest.raises(EmptyQuestionSet):
        QuestionSet.build([])
    with pytest.raises(EmptyQuestionSet):
        QuestionSet([])


def test_question_set_is_read_only() -> None:
    questions = QuestionSet.build([("q", "a")])

    with pytest.raises(TypeError):
        questions[0] = Question("x", "y")  # type: ignore[index]
    with pytest.raises(AttributeError):
        questions[0].prompt = "changed"  # type: ignore[misc]


def test_question_sets_compare_by_content() -> None:
    first = QuestionSet.build([("q", "a")])
    second = QuestionSet([Question("q", "a")])

    assert first == second
    assert hash(first) == hash(second)
    assert "1 question" in repr(first)


@pytest.mark.parametrize(
    ("response", "expected", "matches"),
    [
        (" Paris\n", "Paris", True),
        ("paris", "Paris", False),
        ("Paris", " Paris ", True),
        ("Pa ris", "Paris", False),
        ("", "", True),
    ],
)
def test_question_matching(response: str, expected: str, matches: bool) -> None:
    assert Question("Capital?", expected).matches(response) is matches
