"""Exceptions raised while building or running a quiz."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .runner import QuizResult

__all__ = [
    "QuizError",
    "QuizFileError",
    "MalformedRecord",
    "EmptyQuestionSet",
    "InputExhausted",
]


class QuizError(RuntimeError):
    """Base class for quiz failures reported to the caller."""


class QuizFileError(QuizError):
    """Raised when a question file cannot be used as quiz input."""


class MalformedRecord(QuizError):
    """Raised when an input row does not hold exactly a prompt and answer."""

    def __init__(self, position: int, field_count: int) -> None:
        self.position = position
        self.field_count = field_count
        super().__init__(
            f"Row {position} has {field_count} field(s); expected 2 "
            "(question, answer)."
        )


class EmptyQuestionSet(QuizError):
    """Raised when there are no questions to ask."""

    def __init__(self, message: str = "No questions found.") -> None:
        super().__init__(message)


class InputExhausted(QuizError):
    """Raised when the answer stream ends before the quiz is finished.

    ``result`` holds the frozen result at the moment input ran out, with the
    unresolved questions counted as unanswered.
    """

    def __init__(self, result: "QuizResult") -> None:
        self.result = result
        super().__init__(
            "Answer input ended after {0} of {1} question(s).".format(
                result.answered, result.total
            )
        )
