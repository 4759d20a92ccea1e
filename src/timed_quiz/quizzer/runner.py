"""Timed quiz runner.

A run is a race between two activities. A worker thread walks the question
set in order, showing each prompt and blocking on one line of input per
question. The calling thread waits on the worker's completion event with the
configured time limit as its timeout. Whichever happens first ends the run
and freezes the counters into a :class:`QuizResult`; the worker may still be
blocked on input after an expiry, but anything it reads later is discarded.
"""

from __future__ import annotations

import logging
import math
import threading
import time
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import Callable, Optional, Union

from .errors import EmptyQuestionSet, InputExhausted
from .questions import Question

__all__ = [
    "AnswerRecord",
    "ExhaustionPolicy",
    "InputProvider",
    "QuestionRenderer",
    "QuizOutcome",
    "QuizResult",
    "TimedQuizRunner",
]

InputProvider = Callable[[], str]
QuestionRenderer = Callable[[int, int, Question], None]
TimeLimit = Union[float, int, timedelta, None]


class QuizOutcome(Enum):
    """How a run ended."""

    COMPLETED = "completed"
    EXPIRED = "expired"
    EXHAUSTED = "exhausted"


class ExhaustionPolicy(Enum):
    """What to do when the answer source runs out before the quiz ends."""

    TERMINATE = "terminate"
    INCORRECT = "incorrect"
    RAISE = "raise"

    @classmethod
    def from_value(cls, value: str) -> "ExhaustionPolicy":
        normalized = value.strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        expected = ", ".join(member.value for member in cls)
        raise ValueError(
            f"Unknown exhaustion policy '{value}'. Expected one of: {expected}."
        )


@dataclass(frozen=True)
class AnswerRecord:
    """One resolved question. ``given`` is None when no input was read."""

    index: int
    prompt: str
    expected: str
    given: Optional[str]
    is_correct: bool


@dataclass(frozen=True)
class QuizResult:
    """Final tally of a run."""

    total: int
    correct: int
    incorrect: int
    unanswered: int
    elapsed: float
    outcome: QuizOutcome
    responses: tuple[AnswerRecord, ...] = ()

    def __post_init__(self) -> None:
        counts = (self.total, self.correct, self.incorrect, self.unanswered)
        if any(value < 0 for value in counts):
            raise ValueError(f"Result counts must be non-negative: {counts}")
        if self.correct + self.incorrect + self.unanswered != self.total:
            raise ValueError(
                "correct + incorrect + unanswered must equal total "
                f"({self.correct} + {self.incorrect} + {self.unanswered} "
                f"!= {self.total})"
            )

    @property
    def answered(self) -> int:
        return self.correct + self.incorrect

    @property
    def score(self) -> float:
        """Percentage of all questions answered correctly."""

        if self.total == 0:
            raise ValueError("Score is undefined for a quiz with no questions.")
        return self.correct / self.total * 100


@dataclass(frozen=True)
class _Snapshot:
    correct: int
    incorrect: int
    responses: tuple[AnswerRecord, ...]
    outcome: Optional[QuizOutcome]
    error: Optional[BaseException]


class _Tally:
    """Counters written by the answering thread and frozen by the caller."""

    def __init__(self) -> None:
        self.done = threading.Event()
        self._lock = threading.Lock()
        self._correct = 0
        self._incorrect = 0
        self._responses: list[AnswerRecord] = []
        self._outcome: Optional[QuizOutcome] = None
        self._error: Optional[BaseException] = None
        self._frozen = False

    @property
    def frozen(self) -> bool:
        with self._lock:
            return self._frozen

    def record(self, answer: AnswerRecord) -> bool:
        with self._lock:
            if self._frozen:
                return False
            if answer.is_correct:
                self._correct += 1
            else:
                self._incorrect += 1
            self._responses.append(answer)
            return True

    def finish(
        self,
        outcome: Optional[QuizOutcome],
        error: Optional[BaseException] = None,
    ) -> None:
        with self._lock:
            if self._frozen:
                return
            self._outcome = outcome
            self._error = error
        self.done.set()

    def freeze(self) -> _Snapshot:
        with self._lock:
            self._frozen = True
            return _Snapshot(
                correct=self._correct,
                incorrect=self._incorrect,
                responses=tuple(self._responses),
                outcome=self._outcome,
                error=self._error,
            )


def _ignore_question(index: int, total: int, question: Question) -> None:
    return None


def _coerce_seconds(time_limit: TimeLimit) -> Optional[float]:
    if time_limit is None:
        return None
    if isinstance(time_limit, timedelta):
        seconds = time_limit.total_seconds()
    else:
        seconds = float(time_limit)
    if math.isnan(seconds):
        raise ValueError("time_limit must be a number of seconds, got NaN")
    if seconds < 0:
        raise ValueError(f"time_limit must be non-negative, got {seconds}")
    # Event.wait overflows past TIMEOUT_MAX; a limit that long never fires.
    if seconds > threading.TIMEOUT_MAX:
        return None
    return seconds


class TimedQuizRunner:
    """Run a question set against an answer source under an optional deadline.

    The runner keeps no state between calls; every :meth:`run` gets a fresh
    tally and worker thread.
    """

    def __init__(
        self,
        *,
        on_exhausted: ExhaustionPolicy = ExhaustionPolicy.TERMINATE,
        clock: Callable[[], float] = time.monotonic,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self.on_exhausted = on_exhausted
        self._clock = clock
        self._logger = logger or logging.getLogger(__name__)

    def run(
        self,
        questions: Sequence[Question],
        input_provider: InputProvider,
        *,
        time_limit: TimeLimit = None,
        on_question: Optional[QuestionRenderer] = None,
    ) -> QuizResult:
        """Ask every question in order until done, out of time or out of input.

        ``time_limit`` is in seconds (or a ``timedelta``); ``None`` waits for
        completion with no deadline. ``input_provider`` is called once per
        question and signals end of input by raising ``EOFError`` or
        ``StopIteration``. If both the deadline and completion are ready when
        the race is decided, completion wins.
        """

        total = len(questions)
        if total == 0:
            raise EmptyQuestionSet()
        deadline = _coerce_seconds(time_limit)

        tally = _Tally()
        started = self._clock()
        self._logger.info(
            "quiz started",
            extra={"questions": total, "time_limit": deadline},
        )
        worker = threading.Thread(
            target=self._collect_answers,
            args=(questions, input_provider, on_question or _ignore_question),
            kwargs={"tally": tally},
            name="quiz-answers",
            daemon=True,
        )
        worker.start()

        tally.done.wait(timeout=deadline)
        elapsed = self._clock() - started
        snapshot = tally.freeze()

        if snapshot.outcome is None and snapshot.error is not None:
            self._logger.error(
                "quiz aborted",
                extra={"error": repr(snapshot.error)},
            )
            raise snapshot.error

        outcome = snapshot.outcome or QuizOutcome.EXPIRED
        result = QuizResult(
            total=total,
            correct=snapshot.correct,
            incorrect=snapshot.incorrect,
            unanswered=total - (snapshot.correct + snapshot.incorrect),
            elapsed=elapsed,
            outcome=outcome,
            responses=snapshot.responses,
        )
        self._logger.info(
            "quiz finished",
            extra={
                "outcome": outcome.value,
                "correct": result.correct,
                "incorrect": result.incorrect,
                "unanswered": result.unanswered,
                "elapsed": round(elapsed, 3),
            },
        )

        if (
            outcome is QuizOutcome.EXHAUSTED
            and self.on_exhausted is ExhaustionPolicy.RAISE
        ):
            raise InputExhausted(result) from snapshot.error
        return result

    def _collect_answers(
        self,
        questions: Sequence[Question],
        input_provider: InputProvider,
        on_question: QuestionRenderer,
        *,
        tally: _Tally,
    ) -> None:
        total = len(questions)
        try:
            for index, question in enumerate(questions):
                if tally.frozen:
                    return
                on_question(index, total, question)
                try:
                    raw = input_provider()
                except (EOFError, StopIteration) as exc:
                    self._resolve_exhausted(questions, index, tally, exc)
                    return
                if raw is None:
                    self._resolve_exhausted(
                        questions, index, tally, EOFError("input closed")
                    )
                    return
                is_correct = question.matches(raw)
                answer = AnswerRecord(
                    index=index,
                    prompt=question.prompt,
                    expected=question.answer,
                    given=raw.strip(),
                    is_correct=is_correct,
                )
                if not tally.record(answer):
                    self._logger.debug(
                        "late answer discarded",
                        extra={"question": index + 1},
                    )
                    return
                self._logger.debug(
                    "answer recorded",
                    extra={"question": index + 1, "correct": is_correct},
                )
        except Exception as exc:
            tally.finish(None, error=exc)
            return
        tally.finish(QuizOutcome.COMPLETED)

    def _resolve_exhausted(
        self,
        questions: Sequence[Question],
        index: int,
        tally: _Tally,
        cause: BaseException,
    ) -> None:
        self._logger.warning(
            "answer input exhausted",
            extra={
                "question": index + 1,
                "policy": self.on_exhausted.value,
            },
        )
        if self.on_exhausted is ExhaustionPolicy.INCORRECT:
            for position in range(index, len(questions)):
                question = questions[position]
                tally.record(
                    AnswerRecord(
                        index=position,
                        prompt=question.prompt,
                        expected=question.answer,
                        given=None,
                        is_correct=False,
                    )
                )
        tally.finish(QuizOutcome.EXHAUSTED, error=cause)
