"""Question model consumed by the timed runner."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from typing import overload

from .errors import EmptyQuestionSet, MalformedRecord


@dataclass(frozen=True)
class Question:
    """A prompt and the answer expected for it."""

    prompt: str
    answer: str

    def matches(self, response: str) -> bool:
        """Return True when ``response`` equals the answer after trimming.

        Only leading and trailing whitespace is ignored; case and inner
        punctuation must match exactly.
        """

        return response.strip() == self.answer.strip()


class QuestionSet(Sequence[Question]):
    """Immutable, ordered, non-empty collection of questions."""

    __slots__ = ("_questions",)

    def __init__(self, questions: Iterable[Question]) -> None:
        items = tuple(questions)
        if not items:
            raise EmptyQuestionSet()
        self._questions = items

    @classmethod
    def build(cls, rows: Iterable[Sequence[str]]) -> "QuestionSet":
        """Build a set from raw ``(prompt, answer)`` rows, keeping their order.

        Raises :class:`MalformedRecord` for the first row that does not have
        exactly two fields and :class:`EmptyQuestionSet` when ``rows`` is
        empty.
        """

        questions: list[Question] = []
        for position, row in enumerate(rows, start=1):
            # A bare string is one field, not a sequence of characters.
            fields = [row] if isinstance(row, str) else list(row)
            if len(fields) != 2:
                raise MalformedRecord(position, len(fields))
            prompt, answer = fields
            questions.append(Question(prompt=prompt, answer=answer))
        return cls(questions)

    @overload
    def __getitem__(self, index: int) -> Question: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[Question, ...]: ...

    def __getitem__(self, index):
        return self._questions[index]

    def __len__(self) -> int:
        return len(self._questions)

    def __iter__(self) -> Iterator[Question]:
        return iter(self._questions)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, QuestionSet):
            return NotImplemented
        return self._questions == other._questions

    def __hash__(self) -> int:
        return hash(self._questions)

    def __repr__(self) -> str:
        return f"QuestionSet({len(self._questions)} question(s))"
