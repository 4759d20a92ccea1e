from .errors import (
    EmptyQuestionSet,
    InputExhausted,
    MalformedRecord,
    QuizError,
    QuizFileError,
)
from .questions import Question, QuestionSet
from .runner import (
    AnswerRecord,
    ExhaustionPolicy,
    QuizOutcome,
    QuizResult,
    TimedQuizRunner,
)
from .loader import (
    load_question_set,
    read_records,
    shuffle_records,
    validate_extension,
)

__all__ = [
    "QuizError",
    "QuizFileError",
    "MalformedRecord",
    "EmptyQuestionSet",
    "InputExhausted",
    "Question",
    "QuestionSet",
    "AnswerRecord",
    "ExhaustionPolicy",
    "QuizOutcome",
    "QuizResult",
    "TimedQuizRunner",
    "load_question_set",
    "read_records",
    "shuffle_records",
    "validate_extension",
]
