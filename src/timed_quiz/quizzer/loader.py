import csv
import random

from pathlib import Path
from typing import List, Optional, Sequence

from .errors import QuizFileError
from .questions import QuestionSet


DEFAULT_EXTENSIONS = ("csv",)


def validate_extension(
    path: Path, extensions: Sequence[str] = DEFAULT_EXTENSIONS
) -> Path:
    """Return ``path`` when its suffix is one of ``extensions``.

    Extensions are compared case-insensitively and may be given with or
    without the leading dot.
    """
    allowed = {e.lower().lstrip(".") for e in extensions}
    suffix = Path(path).suffix.lower().lstrip(".")
    if suffix not in allowed:
        expected = ", ".join(sorted(allowed))
        raise QuizFileError(
            f"Unsupported question file '{path}'. Expected extension: "
            f"{expected}."
        )
    return Path(path)


def read_records(path: Path, *, delimiter: str = ",") -> List[List[str]]:
    """Read every non-blank row of a delimited file."""
    p = Path(path)
    try:
        with p.open("r", encoding="utf-8-sig", newline="") as fh:
            reader = csv.reader(fh, delimiter=delimiter, strict=True)
            return [row for row in reader if row]
    except FileNotFoundError as exc:
        raise QuizFileError(f"Question file not found: {p}") from exc
    except IsADirectoryError as exc:
        raise QuizFileError(f"Question file is a directory: {p}") from exc
    except UnicodeDecodeError as exc:
        raise QuizFileError(f"Question file is not UTF-8 text: {p}") from exc
    except csv.Error as exc:
        raise QuizFileError(f"Failed to parse {p}: {exc}") from exc


def shuffle_records(
    records: Sequence[Sequence[str]], *, seed: Optional[int] = None
) -> List[Sequence[str]]:
    """Return a shuffled copy of ``records``; deterministic when seeded."""
    shuffled = list(records)
    random.Random(seed).shuffle(shuffled)
    return shuffled


def load_question_set(
    path: Path,
    *,
    shuffle: bool = False,
    seed: Optional[int] = None,
    delimiter: str = ",",
    extensions: Sequence[str] = DEFAULT_EXTENSIONS,
) -> QuestionSet:
    """Validate, read and optionally shuffle a question file into a set."""
    validate_extension(path, extensions)
    records = read_records(path, delimiter=delimiter)
    if shuffle:
        records = shuffle_records(records, seed=seed)
    return QuestionSet.build(records)
