from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterator

import pytest

TESTS_DIR = Path(__file__).resolve().parent
ROOT = TESTS_DIR.parent
for extra in (TESTS_DIR, ROOT / "src"):
    path_str = str(extra)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

from timed_quiz.core.workspace import WORKSPACE_ENV  # noqa: E402


@pytest.fixture
def quiz_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the workspace at a per-test directory."""

    home = tmp_path / "quiz-home"
    monkeypatch.setenv(WORKSPACE_ENV, str(home))
    for key in (
        "TIMED_QUIZ_CONFIG",
        "TIMED_QUIZ_FILE",
        "TIMED_QUIZ_TIME_LIMIT",
        "TIMED_QUIZ_SHUFFLE",
        "TIMED_QUIZ_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    return home


@pytest.fixture(autouse=True)
def _close_quiz_log_handlers() -> Iterator[None]:
    yield
    logger = logging.getLogger("timed_quiz.quizzer")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
