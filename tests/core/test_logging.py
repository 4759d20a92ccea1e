from __future__ import annotations

import json
import logging
from pathlib import Path

from timed_quiz.core import logging as core_logging


def _close(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_configure_logger_writes_json(tmp_path: Path) -> None:
    logger, log_path = core_logging.configure_logger(
        "timed_quiz.test_json",
        log_dir=tmp_path / "logs",
        level="INFO",
        filename="test.log",
    )

    logger.debug("hidden")
    logger.info("quiz started", extra={"questions": 2, "file": Path("a.csv")})
    try:
        raise ValueError("boom")
    except ValueError:
        logger.exception(
            "quiz aborted",
            extra={"detail": {"items": [Path("x"), 1]}, "obj": object},
        )
    _close(logger)

    lines = log_path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 2
    first = json.loads(lines[0])
    assert first["message"] == "quiz started"
    assert first["level"] == "INFO"
    assert first["extra"] == {"questions": 2, "file": "a.csv"}

    last = json.loads(lines[-1])
    assert "ValueError: boom" in last["exception"]
    assert last["extra"]["detail"]["items"] == ["x", 1]
    assert last["extra"]["obj"] == repr(object)


def test_configure_logger_reuses_handlers(tmp_path: Path) -> None:
    name = "timed_quiz.test_reuse"
    core_logging.configure_logger(name, log_dir=tmp_path / "a")
    logger, path = core_logging.configure_logger(name, log_dir=tmp_path / "b")

    managed = [
        h for h in logger.handlers if getattr(h, "_timed_quiz_file", False)
    ]
    assert len(managed) == 1
    assert path == tmp_path / "b" / "test_reuse.log"
    logger.info("after move")
    _close(logger)
    assert "after move" in path.read_text(encoding="utf-8")


def test_verbose_toggles_console_handler(tmp_path: Path) -> None:
    name = "timed_quiz.test_verbose"
    logger, _ = core_logging.configure_logger(
        name, log_dir=tmp_path, verbose=True
    )
    console = [
        h for h in logger.handlers if getattr(h, "_timed_quiz_console", False)
    ]
    assert len(console) == 1

    core_logging.configure_logger(name, log_dir=tmp_path, verbose=False)
    assert not any(
        getattr(h, "_timed_quiz_console", False) for h in logger.handlers
    )
    _close(logger)


def test_unknown_level_falls_back_to_info(tmp_path: Path) -> None:
    logger, log_path = core_logging.configure_logger(
        "timed_quiz.test_level", log_dir=tmp_path, level="chatty"
    )

    logger.debug("dropped")
    logger.info("kept")
    _close(logger)

    contents = log_path.read_text(encoding="utf-8")
    assert "kept" in contents
    assert "dropped" not in contents
