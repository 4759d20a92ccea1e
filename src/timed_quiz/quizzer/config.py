"""Configuration loader for `quiz run`."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, MutableMapping, Optional

from timed_quiz.core import config as core_config
from timed_quiz.core import workspace as workspace_mod

from .runner import ExhaustionPolicy

CONFIG_FILENAME = "quiz.toml"
CONFIG_ENV = "TIMED_QUIZ_CONFIG"
ENV_PREFIX = "TIMED_QUIZ_"

_DEFAULT_FILE = "problems.csv"
_DEFAULT_TIME_LIMIT = 30
_DEFAULT_LOG_LEVEL = "INFO"
_TRUE_VALUES = {"1", "true", "yes", "y", "on"}
_FALSE_VALUES = {"0", "false", "no", "n", "off"}


class QuizConfigError(RuntimeError):
    """Raised when configuration parsing or validation fails."""


@dataclass(frozen=True)
class QuizConfig:
    """Fully resolved settings for one quiz run.

    ``time_limit`` is ``None`` when the quiz is untimed; a configured value
    of ``0`` seconds maps to ``None``.
    """

    file: Path
    time_limit: Optional[float]
    shuffle: bool
    wait_for_start: bool
    on_exhausted: ExhaustionPolicy
    show_responses: bool
    delimiter: str
    log_level: str


@dataclass(frozen=True)
class ConfigOverrides:
    """Values taken from CLI flags; ``None`` means not given."""

    file: Optional[Path] = None
    time_limit: Optional[float] = None
    shuffle: Optional[bool] = None
    wait_for_start: Optional[bool] = None
    on_exhausted: Optional[ExhaustionPolicy] = None
    show_responses: Optional[bool] = None
    log_level: Optional[str] = None


@dataclass(frozen=True)
class LoadResult:
    config: QuizConfig
    layout: workspace_mod.WorkspaceLayout
    config_path: Optional[Path]


def load_config(
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[ConfigOverrides] = None,
    env: Optional[Mapping[str, str]] = None,
    workspace_path: Optional[Path] = None,
) -> LoadResult:
    """Resolve settings with precedence CLI > env > TOML > defaults.

    A missing default config file is fine; a missing file that was asked for
    explicitly (flag or ``TIMED_QUIZ_CONFIG``) is an error.
    """

    overrides = overrides or ConfigOverrides()
    env_map = os.environ if env is None else env

    try:
        layout = workspace_mod.ensure_workspace(
            env=env_map, path=workspace_path
        )
    except workspace_mod.WorkspaceError as exc:
        raise QuizConfigError(str(exc)) from exc

    requested = _resolve_config_path(
        config_path=config_path,
        env_map=env_map,
        default_path=layout.path_for("config") / CONFIG_FILENAME,
    )

    table: Mapping[str, Mapping[str, object]] = _default_table()
    loaded_path: Optional[Path] = None
    if requested.exists():
        try:
            table = core_config.load_layered(requested, table)
        except core_config.TomlConfigError as exc:
            raise QuizConfigError(str(exc)) from exc
        loaded_path = requested
    elif config_path is not None or _env_string(env_map, "CONFIG"):
        raise QuizConfigError(f"Config file not found: {requested}")

    quiz = table["quiz"]
    file_value = _pick_first(
        overrides.file,
        _env_path(env_map, "FILE"),
        _coerce_path(quiz["file"]),
    )
    time_limit = _pick_first(
        overrides.time_limit,
        _env_number(env_map, "TIME_LIMIT"),
        quiz["time_limit"],
    )
    shuffle = _pick_first(
        overrides.shuffle,
        _env_bool(env_map, "SHUFFLE"),
        quiz["shuffle"],
    )
    log_level = _pick_first(
        overrides.log_level,
        _env_string(env_map, "LOG_LEVEL"),
        table["logging"]["level"],
    )

    config = QuizConfig(
        file=_resolve_file(file_value),
        time_limit=_normalize_time_limit(time_limit),
        shuffle=_require_bool("quiz.shuffle", shuffle),
        wait_for_start=_require_bool(
            "quiz.wait_for_start",
            _pick_first(overrides.wait_for_start, quiz["wait_for_start"]),
        ),
        on_exhausted=_resolve_policy(
            _pick_first(overrides.on_exhausted, quiz["on_exhausted"])
        ),
        show_responses=_require_bool(
            "quiz.show_responses",
            _pick_first(overrides.show_responses, quiz["show_responses"]),
        ),
        delimiter=_normalize_delimiter(quiz["delimiter"]),
        log_level=_normalize_log_level(log_level),
    )
    return LoadResult(config=config, layout=layout, config_path=loaded_path)


def _default_table() -> MutableMapping[str, MutableMapping[str, object]]:
    return {
        "quiz": {
            "file": _DEFAULT_FILE,
            "time_limit": _DEFAULT_TIME_LIMIT,
            "shuffle": True,
            "wait_for_start": True,
            "on_exhausted": ExhaustionPolicy.TERMINATE.value,
            "show_responses": False,
            "delimiter": ",",
        },
        "logging": {"level": _DEFAULT_LOG_LEVEL},
    }


def _resolve_config_path(
    *,
    config_path: Optional[Path],
    env_map: Mapping[str, str],
    default_path: Path,
) -> Path:
    if config_path is not None:
        return config_path.expanduser()
    env_candidate = _env_string(env_map, "CONFIG")
    if env_candidate:
        return Path(env_candidate).expanduser()
    return default_path


def _resolve_file(value: object) -> Path:
    if not isinstance(value, Path):
        raise QuizConfigError("quiz.file must be a non-empty string.")
    return value.expanduser()


def _coerce_path(value: object) -> Optional[Path]:
    if value is None:
        return None
    if isinstance(value, Path):
        return value
    if isinstance(value, str) and value.strip():
        return Path(value.strip())
    raise QuizConfigError("quiz.file must be a non-empty string.")


def _normalize_time_limit(value: object) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise QuizConfigError("quiz.time_limit must be a number of seconds.")
    if not math.isfinite(value):
        raise QuizConfigError("quiz.time_limit must be a finite number.")
    if value < 0:
        raise QuizConfigError("quiz.time_limit must not be negative.")
    if value == 0:
        return None
    return float(value)


def _resolve_policy(value: object) -> ExhaustionPolicy:
    if isinstance(value, ExhaustionPolicy):
        return value
    if isinstance(value, str):
        try:
            return ExhaustionPolicy.from_value(value)
        except ValueError as exc:
            raise QuizConfigError(str(exc)) from exc
    raise QuizConfigError("quiz.on_exhausted must be a string.")


def _normalize_delimiter(value: object) -> str:
    if not isinstance(value, str) or len(value) != 1:
        raise QuizConfigError("quiz.delimiter must be a single character.")
    return value


def _normalize_log_level(value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        raise QuizConfigError("logging.level must be a non-empty string.")
    return value.strip().upper()


def _require_bool(key: str, value: object) -> bool:
    if not isinstance(value, bool):
        raise QuizConfigError(f"{key} must be true or false.")
    return value


def _env_string(env_map: Mapping[str, str], key: str) -> Optional[str]:
    raw = env_map.get(f"{ENV_PREFIX}{key}")
    if raw is None:
        return None
    value = raw.strip()
    return value or None


def _env_path(env_map: Mapping[str, str], key: str) -> Optional[Path]:
    raw = _env_string(env_map, key)
    return Path(raw).expanduser() if raw is not None else None


def _env_number(env_map: Mapping[str, str], key: str) -> Optional[float]:
    raw = _env_string(env_map, key)
    if raw is None:
        return None
    try:
        return float(raw)
    except ValueError as exc:
        raise QuizConfigError(
            f"{ENV_PREFIX}{key} must be a number, got '{raw}'."
        ) from exc


def _env_bool(env_map: Mapping[str, str], key: str) -> Optional[bool]:
    raw = _env_string(env_map, key)
    if raw is None:
        return None
    lowered = raw.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise QuizConfigError(
        f"{ENV_PREFIX}{key} must be a boolean value, got '{raw}'."
    )


def _pick_first(*candidates: object) -> object:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None
