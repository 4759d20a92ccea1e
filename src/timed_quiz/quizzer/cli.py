"""CLI entry points for running and checking quizzes."""

from __future__ import annotations

import argparse
import logging
import sys
from functools import partial
from pathlib import Path
from typing import Optional, Sequence

from rich.console import Console
from rich.markup import escape

from timed_quiz.core import config_templates
from timed_quiz.core import workspace as workspace_mod
from timed_quiz.core.config_templates import ConfigTemplateError
from timed_quiz.core.logging import configure_logger
from timed_quiz.core.workspace import WorkspaceError

from .answers import answer_source
from .config import (
    CONFIG_FILENAME,
    ConfigOverrides,
    QuizConfig,
    QuizConfigError,
    load_config,
)
from .errors import InputExhausted, QuizError
from .loader import load_question_set
from .questions import QuestionSet
from .runner import ExhaustionPolicy, InputProvider, TimedQuizRunner
from .view import (
    render_outcome,
    render_question,
    render_responses,
    render_summary,
    render_welcome,
    wait_for_start,
)

LOGGER_NAME = "timed_quiz.quizzer"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quiz run",
        description=(
            "Ask the questions in a CSV file one by one and report a score. "
            "The clock starts once you press Enter."
        ),
        epilog=(
            "Run `quiz run config init` to scaffold the default quiz.toml "
            "template."
        ),
    )
    parser.add_argument(
        "file",
        nargs="?",
        type=Path,
        help="CSV file of question,answer rows (defaults to quiz.file).",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to a TOML config file (defaults to the workspace config).",
    )
    parser.add_argument(
        "--workspace",
        type=Path,
        help="Override the workspace root used for config and logs.",
    )
    parser.add_argument(
        "--time-limit",
        type=float,
        help="Seconds allowed for the whole quiz; 0 disables the limit.",
    )
    shuffle = parser.add_mutually_exclusive_group()
    shuffle.add_argument(
        "--shuffle",
        dest="shuffle",
        action="store_true",
        default=None,
        help="Shuffle question order before starting.",
    )
    shuffle.add_argument(
        "--no-shuffle",
        dest="shuffle",
        action="store_false",
        help="Keep questions in file order.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the shuffle, for repeatable question order.",
    )
    parser.add_argument(
        "--no-wait",
        dest="wait_for_start",
        action="store_const",
        const=False,
        help="Start the clock immediately instead of waiting for Enter.",
    )
    parser.add_argument(
        "--on-exhausted",
        choices=[policy.value for policy in ExhaustionPolicy],
        help="How to treat questions left when input ends early.",
    )
    parser.add_argument(
        "--show-responses",
        dest="show_responses",
        action="store_const",
        const=True,
        help="Print a per-question review after the summary.",
    )
    parser.add_argument(
        "--log-level",
        help="Set the logging level for the run (defaults to INFO).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Also write log records to stderr.",
    )
    return parser


def run_quiz(
    questions: QuestionSet,
    config: QuizConfig,
    *,
    console: Console,
    input_provider: InputProvider,
    logger: Optional[logging.Logger] = None,
) -> int:
    """Present ``questions`` on ``console`` and print the results.

    Returns 0 once a result is printed, whichever way the run ended, and 1
    when input ran out under the ``raise`` policy.
    """
    render_welcome(console, len(questions), config.time_limit)
    if config.wait_for_start:
        wait_for_start(console, input_provider)

    runner = TimedQuizRunner(on_exhausted=config.on_exhausted, logger=logger)
    try:
        result = runner.run(
            questions,
            input_provider,
            time_limit=config.time_limit,
            on_question=partial(render_question, console),
        )
    except InputExhausted as exc:
        render_outcome(console, exc.result.outcome)
        render_summary(console, exc.result)
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        return 1

    render_outcome(console, result.outcome)
    render_summary(console, result)
    if config.show_responses:
        render_responses(console, result)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    args_list = list(argv) if argv is not None else list(sys.argv[1:])

    if args_list[:1] == ["config"]:
        return _handle_config(args_list[1:])

    parser = _build_parser()
    args = parser.parse_args(args_list)

    overrides = ConfigOverrides(
        file=args.file,
        time_limit=args.time_limit,
        shuffle=args.shuffle,
        wait_for_start=args.wait_for_start,
        on_exhausted=(
            ExhaustionPolicy.from_value(args.on_exhausted)
            if args.on_exhausted
            else None
        ),
        show_responses=args.show_responses,
        log_level=args.log_level,
    )
    try:
        load_result = load_config(
            config_path=args.config,
            overrides=overrides,
            workspace_path=args.workspace,
        )
    except QuizConfigError as exc:
        parser.error(str(exc))

    config = load_result.config
    logger, _ = configure_logger(
        LOGGER_NAME,
        log_dir=load_result.layout.path_for("logs"),
        level=config.log_level,
        verbose=args.verbose,
    )
    logger.debug(
        "quiz run invoked",
        extra={"file": config.file, "config_path": load_result.config_path},
    )

    console = Console()
    try:
        questions = load_question_set(
            config.file,
            shuffle=config.shuffle,
            seed=args.seed,
            delimiter=config.delimiter,
        )
    except QuizError as exc:
        logger.error("question file rejected", extra={"error": str(exc)})
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        return 1

    return run_quiz(
        questions,
        config,
        console=console,
        input_provider=answer_source(console),
        logger=logger,
    )


def _build_check_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quiz check",
        description="Validate a question file without starting a quiz.",
    )
    parser.add_argument("file", type=Path, help="CSV file to validate.")
    parser.add_argument(
        "--delimiter",
        default=",",
        help="Field delimiter used by the file.",
    )
    return parser


def check_main(argv: Sequence[str] | None = None) -> int:
    parser = _build_check_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    if len(args.delimiter) != 1:
        parser.error("--delimiter must be a single character.")

    try:
        questions = load_question_set(args.file, delimiter=args.delimiter)
    except QuizError as exc:
        sys.stderr.write(f"{exc}\n")
        return 1

    sys.stdout.write(f"{len(questions)} question(s) in {args.file}\n")
    return 0


def _handle_config(argv: Sequence[str]) -> int:
    parser = _build_config_parser()
    args = parser.parse_args(argv)

    try:
        target = _resolve_config_target(args)
    except WorkspaceError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    template = config_templates.get_template("quiz")
    try:
        written = template.write(target, overwrite=args.force)
    except ConfigTemplateError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    sys.stdout.write(f"Wrote quiz config to {written}\n")
    return 0


def _build_config_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="quiz run config",
        description="Manage the quiz.toml configuration file.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser(
        "init",
        help="Write the default quiz.toml template.",
    )
    init_parser.add_argument(
        "--path",
        type=Path,
        help="Destination for the config (defaults to the workspace).",
    )
    init_parser.add_argument(
        "--workspace",
        type=Path,
        help="Workspace root used when resolving the default config path.",
    )
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite the destination if a config already exists.",
    )
    return parser


def _resolve_config_target(args: argparse.Namespace) -> Path:
    if args.path is not None:
        candidate = args.path.expanduser()
        if not candidate.is_absolute():
            candidate = (Path.cwd() / candidate).resolve()
        return candidate

    layout = workspace_mod.ensure_workspace(path=args.workspace)
    return layout.path_for("config") / CONFIG_FILENAME


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
