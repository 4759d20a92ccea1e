"""Rich rendering for quiz prompts and results."""

from __future__ import annotations

from typing import Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .questions import Question
from .runner import InputProvider, QuizOutcome, QuizResult

_OUTCOME_MESSAGES = {
    QuizOutcome.COMPLETED: ("You have completed the quiz.", "bold green"),
    QuizOutcome.EXPIRED: (
        "You have run out of time to complete the quiz.",
        "bold yellow",
    ),
    QuizOutcome.EXHAUSTED: (
        "Answer input ended before the quiz was finished.",
        "bold red",
    ),
}


def format_time_limit(time_limit: Optional[float]) -> str:
    if time_limit is None:
        return "no time limit"
    seconds = f"{time_limit:g}"
    unit = "second" if seconds == "1" else "seconds"
    return f"{seconds} {unit}"


def render_welcome(
    console: Console, total: int, time_limit: Optional[float]
) -> None:
    if time_limit is None:
        detail = "There is no time limit."
    else:
        detail = (
            f"You have {format_time_limit(time_limit)} to complete the quiz."
        )
    console.print(
        Panel(
            f"{total} question(s). {detail}",
            title="Welcome to the Quiz",
            border_style="cyan",
        )
    )


def wait_for_start(console: Console, input_provider: InputProvider) -> None:
    """Block until the user presses Enter; end of input also starts the quiz."""

    console.print(Text("Press Enter to start the quiz.", style="dim"))
    try:
        input_provider()
    except (EOFError, StopIteration):
        pass


def render_question(
    console: Console, index: int, total: int, question: Question
) -> None:
    line = Text.assemble(
        (f"{index + 1}) ", "bold cyan"),
        (question.prompt, "bold"),
        (f"  [{index + 1}/{total}]", "dim"),
    )
    console.print(line)


def render_outcome(console: Console, outcome: QuizOutcome) -> None:
    message, style = _OUTCOME_MESSAGES[outcome]
    console.print()
    console.print(Text(message, style=style))


def render_summary(console: Console, result: QuizResult) -> None:
    console.rule(Text("Quiz Results", style="bold magenta"))
    overview = Table(show_header=False, box=box.MINIMAL_DOUBLE_HEAD)
    overview.add_column("Metric", style="bold")
    overview.add_column("Value", justify="right")
    overview.add_row("Total questions", str(result.total))
    overview.add_row("Correct", str(result.correct))
    overview.add_row("Incorrect", str(result.incorrect))
    overview.add_row("Unanswered", str(result.unanswered))
    overview.add_row("Time elapsed", f"{result.elapsed:.2f} seconds")
    overview.add_row("Score", f"{result.score:.2f}%")
    console.print(overview)


def render_responses(console: Console, result: QuizResult) -> None:
    """Per-question review, including questions left unanswered."""

    table = Table(title="Responses", box=box.SIMPLE, expand=True)
    table.add_column("#", justify="right")
    table.add_column("Question", overflow="fold")
    table.add_column("Your answer")
    table.add_column("Correct answer")
    table.add_column("Result", justify="center")

    for record in result.responses:
        your = record.given if record.given is not None else "—"
        outcome = "✅" if record.is_correct else "❌"
        table.add_row(
            str(record.index + 1),
            record.prompt,
            your,
            record.expected.strip(),
            outcome,
        )
    if result.unanswered:
        table.caption = f"{result.unanswered} question(s) left unanswered."
    console.print(table)
