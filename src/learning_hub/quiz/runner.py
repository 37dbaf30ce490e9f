"""Rich console loop that drives a :class:`QuizSession`.

The runner is the terminal counterpart of the web quiz page: it renders the
current question, feeds the chosen option to the session and shows the
completion summary once every question has been answered. Input comes from
an injectable provider so tests can script a whole attempt.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Callable, Literal

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .codec import INVALID_FORMAT_LABEL, DecodeFailure, DecodeResult, decode
from .session import QuestionRecord, QuizSession, SessionState
from .summary import QuizSummary, review_items, summarize_session

__all__ = [
    "AnswerCommand",
    "QuizRunResult",
    "parse_answer_input",
    "run_quiz",
]

logger = logging.getLogger(__name__)

InputProvider = Callable[[], str]
ExitAction = Literal["completed", "quit", "empty"]

_QUIT_WORDS = {"q", "quit", "exit"}
_OPTION_LETTERS = "abcd"


@dataclass(frozen=True)
class AnswerCommand:
    """Normalized user input for the current question."""

    type: Literal["answer", "quit"]
    answer: str | None = None


@dataclass(frozen=True)
class QuizRunResult:
    """Return value from ``run_quiz``."""

    state: SessionState
    summary: QuizSummary
    exit_action: ExitAction


def parse_answer_input(
    raw: str | None, options: Sequence[str] = ()
) -> AnswerCommand | None:
    """Map console input onto an answer.

    Option numbers (``1``-``4``) and letters (``a``-``d``) pick the matching
    option. Any other text is submitted exactly as typed.
    """

    if raw is None:
        return None
    text = raw.strip()
    if not text:
        return None
    if text.lower() in _QUIT_WORDS:
        return AnswerCommand("quit")
    if options:
        if text.isdecimal() and 1 <= int(text) <= len(options):
            return AnswerCommand("answer", options[int(text) - 1])
        lowered = text.lower()
        if len(lowered) == 1 and lowered in _OPTION_LETTERS[: len(options)]:
            return AnswerCommand(
                "answer", options[_OPTION_LETTERS.index(lowered)]
            )
    return AnswerCommand("answer", raw)


def run_quiz(
    questions: Sequence[QuestionRecord],
    console: Console,
    input_provider: InputProvider,
    *,
    session: QuizSession | None = None,
) -> QuizRunResult:
    """Run one quiz attempt to completion or until the user quits."""

    session = session or QuizSession()
    session.start(questions)

    if not session.has_questions:
        console.print(
            Panel(
                "Question bank is empty.",
                title="Quiz",
                border_style="yellow",
            )
        )
        return QuizRunResult(
            session.state, summarize_session(session.state), "empty"
        )

    logger.info(
        "quiz started",
        extra={"event": "quiz_start", "questions": len(session.questions)},
    )

    exit_action: ExitAction = "quit"
    while not session.is_over:
        decoded = decode(session.current_question.prompt_raw)
        _render_question(console, session.state, decoded)
        try:
            raw = input_provider()
        except (EOFError, KeyboardInterrupt, StopIteration):
            console.print("\n[bold yellow]Quiz interrupted.[/]")
            break
        options = () if isinstance(decoded, DecodeFailure) else decoded.options
        command = parse_answer_input(raw, options)
        if command is None:
            console.print("[red]Enter an option number or type an answer.[/]")
            continue
        if command.type == "quit":
            console.print("\n[bold yellow]Leaving the quiz early.[/]")
            break
        record = session.submit_answer(command.answer or "")
        if record is None:
            continue
        logger.info(
            "answer recorded",
            extra={
                "event": "quiz_answer",
                "question_index": record.question_index,
                "is_correct": record.is_correct,
            },
        )
        _render_feedback(console, record.is_correct, record.correct_answer)

    summary = summarize_session(session.state)
    if session.is_over:
        exit_action = "completed"
        logger.info(
            "quiz completed",
            extra={
                "event": "quiz_complete",
                "score": summary.correct_answers,
                "total": summary.total_questions,
            },
        )
        _render_summary(console, session.state, summary)
    else:
        logger.info(
            "quiz abandoned",
            extra={
                "event": "quiz_quit",
                "answered": summary.answered_questions,
            },
        )
    return QuizRunResult(session.state, summary, exit_action)


def _render_question(
    console: Console, state: SessionState, decoded: DecodeResult
) -> None:
    question = state.current_question
    header = Text.assemble(
        (f"Question {state.current_index + 1}", "bold cyan"),
        (f" / {state.total_questions}", "dim"),
        ("  Score: ", "dim"),
        (str(state.score), "bold"),
    )
    console.print()
    console.rule(header)
    if question is not None and question.quiz_name:
        console.print(Text(question.quiz_name, style="dim"))

    if isinstance(decoded, DecodeFailure):
        console.print(
            Panel(
                Text(decoded.reason),
                title=INVALID_FORMAT_LABEL,
                border_style="yellow",
            )
        )
        console.print(
            Text("Type an answer to continue, or quit.", style="dim")
        )
        return

    console.print(Text(decoded.question_text, style="bold"))
    if not decoded.is_multiple_choice:
        console.print(
            Text("Type your answer, or quit.", style="dim")
        )
        return

    table = Table(show_header=False, box=box.SIMPLE, expand=True)
    table.add_column("Key", justify="center", style="cyan")
    table.add_column("Option")
    for number, option in enumerate(decoded.options, start=1):
        table.add_row(str(number), Text(option))
    console.print(table)
    console.print(
        Text(
            f"Choose 1-{len(decoded.options)}, type an answer, or quit.",
            style="dim",
        )
    )


def _render_feedback(
    console: Console, is_correct: bool, correct_answer: str
) -> None:
    if is_correct:
        console.print(Text("Correct.", style="bold green"))
        return
    message = Text("Incorrect. ", style="bold red")
    message.append(Text(f"Answer: {correct_answer}", style="red"))
    console.print(message)


def _render_summary(
    console: Console, state: SessionState, summary: QuizSummary
) -> None:
    console.print()
    console.rule(Text("Quiz Completed!", style="bold magenta"))
    console.print(
        Text.assemble(
            "Your final score is: ",
            (str(summary.correct_answers), "bold green"),
            " out of ",
            (str(summary.total_questions), "bold green"),
            f" ({summary.percentage}%)",
        )
    )

    table = Table(title="Review", box=box.SIMPLE, expand=True)
    table.add_column("#", justify="right")
    table.add_column("Question", overflow="fold")
    table.add_column("Your answer")
    table.add_column("Correct answer")
    table.add_column("Result", justify="center")
    for item in review_items(state):
        table.add_row(
            str(item.question_index + 1),
            Text(item.question_text, style="" if item.is_valid else "yellow"),
            Text(item.user_answer or "—"),
            Text(item.correct_answer or "—"),
            "✅" if item.is_correct else "❌",
        )
    console.print(table)
