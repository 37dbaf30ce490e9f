import argparse
import sys
from pathlib import Path
from typing import Callable, Optional, Sequence

from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ..core import configure_logger, ensure_workspace
from ..core.config import TomlConfigError
from ..core.workspace import WorkspaceError
from .codec import DecodeFailure, decode
from .config import find_config_path, load_quiz_config
from .loader import (
    QuizFileError,
    list_packs,
    load_questions,
    read_records,
    select_questions,
)
from .runner import run_quiz

LOGGER_NAME = "learning_hub.quiz"


def _error(message: str) -> int:
    sys.stderr.write(f"Error: {message}\n")
    return 2


def _load_pack(args: argparse.Namespace):
    rows = read_records(Path(args.file).expanduser())
    return load_questions(rows, getattr(args, "pack", None))


def _cmd_start(
    args: argparse.Namespace,
    *,
    console: Optional[Console] = None,
    input_provider: Optional[Callable[[], str]] = None,
) -> int:
    """Run an interactive attempt over a question export.

    Exit codes: 0 when every question was answered, 1 when the attempt was
    abandoned or the pack is empty, 2 on configuration or file errors.
    """
    try:
        config = load_quiz_config(find_config_path(args.config))
        layout = ensure_workspace()
        questions = _load_pack(args)
    except (TomlConfigError, WorkspaceError, QuizFileError) as exc:
        return _error(str(exc))

    quiz_cfg = config["quiz"]
    log_cfg = config["logging"]
    logger, _ = configure_logger(
        LOGGER_NAME,
        log_dir=layout.path_for("logs"),
        level=log_cfg["level"],
        verbose=bool(args.verbose or log_cfg["verbose"]),
        filename="quiz.log",
    )

    num = quiz_cfg["num"] if args.num is None else args.num
    try:
        questions = select_questions(
            questions,
            num=num,
            shuffle=bool(args.shuffle or quiz_cfg["shuffle"]),
            seed=args.seed,
        )
    except ValueError as exc:
        return _error(str(exc))
    logger.debug(
        "loaded question pack",
        extra={
            "file": str(args.file),
            "pack": args.pack,
            "count": len(questions),
        },
    )

    console = console or Console()
    if input_provider is None:
        def input_provider() -> str:
            return console.input("[bold]> [/]")

    result = run_quiz(questions, console, input_provider)
    return 0 if result.exit_action == "completed" else 1


def _cmd_packs(
    args: argparse.Namespace, *, console: Optional[Console] = None
) -> int:
    try:
        rows = read_records(Path(args.file).expanduser())
    except QuizFileError as exc:
        return _error(str(exc))
    packs = list_packs(rows)
    console = console or Console()
    if not packs:
        console.print("No quiz packs found.")
        return 1
    table = Table(box=box.SIMPLE)
    table.add_column("Pack")
    table.add_column("Quiz")
    table.add_column("Questions", justify="right")
    for pack in packs:
        table.add_row(
            Text(pack.pack_id), Text(pack.quiz_name), str(pack.question_count)
        )
    console.print(table)
    return 0


def _cmd_check(
    args: argparse.Namespace, *, console: Optional[Console] = None
) -> int:
    try:
        questions = _load_pack(args)
    except QuizFileError as exc:
        return _error(str(exc))
    console = console or Console()
    failures = []
    for index, question in enumerate(questions):
        result = decode(question.prompt_raw)
        if isinstance(result, DecodeFailure):
            failures.append((index, result))
    if not failures:
        console.print(f"All {len(questions)} question(s) decoded.")
        return 0
    table = Table(box=box.SIMPLE, title="Malformed questions")
    table.add_column("#", justify="right")
    table.add_column("Segments", justify="right")
    table.add_column("Problem")
    table.add_column("Raw", overflow="fold")
    for index, failure in failures:
        table.add_row(
            str(index + 1),
            str(failure.segment_count),
            Text(failure.reason),
            Text(failure.raw[:80]),
        )
    console.print(table)
    console.print(
        f"{len(failures)} of {len(questions)} question(s) are malformed."
    )
    return 1


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="learninghub quiz",
        description="Take and inspect exported LearningHub quizzes",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )
    sub = p.add_subparsers(dest="command", required=True)

    sp_start = sub.add_parser("start", help="Take a quiz in the terminal")
    sp_start.add_argument("file", help="Question export (.json or .jsonl)")
    sp_start.add_argument("--pack", help="Only use questions from this pack")
    sp_start.add_argument(
        "--num",
        type=int,
        help="Limit the attempt to N questions (overrides config)",
    )
    sp_start.add_argument("--shuffle", action="store_true")
    sp_start.add_argument("--seed", type=int, help="Seed for --shuffle")
    sp_start.add_argument("--config", help="Path to learninghub.toml")
    sp_start.add_argument(
        "--verbose",
        action="store_true",
        help="Mirror log records to stderr",
    )

    sp_packs = sub.add_parser("packs", help="List quiz packs in an export")
    sp_packs.add_argument("file")

    sp_check = sub.add_parser(
        "check", help="Report questions that fail to decode"
    )
    sp_check.add_argument("file")
    sp_check.add_argument("--pack")
    return p


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    if args.command == "start":
        code = _cmd_start(args)
    elif args.command == "packs":
        code = _cmd_packs(args)
    elif args.command == "check":
        code = _cmd_check(args)
    else:  # pragma: no cover - argparse enforces the choices
        parser.print_help()
        code = 2
    raise SystemExit(code)
