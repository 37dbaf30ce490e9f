"""Read exported quiz rows and turn them into question records."""

from __future__ import annotations

import json
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .session import QuestionRecord

__all__ = [
    "QuizFileError",
    "PackSummary",
    "read_records",
    "list_packs",
    "load_questions",
    "select_questions",
]


class QuizFileError(RuntimeError):
    """Raised when a question export cannot be read or has the wrong shape."""


@dataclass(frozen=True)
class PackSummary:
    pack_id: str
    quiz_name: str
    question_count: int


def read_records(path: Path) -> List[Dict[str, Any]]:
    """Load question rows from a ``.jsonl`` or ``.json`` export.

    JSON files may hold a bare array of rows or an object with a
    ``questions`` array. Every row must be an object.
    """

    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise QuizFileError(f"Question file not found: {p}") from exc
    except UnicodeDecodeError as exc:
        raise QuizFileError(f"{p}: not UTF-8 text ({exc.reason})") from exc
    except OSError as exc:
        raise QuizFileError(
            f"Cannot read question file {p}: {exc.strerror or exc}"
        ) from exc

    if p.suffix.lower() == ".jsonl":
        rows = _parse_jsonl(text, p)
    else:
        rows = _parse_json(text, p)

    for position, row in enumerate(rows, start=1):
        if not isinstance(row, dict):
            raise QuizFileError(
                f"{p}: entry {position} is {type(row).__name__}, expected "
                "an object"
            )
    return rows


def _parse_jsonl(text: str, path: Path) -> List[Any]:
    rows: List[Any] = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            rows.append(json.loads(line))
        except json.JSONDecodeError as exc:
            raise QuizFileError(
                f"{path}:{lineno}: invalid JSON ({exc.msg})"
            ) from exc
    return rows


def _parse_json(text: str, path: Path) -> List[Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise QuizFileError(f"{path}: invalid JSON ({exc.msg})") from exc
    if isinstance(data, dict):
        data = data.get("questions")
    if not isinstance(data, list):
        raise QuizFileError(
            f"{path}: expected a list of questions or a 'questions' array"
        )
    return data


def list_packs(rows: Sequence[Dict[str, Any]]) -> List[PackSummary]:
    """Unique quizzes, newest first.

    When several packs share a quiz name the most recently created one is
    listed, mirroring how the web app de-duplicates names.
    """

    ordered = sorted(
        rows, key=lambda r: str(r.get("created_at") or ""), reverse=True
    )
    counts: Dict[str, int] = {}
    for row in rows:
        pack_id = str(row.get("pack_id") or "")
        if pack_id:
            counts[pack_id] = counts.get(pack_id, 0) + 1

    seen: Dict[str, str] = {}
    for row in ordered:
        name = str(row.get("quiz_name") or "")
        pack_id = str(row.get("pack_id") or "")
        if name and pack_id and name not in seen:
            seen[name] = pack_id
    return [
        PackSummary(
            pack_id=pack_id,
            quiz_name=name,
            question_count=counts[pack_id],
        )
        for name, pack_id in seen.items()
    ]


def load_questions(
    rows: Sequence[Dict[str, Any]], pack_id: Optional[str] = None
) -> List[QuestionRecord]:
    """Question records for ``pack_id`` (or every row when omitted)."""

    if pack_id is None:
        selected = list(rows)
    else:
        selected = [r for r in rows if str(r.get("pack_id") or "") == pack_id]
        if not selected:
            raise QuizFileError(f"Quiz pack not found: {pack_id}")
    return [QuestionRecord.from_dict(row) for row in selected]


def select_questions(
    records: Sequence[QuestionRecord],
    *,
    num: int = 0,
    shuffle: bool = False,
    seed: Optional[int] = None,
) -> List[QuestionRecord]:
    """Optionally shuffle, then keep the first ``num`` records (0 = all)."""

    if num < 0:
        raise ValueError("num must be >= 0")
    out = list(records)
    if shuffle:
        random.Random(seed).shuffle(out)
    if num > 0:
        out = out[:num]
    return out
