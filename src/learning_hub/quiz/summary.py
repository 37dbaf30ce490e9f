"""Post-quiz summary and review trail derived from a session state."""

from __future__ import annotations

import math
from dataclasses import dataclass

from .codec import INVALID_FORMAT_LABEL, DecodeFailure, decode
from .session import SessionState

__all__ = [
    "QuizSummary",
    "ReviewItem",
    "score_percentage",
    "summarize_session",
    "review_items",
]


@dataclass(frozen=True)
class QuizSummary:
    """Headline numbers for the completion screen."""

    total_questions: int
    answered_questions: int
    correct_answers: int
    percentage: int

    @property
    def accuracy(self) -> float:
        if self.total_questions == 0:
            return 0.0
        return self.correct_answers / self.total_questions


@dataclass(frozen=True)
class ReviewItem:
    """One answered question, ready for a review screen."""

    question_index: int
    question_text: str
    options: tuple[str, ...]
    user_answer: str
    correct_answer: str
    is_correct: bool
    is_valid: bool = True


def score_percentage(score: int, total: int) -> int:
    """Percentage of ``total`` rounded half up; zero for an empty quiz."""

    if total <= 0:
        return 0
    # Divide before scaling so 29/200 rounds to 14, as the web quiz shows.
    return int(math.floor(score / total * 100 + 0.5))


def summarize_session(state: SessionState) -> QuizSummary:
    total = state.total_questions
    return QuizSummary(
        total_questions=total,
        answered_questions=len(state.answer_log),
        correct_answers=state.score,
        percentage=score_percentage(state.score, total),
    )


def review_items(state: SessionState) -> list[ReviewItem]:
    """Pair each logged answer with its decoded question, in answer order."""

    items: list[ReviewItem] = []
    for entry in state.answer_log:
        decoded = decode(state.questions[entry.question_index].prompt_raw)
        if isinstance(decoded, DecodeFailure):
            text, options, valid = INVALID_FORMAT_LABEL, (), False
        else:
            text, options, valid = decoded.question_text, decoded.options, True
        items.append(
            ReviewItem(
                question_index=entry.question_index,
                question_text=text,
                options=options,
                user_answer=entry.user_answer,
                correct_answer=entry.correct_answer,
                is_correct=entry.is_correct,
                is_valid=valid,
            )
        )
    return items
