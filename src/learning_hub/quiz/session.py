"""Quiz attempt state and transitions.

A quiz attempt moves through three states::

    Empty --start--> InProgress --last answer--> Over
      ^                                            |
      +------------------- reset ------------------+

The transitions are pure functions over a frozen :class:`SessionState` so
that identical call sequences always yield equal states. :class:`QuizSession`
owns exactly one state per attempt and is what UI code talks to; there is no
shared or module-level session.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace
from typing import Any

__all__ = [
    "QuestionRecord",
    "AnswerRecord",
    "SessionState",
    "QuizSession",
    "initial_state",
    "start_state",
    "answer_state",
    "is_correct_answer",
]


@dataclass(frozen=True)
class QuestionRecord:
    """One stored quiz question as supplied by the storage layer."""

    prompt_raw: str
    correct_answer: str
    quiz_name: str = ""

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "QuestionRecord":
        """Build a record from either core or storage column names."""

        prompt = payload.get("prompt_raw", payload.get("question"))
        answer = payload.get("correct_answer", payload.get("answer"))
        name = payload.get("quiz_name")
        return cls(
            prompt_raw="" if prompt is None else str(prompt),
            correct_answer="" if answer is None else str(answer),
            quiz_name="" if name is None else str(name),
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "prompt_raw": self.prompt_raw,
            "correct_answer": self.correct_answer,
            "quiz_name": self.quiz_name,
        }


@dataclass(frozen=True)
class AnswerRecord:
    """Audit entry for a single submitted answer."""

    question_index: int
    user_answer: str
    correct_answer: str
    is_correct: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "question_index": self.question_index,
            "user_answer": self.user_answer,
            "correct_answer": self.correct_answer,
            "is_correct": self.is_correct,
        }


@dataclass(frozen=True)
class SessionState:
    """Immutable snapshot of a quiz attempt."""

    questions: tuple[QuestionRecord, ...] = ()
    current_index: int = 0
    score: int = 0
    is_over: bool = False
    answer_log: tuple[AnswerRecord, ...] = ()

    @property
    def total_questions(self) -> int:
        return len(self.questions)

    @property
    def has_questions(self) -> bool:
        return bool(self.questions)

    @property
    def accepts_answers(self) -> bool:
        return self.has_questions and not self.is_over

    @property
    def current_question(self) -> QuestionRecord | None:
        if not self.questions:
            return None
        return self.questions[self.current_index]

    def to_dict(self) -> dict[str, Any]:
        return {
            "questions": [q.to_dict() for q in self.questions],
            "current_index": self.current_index,
            "score": self.score,
            "is_over": self.is_over,
            "answer_log": [a.to_dict() for a in self.answer_log],
        }


def is_correct_answer(user_answer: str, correct_answer: str) -> bool:
    """Case-insensitive equality; surrounding whitespace still counts."""

    return user_answer.lower() == correct_answer.lower()


def initial_state() -> SessionState:
    return SessionState()


def start_state(questions: Iterable[QuestionRecord]) -> SessionState:
    """Fresh attempt over ``questions``; prior progress is not carried."""

    return SessionState(questions=tuple(questions))


def answer_state(
    state: SessionState, user_answer: str
) -> tuple[SessionState, AnswerRecord | None]:
    """Apply one answer to ``state``.

    Returns the next state and the recorded answer. When the attempt is over
    or has no questions the input state is returned unchanged together with
    ``None``.
    """

    if not state.accepts_answers:
        return state, None

    index = state.current_index
    expected = state.questions[index].correct_answer
    correct = is_correct_answer(user_answer, expected)
    record = AnswerRecord(
        question_index=index,
        user_answer=user_answer,
        correct_answer=expected,
        is_correct=correct,
    )
    last = index >= state.total_questions - 1
    next_state = replace(
        state,
        current_index=index if last else index + 1,
        score=state.score + 1 if correct else state.score,
        is_over=last,
        answer_log=state.answer_log + (record,),
    )
    return next_state, record


class QuizSession:
    """Owner of a single quiz attempt's state."""

    def __init__(self) -> None:
        self._state = initial_state()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def questions(self) -> tuple[QuestionRecord, ...]:
        return self._state.questions

    @property
    def current_index(self) -> int:
        return self._state.current_index

    @property
    def score(self) -> int:
        return self._state.score

    @property
    def is_over(self) -> bool:
        return self._state.is_over

    @property
    def answer_log(self) -> tuple[AnswerRecord, ...]:
        return self._state.answer_log

    @property
    def has_questions(self) -> bool:
        return self._state.has_questions

    @property
    def current_question(self) -> QuestionRecord | None:
        return self._state.current_question

    def start(self, questions: Iterable[QuestionRecord]) -> None:
        self._state = start_state(questions)

    def submit_answer(self, user_answer: str) -> AnswerRecord | None:
        """Record ``user_answer`` for the current question.

        Answers submitted after the last question, or before any questions
        were loaded, are ignored and return ``None``.
        """

        self._state, record = answer_state(self._state, user_answer)
        return record

    def reset(self) -> None:
        self._state = initial_state()
