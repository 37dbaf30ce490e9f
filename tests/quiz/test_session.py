from __future__ import annotations

import pytest

from learning_hub.quiz.session import (
    AnswerRecord,
    QuestionRecord,
    QuizSession,
    SessionState,
    answer_state,
    initial_state,
    start_state,
)

from fixtures import GEO_PROMPT, MATH_PROMPT, math_geo_records

THREE = [
    QuestionRecord("What is 2 + 2?", "A) 4", "Math Quiz"),
    QuestionRecord("What is the capital of France?", "B) Paris", "Geography"),
    QuestionRecord("Who wrote Romeo and Juliet?", "C) Shakespeare", "Lit"),
]

EMPTY = SessionState()


def started(questions=THREE) -> QuizSession:
    session = QuizSession()
    session.start(questions)
    return session


def test_new_session_is_empty() -> None:
    session = QuizSession()

    assert session.state == EMPTY
    assert session.questions == ()
    assert session.current_index == 0
    assert session.score == 0
    assert session.is_over is False
    assert session.answer_log == ()
    assert session.current_question is None
    assert not session.has_questions


def test_start_loads_questions() -> None:
    session = started()

    assert session.questions == tuple(THREE)
    assert session.current_question == THREE[0]
    assert (session.current_index, session.score, session.is_over) == (
        0,
        0,
        False,
    )


def test_start_copies_input_sequence() -> None:
    questions = list(THREE)
    session = started(questions)
    questions.clear()

    assert len(session.questions) == 3


def test_start_with_no_questions_never_raises() -> None:
    session = started([])

    assert session.state == EMPTY
    assert session.current_question is None


def test_correct_answer_scores_and_advances() -> None:
    session = started()

    record = session.submit_answer("A) 4")

    assert record == AnswerRecord(0, "A) 4", "A) 4", True)
    assert session.score == 1
    assert session.current_index == 1
    assert session.is_over is False
    assert session.answer_log == (record,)


def test_incorrect_answer_advances_without_scoring() -> None:
    session = started()

    session.submit_answer("B) 5")

    assert session.score == 0
    assert session.current_index == 1
    assert session.answer_log[0] == AnswerRecord(0, "B) 5", "A) 4", False)


@pytest.mark.parametrize("answer", ["A) 4", "a) 4"])
def test_comparison_ignores_case(answer: str) -> None:
    session = started()

    session.submit_answer(answer)

    assert session.answer_log[0].is_correct
    assert session.answer_log[0].user_answer == answer


def test_comparison_does_not_trim_whitespace() -> None:
    session = started()

    session.submit_answer("  A) 4  ")

    assert session.answer_log[0].is_correct is False
    assert session.answer_log[0].user_answer == "  A) 4  "
    assert session.score == 0


def test_empty_answer_is_recorded_as_incorrect() -> None:
    session = started()

    session.submit_answer("")

    assert session.answer_log[0].user_answer == ""
    assert session.answer_log[0].is_correct is False


def test_last_answer_ends_quiz_and_pins_index() -> None:
    session = started()
    for answer in ("A) 4", "Wrong", "C) Shakespeare"):
        session.submit_answer(answer)

    assert session.is_over
    assert session.current_index == 2
    assert session.score == 2
    assert [a.is_correct for a in session.answer_log] == [True, False, True]
    assert [a.question_index for a in session.answer_log] == [0, 1, 2]


def test_answers_after_quiz_over_are_ignored() -> None:
    session = started()
    for answer in ("A) 4", "B) Paris", "C) Shakespeare"):
        session.submit_answer(answer)
    finished = session.state

    assert session.submit_answer("A) 4") is None
    assert session.submit_answer("anything") is None

    assert session.state == finished
    assert session.score == 3
    assert len(session.answer_log) == 3
    assert session.current_index == 2


def test_answer_without_questions_is_a_noop() -> None:
    session = QuizSession()

    assert session.submit_answer("A") is None
    assert session.state == EMPTY

    session.start([])
    assert session.submit_answer("A") is None
    assert session.state == EMPTY


def test_single_question_quiz() -> None:
    session = started([THREE[0]])

    session.submit_answer("A) 4")

    assert session.is_over
    assert session.current_index == 0
    assert session.score == 1
    assert len(session.answer_log) == 1


def test_score_and_log_bounds_hold_under_extra_submissions() -> None:
    session = started()
    for step in range(10):
        session.submit_answer(THREE[min(step, 2)].correct_answer)
        assert 0 <= session.score <= len(session.questions)
        assert len(session.answer_log) == min(step + 1, 3)


def test_restart_discards_previous_attempt() -> None:
    session = started()
    session.submit_answer("A) 4")
    session.submit_answer("B) Paris")

    second = math_geo_records()
    session.start(second)

    fresh = QuizSession()
    fresh.start(second)
    assert session.state == fresh.state
    assert session.score == 0
    assert session.answer_log == ()


def test_restart_after_quiz_over() -> None:
    session = started([THREE[0]])
    session.submit_answer("A) 4")

    session.start(THREE)

    assert not session.is_over
    assert session.current_index == 0


def test_reset_returns_to_empty_from_any_state() -> None:
    session = QuizSession()
    session.reset()
    assert session.state == EMPTY

    session.start(THREE)
    session.submit_answer("A) 4")
    session.reset()
    assert session.state == EMPTY

    session.start(THREE)
    for answer in ("A) 4", "B) Paris", "C) Shakespeare"):
        session.submit_answer(answer)
    session.reset()
    session.reset()
    assert session.state == EMPTY
    assert session.state.to_dict() == {
        "questions": [],
        "current_index": 0,
        "score": 0,
        "is_over": False,
        "answer_log": [],
    }


def test_identical_call_sequences_produce_equal_states() -> None:
    def play() -> SessionState:
        session = started()
        session.submit_answer("a) 4")
        session.submit_answer("nope")
        return session.state

    assert play() == play()
    assert play().to_dict() == play().to_dict()


def test_end_to_end_two_question_scenario() -> None:
    session = started(math_geo_records())

    session.submit_answer("B) 4")
    assert (session.score, session.current_index, session.is_over) == (
        1,
        1,
        False,
    )

    session.submit_answer("Wrong")
    assert (session.score, session.current_index, session.is_over) == (
        1,
        1,
        True,
    )
    assert len(session.answer_log) == 2
    assert session.answer_log[1] == AnswerRecord(1, "Wrong", "B) Paris", False)
    assert session.questions[0].prompt_raw == MATH_PROMPT
    assert session.questions[1].prompt_raw == GEO_PROMPT


def test_pure_transitions_do_not_mutate_inputs() -> None:
    before = start_state(THREE)

    after, record = answer_state(before, "A) 4")

    assert before.answer_log == ()
    assert before.score == 0
    assert after is not before
    assert after.answer_log == (record,)
    assert initial_state() == EMPTY


def test_independent_sessions_do_not_share_state() -> None:
    first = started()
    second = started()

    first.submit_answer("A) 4")

    assert second.answer_log == ()
    assert second.current_index == 0


def test_question_record_from_storage_row() -> None:
    record = QuestionRecord.from_dict(
        {"question": MATH_PROMPT, "answer": "B) 4", "quiz_name": "Math"}
    )

    assert record == QuestionRecord(MATH_PROMPT, "B) 4", "Math")
    assert QuestionRecord.from_dict(record.to_dict()) == record


def test_question_record_from_sparse_row() -> None:
    record = QuestionRecord.from_dict({"prompt_raw": "Q|||||True"})

    assert record == QuestionRecord("Q|||||True", "", "")
