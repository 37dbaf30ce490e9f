from ._main import build_arg_parser
from .codec import (
    DELIMITER,
    INVALID_FORMAT_LABEL,
    DecodedQuestion,
    DecodeFailure,
    decode,
    is_failure,
)
from .loader import (
    PackSummary,
    QuizFileError,
    list_packs,
    load_questions,
    read_records,
    select_questions,
)
from .session import (
    AnswerRecord,
    QuestionRecord,
    QuizSession,
    SessionState,
    answer_state,
    initial_state,
    start_state,
)
from .summary import QuizSummary, ReviewItem, review_items, summarize_session
from .runner import QuizRunResult, parse_answer_input, run_quiz

__all__ = [
    "build_arg_parser",
    "DELIMITER",
    "INVALID_FORMAT_LABEL",
    "DecodedQuestion",
    "DecodeFailure",
    "decode",
    "is_failure",
    "PackSummary",
    "QuizFileError",
    "list_packs",
    "load_questions",
    "read_records",
    "select_questions",
    "AnswerRecord",
    "QuestionRecord",
    "QuizSession",
    "SessionState",
    "answer_state",
    "initial_state",
    "start_state",
    "QuizSummary",
    "ReviewItem",
    "review_items",
    "summarize_session",
    "QuizRunResult",
    "parse_answer_input",
    "run_quiz",
]
