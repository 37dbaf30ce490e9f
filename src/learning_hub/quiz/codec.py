"""Decoding of delimiter-encoded quiz question strings.

Generated questions arrive as one string with the prompt and its options
joined by ``DELIMITER``::

    "2+2?|||||A) 3|||||B) 4|||||C) 5|||||D) 6"

Decoding is pure. Malformed strings produce a :class:`DecodeFailure` value
instead of an exception so that rendering code can show a fallback and keep
going.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

__all__ = [
    "DELIMITER",
    "INVALID_FORMAT_LABEL",
    "OPTION_COUNT",
    "DecodedQuestion",
    "DecodeFailure",
    "DecodeResult",
    "decode",
    "is_failure",
]

DELIMITER = "|||||"
OPTION_COUNT = 4
INVALID_FORMAT_LABEL = "Invalid question format"

_MULTIPLE_CHOICE_SEGMENTS = OPTION_COUNT + 1
_PROMPT_ONLY_SEGMENTS = 2


@dataclass(frozen=True)
class DecodedQuestion:
    """Question prompt plus its ordered answer options."""

    question_text: str
    options: tuple[str, ...] = ()

    @property
    def is_multiple_choice(self) -> bool:
        return bool(self.options)


@dataclass(frozen=True)
class DecodeFailure:
    """A raw question string that does not follow the encoding."""

    raw: str
    segment_count: int
    reason: str


DecodeResult = Union[DecodedQuestion, DecodeFailure]


def decode(raw: str) -> DecodeResult:
    """Split ``raw`` into a prompt and options.

    - five or more segments: prompt plus the first four options; any
      trailing segments are ignored
    - exactly two segments: a prompt with no options (true/false or short
      answer items)
    - anything else is a :class:`DecodeFailure`
    """

    segments = str(raw).split(DELIMITER)
    count = len(segments)
    if count >= _MULTIPLE_CHOICE_SEGMENTS:
        return DecodedQuestion(
            question_text=segments[0],
            options=tuple(segments[1:_MULTIPLE_CHOICE_SEGMENTS]),
        )
    if count == _PROMPT_ONLY_SEGMENTS:
        return DecodedQuestion(question_text=segments[0])
    if count < _PROMPT_ONLY_SEGMENTS:
        reason = "missing delimiter; expected a prompt and an answer part"
    else:
        reason = (
            f"found {count - 1} option(s); multiple-choice questions need "
            f"{OPTION_COUNT}"
        )
    return DecodeFailure(raw=str(raw), segment_count=count, reason=reason)


def is_failure(result: DecodeResult) -> bool:
    return isinstance(result, DecodeFailure)
