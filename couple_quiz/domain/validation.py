"""Parsing of untrusted input into domain values.

Request payloads arrive loosely typed. These helpers turn them into
well-formed identifiers and option lists, or raise ``InvalidArgumentError``
with a stable message. Downstream code never re-checks shape.
"""
from __future__ import annotations

import uuid
from typing import Any

from couple_quiz.domain.errors import InvalidArgumentError
from couple_quiz.domain.models.question import (
    MAX_OPTIONS,
    MIN_OPTIONS,
    AnswerOption,
    check_option_set,
    check_question_text,
)


def is_missing(value: Any) -> bool:
    return value is None or value == ""


def parse_identifier(value: Any, message: str) -> uuid.UUID:
    """Parse a canonical UUID string, raising ``InvalidArgumentError(message)`` otherwise.

    Only the hyphenated 36-character form is accepted (either case); braces,
    ``urn:uuid:`` prefixes and bare hex are rejected.
    """
    if isinstance(value, uuid.UUID):
        return value
    if not isinstance(value, str):
        raise InvalidArgumentError(message)
    try:
        parsed = uuid.UUID(value)
    except ValueError:
        raise InvalidArgumentError(message) from None
    if str(parsed) != value.lower():
        raise InvalidArgumentError(message)
    return parsed


def parse_options(raw: Any) -> tuple[AnswerOption, ...]:
    if not isinstance(raw, (list, tuple)) or not MIN_OPTIONS <= len(raw) <= MAX_OPTIONS:
        raise InvalidArgumentError(
            f"Options must be an array with {MIN_OPTIONS} to {MAX_OPTIONS} items."
        )

    options = []
    for item in raw:
        text = item.get("text") if isinstance(item, dict) else None
        is_correct = item.get("isCorrect", item.get("is_correct")) if isinstance(item, dict) else None
        if not isinstance(text, str) or not text.strip() or not isinstance(is_correct, bool):
            raise InvalidArgumentError(
                "Each option must have a non-empty text string and an isCorrect boolean."
            )
        options.append(AnswerOption(text=text.strip(), is_correct=is_correct))

    check_option_set(options)
    return tuple(options)


def parse_question_text(raw: Any) -> str:
    if not isinstance(raw, str):
        raise InvalidArgumentError("Question text must be a string.")
    check_question_text(raw)
    return raw.strip()


def parse_answer_text(raw: Any) -> str:
    """Validate a submitted answer. The text itself is returned untouched."""
    if not isinstance(raw, str) or not raw.strip():
        raise InvalidArgumentError("Submitted answer text cannot be empty.")
    return raw
