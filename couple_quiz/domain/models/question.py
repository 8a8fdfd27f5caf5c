from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Sequence, Union

from couple_quiz.domain.errors import ConflictError, DataCorruptionError, InvalidArgumentError

MIN_QUESTION_TEXT_LENGTH = 5
MIN_OPTIONS = 2
MAX_OPTIONS = 4


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class AnswerOption:
    text: str
    is_correct: bool


@dataclass(frozen=True)
class Unanswered:
    pass


@dataclass(frozen=True)
class Answered:
    is_correct: bool
    submitted_text: str


AnswerState = Union[Unanswered, Answered]

UNANSWERED = Unanswered()


def check_question_text(question_text: str) -> None:
    if len(question_text.strip()) < MIN_QUESTION_TEXT_LENGTH:
        raise InvalidArgumentError(
            f"Question text must be at least {MIN_QUESTION_TEXT_LENGTH} characters long."
        )


def check_option_set(options: Sequence[AnswerOption]) -> None:
    if not MIN_OPTIONS <= len(options) <= MAX_OPTIONS:
        raise InvalidArgumentError(
            f"Options must be an array with {MIN_OPTIONS} to {MAX_OPTIONS} items."
        )
    if sum(1 for opt in options if opt.is_correct) != 1:
        raise InvalidArgumentError("Exactly one option must be marked as correct.")


def check_participants(created_by: uuid.UUID, intended_for: uuid.UUID) -> None:
    if created_by == intended_for:
        raise InvalidArgumentError(
            "Creator and intended recipient cannot be the same user."
        )


@dataclass
class Question:
    question_text: str
    options: tuple[AnswerOption, ...]
    created_by: uuid.UUID
    intended_for: uuid.UUID
    answer: AnswerState = UNANSWERED
    id: uuid.UUID = field(default_factory=uuid.uuid4)
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)

    @property
    def is_answered(self) -> bool:
        return isinstance(self.answer, Answered)

    @property
    def answered_correctly(self) -> bool | None:
        """Tri-state view: None while unanswered."""
        if isinstance(self.answer, Answered):
            return self.answer.is_correct
        return None

    @property
    def submitted_answer(self) -> str | None:
        if isinstance(self.answer, Answered):
            return self.answer.submitted_text
        return None

    def check_invariants(self) -> None:
        check_question_text(self.question_text)
        check_option_set(self.options)
        check_participants(self.created_by, self.intended_for)

    def correct_option(self) -> AnswerOption:
        for option in self.options:
            if option.is_correct:
                return option
        raise DataCorruptionError("Internal server error: Question data is corrupted.")

    def grade(self, submitted_text: str) -> Answered:
        """Return the terminal answer state for ``submitted_text``.

        Matching is exact: no trimming, no case folding.
        """
        if self.is_answered:
            raise ConflictError("This question has already been answered.")
        correct = self.correct_option()
        return Answered(
            is_correct=correct.text == submitted_text,
            submitted_text=submitted_text,
        )
