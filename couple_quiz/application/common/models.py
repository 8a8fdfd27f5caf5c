"""Response models shared by the user and question use cases.

JSON field names are camelCase to match the web client; Python code uses the
snake_case attribute names.
"""
from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from couple_quiz.domain.models.question import Question
from couple_quiz.domain.models.user import User


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserItem(CamelModel):
    id: uuid.UUID
    username: str

    @classmethod
    def from_domain(cls, user: User) -> UserItem:
        return cls(id=user.id, username=user.username)


class OptionItem(CamelModel):
    text: str
    is_correct: bool


class QuestionItem(CamelModel):
    id: uuid.UUID
    question_text: str
    options: list[OptionItem]
    created_by: UserItem
    intended_for: UserItem
    answered_correctly: bool | None
    submitted_answer: str | None
    created_at: str
    updated_at: str

    @classmethod
    def from_domain(cls, question: Question, created_by: User, intended_for: User) -> QuestionItem:
        return cls(
            id=question.id,
            question_text=question.question_text,
            options=[OptionItem(text=o.text, is_correct=o.is_correct) for o in question.options],
            created_by=UserItem.from_domain(created_by),
            intended_for=UserItem.from_domain(intended_for),
            answered_correctly=question.answered_correctly,
            submitted_answer=question.submitted_answer,
            created_at=question.created_at.isoformat(),
            updated_at=question.updated_at.isoformat(),
        )
