from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, Boolean, CheckConstraint, DateTime, ForeignKey, Index, Text, Uuid
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class UserRow(Base):
    __tablename__ = "users"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    username: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class QuestionRow(Base):
    """ORM model for questions.

    Options are embedded as a JSON array of ``{"text", "isCorrect"}`` objects.
    ``answered_correctly`` is NULL while unanswered; it and
    ``submitted_answer`` are set together, exactly once.

    Indexes:
    - ix_questions_recipient_created: (intended_for, created_at DESC, id DESC)
      For the unanswered listing, newest first
    - ix_questions_creator_recipient: (created_by, intended_for)
      For score aggregation
    """

    __tablename__ = "questions"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    question_text: Mapped[str] = mapped_column(Text, nullable=False)
    options: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), nullable=False
    )
    created_by: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False
    )
    intended_for: Mapped[uuid.UUID] = mapped_column(
        Uuid, ForeignKey("users.id"), nullable=False
    )
    answered_correctly: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    submitted_answer: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        CheckConstraint("created_by <> intended_for", name="ck_questions_distinct_participants"),
        CheckConstraint("length(trim(question_text)) >= 5", name="ck_questions_text_min_length"),
        CheckConstraint(
            "(answered_correctly IS NULL) = (submitted_answer IS NULL)",
            name="ck_questions_answer_consistent",
        ),
        Index("ix_questions_recipient_created", "intended_for", created_at.desc(), id.desc()),
        Index("ix_questions_creator_recipient", "created_by", "intended_for"),
    )
