"""create users and questions tables

Revision ID: 001
Revises:
Create Date: 2025-05-01 00:00:00.000000

Options are stored inline as JSONB; they are always read and written together
with their question.
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

QUESTION_CHECKS = (
    ("ck_questions_distinct_participants", "created_by <> intended_for"),
    ("ck_questions_text_min_length", "length(trim(question_text)) >= 5"),
    ("ck_questions_answer_consistent", "(answered_correctly IS NULL) = (submitted_answer IS NULL)"),
)


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("username", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.UniqueConstraint("username", name="uq_users_username"),
    )

    op.create_table(
        "questions",
        sa.Column("id", sa.Uuid(), primary_key=True, server_default=sa.text("gen_random_uuid()")),
        sa.Column("question_text", sa.Text(), nullable=False),
        sa.Column("options", postgresql.JSONB(), nullable=False),
        sa.Column("created_by", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("intended_for", sa.Uuid(), sa.ForeignKey("users.id"), nullable=False),
        # NULL until answered; set exactly once together with submitted_answer
        sa.Column("answered_correctly", sa.Boolean(), nullable=True),
        sa.Column("submitted_answer", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        *(sa.CheckConstraint(condition, name=name) for name, condition in QUESTION_CHECKS),
    )

    # Unanswered listing filters by recipient and orders newest first
    op.execute("""
        CREATE INDEX ix_questions_recipient_created
        ON questions (intended_for, created_at DESC, id DESC)
    """)
    # Score aggregation filters by (creator, recipient)
    op.create_index("ix_questions_creator_recipient", "questions", ["created_by", "intended_for"])


def downgrade() -> None:
    op.drop_index("ix_questions_creator_recipient", table_name="questions")
    op.execute("DROP INDEX IF EXISTS ix_questions_recipient_created")
    op.drop_table("questions")
    op.drop_table("users")
