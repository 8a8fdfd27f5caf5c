from __future__ import annotations

import uuid
from datetime import datetime, timezone

import structlog
from sqlalchemy import case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from couple_quiz.domain.models.question import (
    UNANSWERED,
    Answered,
    AnswerOption,
    Question,
)
from couple_quiz.domain.ports.question_repository import QuestionRepository
from couple_quiz.infrastructure.db.orm import QuestionRow
from couple_quiz.infrastructure.timing import timed_operation

log = structlog.stdlib.get_logger()


class PostgresQuestionRepository(QuestionRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def save(self, question: Question) -> Question:
        # Same rules as the create_question use case; the table CHECK
        # constraints back them up.
        question.check_invariants()
        with timed_operation("db.question.save", question_id=str(question.id)):
            self._session.add(
                QuestionRow(
                    id=question.id,
                    question_text=question.question_text,
                    options=[
                        {"text": opt.text, "isCorrect": opt.is_correct}
                        for opt in question.options
                    ],
                    created_by=question.created_by,
                    intended_for=question.intended_for,
                    answered_correctly=question.answered_correctly,
                    submitted_answer=question.submitted_answer,
                    created_at=question.created_at,
                    updated_at=question.updated_at,
                )
            )
            await self._session.flush()
        return question

    async def get_by_id(self, question_id: uuid.UUID) -> Question | None:
        with timed_operation("db.question.get_by_id", question_id=str(question_id)):
            row = await self._session.get(QuestionRow, question_id, populate_existing=True)
        return self._to_domain(row) if row is not None else None

    async def find_unanswered_for(self, user_id: uuid.UUID) -> list[Question]:
        with timed_operation("db.question.find_unanswered_for", user_id=str(user_id)) as timing:
            stmt = (
                select(QuestionRow)
                .where(
                    QuestionRow.intended_for == user_id,
                    QuestionRow.answered_correctly.is_(None),
                )
                .order_by(QuestionRow.created_at.desc(), QuestionRow.id.desc())
            )
            rows = (await self._session.execute(stmt)).scalars().all()
            results = [self._to_domain(r) for r in rows]

        log.debug(
            "db.question.find_unanswered_for.results",
            user_id=str(user_id),
            returned=len(results),
            elapsed_ms=timing.get("elapsed_ms"),
        )
        return results

    async def record_answer(self, question_id: uuid.UUID, answer: Answered) -> bool:
        with timed_operation("db.question.record_answer", question_id=str(question_id)):
            stmt = (
                update(QuestionRow)
                .where(
                    QuestionRow.id == question_id,
                    QuestionRow.answered_correctly.is_(None),
                )
                .values(
                    answered_correctly=answer.is_correct,
                    submitted_answer=answer.submitted_text,
                    updated_at=datetime.now(timezone.utc),
                )
                .execution_options(synchronize_session=False)
            )
            result = await self._session.execute(stmt)
            await self._session.flush()
        log.debug("db.question.record_answer.result", rows_updated=result.rowcount)
        return result.rowcount == 1

    async def count_answered(
        self, created_by: uuid.UUID, intended_for: uuid.UUID
    ) -> tuple[int, int]:
        with timed_operation(
            "db.question.count_answered",
            created_by=str(created_by),
            intended_for=str(intended_for),
        ):
            stmt = select(
                func.count(),
                func.coalesce(
                    func.sum(case((QuestionRow.answered_correctly.is_(True), 1), else_=0)), 0
                ),
            ).where(
                QuestionRow.created_by == created_by,
                QuestionRow.intended_for == intended_for,
                QuestionRow.answered_correctly.is_not(None),
            )
            total, correct = (await self._session.execute(stmt)).one()
        return int(total), int(correct)

    @staticmethod
    def _to_domain(row: QuestionRow) -> Question:
        if row.answered_correctly is None:
            answer = UNANSWERED
        else:
            answer = Answered(
                is_correct=row.answered_correctly,
                submitted_text=row.submitted_answer or "",
            )
        return Question(
            id=row.id,
            question_text=row.question_text,
            options=tuple(
                AnswerOption(text=opt["text"], is_correct=bool(opt["isCorrect"]))
                for opt in row.options
            ),
            created_by=row.created_by,
            intended_for=row.intended_for,
            answer=answer,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
