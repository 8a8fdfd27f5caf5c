from __future__ import annotations

from typing import Any

from couple_quiz.application.common.models import QuestionItem
from couple_quiz.domain.errors import DataCorruptionError
from couple_quiz.domain.ports.question_repository import QuestionRepository
from couple_quiz.domain.ports.user_repository import UserRepository
from couple_quiz.domain.validation import parse_identifier
from couple_quiz.infrastructure.timing import log_execution


def _extract_context(_self, user_id: Any) -> dict:
    return {"user_id": str(user_id)}


class ListUnansweredUseCase:
    def __init__(self, users: UserRepository, questions: QuestionRepository) -> None:
        self._users = users
        self._questions = questions

    @log_execution("use_case.list_unanswered", _extract_context)
    async def execute(self, user_id: Any) -> list[QuestionItem]:
        uid = parse_identifier(user_id, "Invalid user ID format.")
        questions = await self._questions.find_unanswered_for(uid)
        if not questions:
            return []

        by_id = {u.id: u for u in await self._users.list_all()}
        items = []
        for q in questions:
            creator = by_id.get(q.created_by)
            recipient = by_id.get(q.intended_for)
            # Foreign keys rule this out; reaching it means storage is inconsistent
            if creator is None or recipient is None:
                raise DataCorruptionError(f"Question {q.id} references an unknown user.")
            items.append(QuestionItem.from_domain(q, created_by=creator, intended_for=recipient))
        return items
