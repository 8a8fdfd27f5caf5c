from __future__ import annotations

from typing import Any

from couple_quiz.application.get_partner.use_case import resolve_partner
from couple_quiz.domain.errors import NotFoundError
from couple_quiz.domain.models.score import KnowledgeScore
from couple_quiz.domain.ports.question_repository import QuestionRepository
from couple_quiz.domain.ports.user_repository import UserRepository
from couple_quiz.domain.validation import parse_identifier
from couple_quiz.infrastructure.timing import log_execution

from .models import GetScoreResponse


def _extract_context(_self, user_id: Any) -> dict:
    return {"user_id": str(user_id)}


class GetScoreUseCase:
    """How well ``user_id`` knows their partner.

    Only questions the partner created for this user count, so the two
    partners' scores come from disjoint question sets.
    """

    def __init__(self, users: UserRepository, questions: QuestionRepository) -> None:
        self._users = users
        self._questions = questions

    @log_execution("use_case.get_score", _extract_context)
    async def execute(self, user_id: Any) -> GetScoreResponse:
        uid = parse_identifier(user_id, "Invalid user ID format.")
        user = await self._users.get_by_id(uid)
        if user is None:
            raise NotFoundError("Current user not found.")
        partner = await resolve_partner(self._users, user.id)

        total, correct = await self._questions.count_answered(
            created_by=partner.id, intended_for=user.id
        )
        score = KnowledgeScore(total_answered=total, total_correct=correct, about_whom=partner.username)
        return GetScoreResponse(
            score_percentage=score.score_percentage,
            total_answered=score.total_answered,
            total_correct=score.total_correct,
            about_whom=score.about_whom,
        )
