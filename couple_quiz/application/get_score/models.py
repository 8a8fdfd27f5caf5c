from __future__ import annotations

from couple_quiz.application.common.models import CamelModel


class GetScoreResponse(CamelModel):
    score_percentage: int
    total_answered: int
    total_correct: int
    about_whom: str
