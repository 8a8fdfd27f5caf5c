from __future__ import annotations

from typing import Any

from couple_quiz.application.common.models import CamelModel


class SubmitAnswerRequest(CamelModel):
    user_id: Any = None
    submitted_answer_text: Any = None


class SubmitAnswerResponse(CamelModel):
    message: str
    is_correct: bool
    correct_answer_text: str
