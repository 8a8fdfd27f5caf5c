from __future__ import annotations

from typing import Any

from couple_quiz.application.common.models import CamelModel


class CreateQuestionRequest(CamelModel):
    # Loosely typed on purpose: the use case validates in a fixed order and
    # reports a specific message for each failure.
    question_text: Any = None
    options: Any = None
    created_by_user_id: Any = None
    intended_for_user_id: Any = None
