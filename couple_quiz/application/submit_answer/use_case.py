from __future__ import annotations

from typing import Any

import structlog

from couple_quiz.domain.errors import ConflictError, DataCorruptionError, ForbiddenError, NotFoundError
from couple_quiz.domain.ports.question_repository import QuestionRepository
from couple_quiz.domain.validation import parse_answer_text, parse_identifier
from couple_quiz.infrastructure.timing import log_execution

from .models import SubmitAnswerRequest, SubmitAnswerResponse

log = structlog.stdlib.get_logger()


def _extract_context(_self, question_id: Any, request: SubmitAnswerRequest) -> dict:
    return {"question_id": str(question_id), "user_id": str(request.user_id)}


class SubmitAnswerUseCase:
    def __init__(self, questions: QuestionRepository) -> None:
        self._questions = questions

    @log_execution("use_case.submit_answer", _extract_context)
    async def execute(self, question_id: Any, request: SubmitAnswerRequest) -> SubmitAnswerResponse:
        qid = parse_identifier(question_id, "Invalid question ID format.")
        uid = parse_identifier(request.user_id, "Invalid user ID format.")
        text = parse_answer_text(request.submitted_answer_text)

        question = await self._questions.get_by_id(qid)
        if question is None:
            raise NotFoundError("Question not found.")
        if question.intended_for != uid:
            raise ForbiddenError("User not authorized to answer this question.")

        try:
            answer = question.grade(text)
        except DataCorruptionError:
            log.error("question.data_corrupted", question_id=str(qid))
            raise
        correct_text = question.correct_option().text

        # Conditional write: a concurrent submission may have won the race.
        if not await self._questions.record_answer(qid, answer):
            log.warning("question.answer.conflict", question_id=str(qid))
            raise ConflictError("This question has already been answered.")

        return SubmitAnswerResponse(
            message="Answer submitted successfully.",
            is_correct=answer.is_correct,
            correct_answer_text=correct_text,
        )
