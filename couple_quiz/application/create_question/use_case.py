from __future__ import annotations

from couple_quiz.application.common.models import QuestionItem
from couple_quiz.domain.errors import InvalidArgumentError, NotFoundError
from couple_quiz.domain.models.question import Question, check_participants
from couple_quiz.domain.ports.question_repository import QuestionRepository
from couple_quiz.domain.ports.user_repository import UserRepository
from couple_quiz.domain.validation import (
    is_missing,
    parse_identifier,
    parse_options,
    parse_question_text,
)
from couple_quiz.infrastructure.timing import log_execution

from .models import CreateQuestionRequest


def _extract_context(_self, request: CreateQuestionRequest) -> dict:
    return {
        "created_by": str(request.created_by_user_id),
        "intended_for": str(request.intended_for_user_id),
    }


class CreateQuestionUseCase:
    def __init__(self, users: UserRepository, questions: QuestionRepository) -> None:
        self._users = users
        self._questions = questions

    @log_execution("use_case.create_question", _extract_context)
    async def execute(self, request: CreateQuestionRequest) -> QuestionItem:
        # Order: presence, id format, self-targeting, option shape, existence, text.
        if any(
            is_missing(value)
            for value in (
                request.question_text,
                request.options,
                request.created_by_user_id,
                request.intended_for_user_id,
            )
        ):
            raise InvalidArgumentError(
                "Missing required fields: questionText, options, createdByUserId, or intendedForUserId."
            )

        message = "Invalid createdByUserId or intendedForUserId format."
        created_by = parse_identifier(request.created_by_user_id, message)
        intended_for = parse_identifier(request.intended_for_user_id, message)
        check_participants(created_by, intended_for)

        options = parse_options(request.options)

        creator = await self._users.get_by_id(created_by)
        recipient = await self._users.get_by_id(intended_for)
        if creator is None or recipient is None:
            raise NotFoundError("Creator or intended recipient user not found.")

        # Text length is a storage rule, checked once the users are known.
        question_text = parse_question_text(request.question_text)

        saved = await self._questions.save(
            Question(
                question_text=question_text,
                options=options,
                created_by=creator.id,
                intended_for=recipient.id,
            )
        )
        return QuestionItem.from_domain(saved, created_by=creator, intended_for=recipient)
