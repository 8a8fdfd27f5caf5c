from __future__ import annotations

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from couple_quiz.application.common.models import QuestionItem, UserItem
from couple_quiz.application.create_question.models import CreateQuestionRequest
from couple_quiz.application.create_question.use_case import CreateQuestionUseCase
from couple_quiz.application.get_partner.use_case import GetPartnerUseCase
from couple_quiz.application.get_score.models import GetScoreResponse
from couple_quiz.application.get_score.use_case import GetScoreUseCase
from couple_quiz.application.get_user.use_case import GetUserByIdUseCase, GetUserByUsernameUseCase
from couple_quiz.application.list_unanswered.use_case import ListUnansweredUseCase
from couple_quiz.application.list_users.use_case import ListUsersUseCase
from couple_quiz.application.submit_answer.models import SubmitAnswerRequest, SubmitAnswerResponse
from couple_quiz.application.submit_answer.use_case import SubmitAnswerUseCase
from couple_quiz.container import (
    get_create_question_use_case,
    get_list_unanswered_use_case,
    get_list_users_use_case,
    get_partner_use_case,
    get_score_use_case,
    get_session,
    get_submit_answer_use_case,
    get_user_by_id_use_case,
    get_user_by_username_use_case,
)

router = APIRouter(prefix="/api/v1")

_ERROR_RESPONSES = {
    400: {"description": "Invalid argument - missing or malformed input"},
    404: {"description": "Referenced user or question not found"},
}


@router.get(
    "/users",
    tags=["users"],
    summary="List both users",
    response_model=list[UserItem],
)
async def list_users(
    uc: ListUsersUseCase = Depends(get_list_users_use_case),
):
    return await uc.execute()


@router.get(
    "/users/id/{user_id}",
    tags=["users"],
    summary="Get a user by id",
    response_model=UserItem,
    responses=_ERROR_RESPONSES,
)
async def get_user_by_id(
    user_id: str = Path(..., description="The user's UUID"),
    uc: GetUserByIdUseCase = Depends(get_user_by_id_use_case),
):
    return await uc.execute(user_id)


@router.get(
    "/users/id/{user_id}/partner",
    tags=["users"],
    summary="Get the other user of the pair",
    response_model=UserItem,
    responses=_ERROR_RESPONSES,
)
async def get_partner(
    user_id: str = Path(..., description="The user's UUID"),
    uc: GetPartnerUseCase = Depends(get_partner_use_case),
):
    return await uc.execute(user_id)


@router.get(
    "/users/{username}",
    tags=["users"],
    summary="Get a user by username",
    response_model=UserItem,
    responses={404: {"description": "Unknown username"}},
)
async def get_user_by_username(
    username: str = Path(..., description="One of the two fixed usernames"),
    uc: GetUserByUsernameUseCase = Depends(get_user_by_username_use_case),
):
    return await uc.execute(username)


@router.post(
    "/questions",
    status_code=201,
    tags=["questions"],
    summary="Ask the partner a question",
    description="""
Create a multiple-choice question for the other user.

Exactly one of the 2 to 4 options must be marked correct, the question text
must be at least 5 characters, and a user cannot address a question to
themselves. The response resolves both users' usernames.
    """,
    response_model=QuestionItem,
    responses=_ERROR_RESPONSES,
)
async def create_question(
    body: CreateQuestionRequest,
    session: AsyncSession = Depends(get_session),
    uc: CreateQuestionUseCase = Depends(get_create_question_use_case),
):
    result = await uc.execute(body)
    await session.commit()
    return result


@router.get(
    "/questions/for/{user_id}",
    tags=["questions"],
    summary="Unanswered questions for a user",
    description="Questions addressed to the user that are still unanswered, newest first.",
    response_model=list[QuestionItem],
    responses={400: _ERROR_RESPONSES[400]},
)
async def list_unanswered(
    user_id: str = Path(..., description="The recipient's UUID"),
    uc: ListUnansweredUseCase = Depends(get_list_unanswered_use_case),
):
    return await uc.execute(user_id)


@router.post(
    "/questions/{question_id}/answer",
    tags=["questions"],
    summary="Answer a question",
    description="""
Record the recipient's answer. Answers are write-once and matched exactly
against the correct option; the correct option text is always returned.
    """,
    response_model=SubmitAnswerResponse,
    responses={
        **_ERROR_RESPONSES,
        403: {"description": "Only the intended recipient may answer"},
        409: {"description": "The question has already been answered"},
        500: {"description": "Stored question has no correct option"},
    },
)
async def submit_answer(
    body: SubmitAnswerRequest,
    question_id: str = Path(..., description="The question's UUID"),
    session: AsyncSession = Depends(get_session),
    uc: SubmitAnswerUseCase = Depends(get_submit_answer_use_case),
):
    result = await uc.execute(question_id, body)
    await session.commit()
    return result


@router.get(
    "/questions/score/{user_id}",
    tags=["questions"],
    summary="How well a user knows their partner",
    description="""
Percentage of the partner's questions to this user that were answered
correctly. Zero when nothing has been answered yet.
    """,
    response_model=GetScoreResponse,
    responses=_ERROR_RESPONSES,
)
async def get_score(
    user_id: str = Path(..., description="The user's UUID"),
    uc: GetScoreUseCase = Depends(get_score_use_case),
):
    return await uc.execute(user_id)
