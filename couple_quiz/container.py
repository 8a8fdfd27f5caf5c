from __future__ import annotations

from dependency_injector import containers, providers
from dependency_injector.wiring import Provide, inject
from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from couple_quiz.application.create_question.use_case import CreateQuestionUseCase
from couple_quiz.application.get_partner.use_case import GetPartnerUseCase
from couple_quiz.application.get_score.use_case import GetScoreUseCase
from couple_quiz.application.get_user.use_case import GetUserByIdUseCase, GetUserByUsernameUseCase
from couple_quiz.application.list_unanswered.use_case import ListUnansweredUseCase
from couple_quiz.application.list_users.use_case import ListUsersUseCase
from couple_quiz.application.submit_answer.use_case import SubmitAnswerUseCase
from couple_quiz.infrastructure.db.engine import SQL_ECHO
from couple_quiz.infrastructure.db.repositories.question_repository_pg import PostgresQuestionRepository
from couple_quiz.infrastructure.db.repositories.user_repository_pg import PostgresUserRepository


class Container(containers.DeclarativeContainer):
    wiring_config = containers.WiringConfiguration(
        modules=[
            "couple_quiz.container",
            "couple_quiz.infrastructure.web.routes_v1",
        ],
    )

    config = providers.Configuration()

    engine = providers.Singleton(create_async_engine, config.database_url, echo=SQL_ECHO)
    session_factory = providers.Singleton(
        async_sessionmaker, engine, expire_on_commit=False
    )


@inject
async def get_session(
    factory: async_sessionmaker = Depends(Provide[Container.session_factory]),
) -> AsyncSession:  # type: ignore[misc]
    async with factory() as session:
        yield session


async def get_user_repository(
    session: AsyncSession = Depends(get_session),
) -> PostgresUserRepository:
    return PostgresUserRepository(session)


async def get_question_repository(
    session: AsyncSession = Depends(get_session),
) -> PostgresQuestionRepository:
    return PostgresQuestionRepository(session)


async def get_list_users_use_case(
    users: PostgresUserRepository = Depends(get_user_repository),
) -> ListUsersUseCase:
    return ListUsersUseCase(users)


async def get_user_by_username_use_case(
    users: PostgresUserRepository = Depends(get_user_repository),
) -> GetUserByUsernameUseCase:
    return GetUserByUsernameUseCase(users)


async def get_user_by_id_use_case(
    users: PostgresUserRepository = Depends(get_user_repository),
) -> GetUserByIdUseCase:
    return GetUserByIdUseCase(users)


async def get_partner_use_case(
    users: PostgresUserRepository = Depends(get_user_repository),
) -> GetPartnerUseCase:
    return GetPartnerUseCase(users)


async def get_create_question_use_case(
    users: PostgresUserRepository = Depends(get_user_repository),
    questions: PostgresQuestionRepository = Depends(get_question_repository),
) -> CreateQuestionUseCase:
    return CreateQuestionUseCase(users, questions)


async def get_list_unanswered_use_case(
    users: PostgresUserRepository = Depends(get_user_repository),
    questions: PostgresQuestionRepository = Depends(get_question_repository),
) -> ListUnansweredUseCase:
    return ListUnansweredUseCase(users, questions)


async def get_submit_answer_use_case(
    questions: PostgresQuestionRepository = Depends(get_question_repository),
) -> SubmitAnswerUseCase:
    return SubmitAnswerUseCase(questions)


async def get_score_use_case(
    users: PostgresUserRepository = Depends(get_user_repository),
    questions: PostgresQuestionRepository = Depends(get_question_repository),
) -> GetScoreUseCase:
    return GetScoreUseCase(users, questions)
