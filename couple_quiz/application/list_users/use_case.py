from __future__ import annotations

from couple_quiz.application.common.models import UserItem
from couple_quiz.domain.ports.user_repository import UserRepository
from couple_quiz.infrastructure.timing import log_execution


class ListUsersUseCase:
    def __init__(self, repo: UserRepository) -> None:
        self._repo = repo

    @log_execution("use_case.list_users")
    async def execute(self) -> list[UserItem]:
        return [UserItem.from_domain(u) for u in await self._repo.list_all()]
