from __future__ import annotations

import structlog

from couple_quiz.domain.errors import DataCorruptionError
from couple_quiz.domain.models.user import PARTNER_USERNAMES, User
from couple_quiz.domain.ports.user_repository import UserRepository
from couple_quiz.infrastructure.timing import log_execution

log = structlog.stdlib.get_logger()


class SeedUsersUseCase:
    """Find-or-create both partners. Safe to run on every startup."""

    def __init__(self, repo: UserRepository) -> None:
        self._repo = repo

    @log_execution("use_case.seed_users")
    async def execute(self) -> list[User]:
        for username in PARTNER_USERNAMES:
            if await self._repo.get_by_username(username) is None:
                await self._repo.save(User(username=username))
                log.info("users.seed.created", username=username)

        users = await self._repo.list_all()
        if len(users) != len(PARTNER_USERNAMES):
            raise DataCorruptionError(
                f"Expected exactly {len(PARTNER_USERNAMES)} users, found {len(users)}."
            )
        return users
