from __future__ import annotations

from typing import Any

from couple_quiz.application.common.models import UserItem
from couple_quiz.domain.errors import NotFoundError
from couple_quiz.domain.models.user import is_partner_username
from couple_quiz.domain.ports.user_repository import UserRepository
from couple_quiz.domain.validation import parse_identifier
from couple_quiz.infrastructure.timing import log_execution


def _extract_username(_self, username: str) -> dict:
    return {"username": username}


def _extract_user_id(_self, user_id: Any) -> dict:
    return {"user_id": str(user_id)}


class GetUserByUsernameUseCase:
    def __init__(self, repo: UserRepository) -> None:
        self._repo = repo

    @log_execution("use_case.get_user_by_username", _extract_username)
    async def execute(self, username: str) -> UserItem:
        if not is_partner_username(username):
            raise NotFoundError(f"User '{username}' not found.")
        user = await self._repo.get_by_username(username)
        if user is None:
            raise NotFoundError(f"User '{username}' not found.")
        return UserItem.from_domain(user)


class GetUserByIdUseCase:
    def __init__(self, repo: UserRepository) -> None:
        self._repo = repo

    @log_execution("use_case.get_user_by_id", _extract_user_id)
    async def execute(self, user_id: Any) -> UserItem:
        uid = parse_identifier(user_id, "Invalid user ID format.")
        user = await self._repo.get_by_id(uid)
        if user is None:
            raise NotFoundError(f"User with ID '{uid}' not found.")
        return UserItem.from_domain(user)
