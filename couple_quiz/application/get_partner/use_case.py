from __future__ import annotations

import uuid
from typing import Any

from couple_quiz.application.common.models import UserItem
from couple_quiz.domain.errors import NotFoundError
from couple_quiz.domain.models.user import PARTNER_USERNAMES, User
from couple_quiz.domain.ports.user_repository import UserRepository
from couple_quiz.domain.validation import parse_identifier
from couple_quiz.infrastructure.timing import log_execution


async def resolve_partner(repo: UserRepository, user_id: uuid.UUID) -> User:
    """Return the other user of the pair.

    The directory must hold exactly two users; anything else is reported as
    a missing partner.
    """
    users = await repo.list_all()
    others = [u for u in users if u.id != user_id]
    if len(users) != len(PARTNER_USERNAMES) or len(others) != 1:
        raise NotFoundError("Partner user not found.")
    return others[0]


def _extract_context(_self, user_id: Any) -> dict:
    return {"user_id": str(user_id)}


class GetPartnerUseCase:
    def __init__(self, repo: UserRepository) -> None:
        self._repo = repo

    @log_execution("use_case.get_partner", _extract_context)
    async def execute(self, user_id: Any) -> UserItem:
        uid = parse_identifier(user_id, "Invalid user ID format.")
        if await self._repo.get_by_id(uid) is None:
            raise NotFoundError(f"User with ID '{uid}' not found.")
        return UserItem.from_domain(await resolve_partner(self._repo, uid))
