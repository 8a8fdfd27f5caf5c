from __future__ import annotations

import abc
import uuid

from couple_quiz.domain.models.user import User


class UserRepository(abc.ABC):
    @abc.abstractmethod
    async def save(self, user: User) -> User: ...

    @abc.abstractmethod
    async def get_by_id(self, user_id: uuid.UUID) -> User | None: ...

    @abc.abstractmethod
    async def get_by_username(self, username: str) -> User | None: ...

    @abc.abstractmethod
    async def list_all(self) -> list[User]: ...
