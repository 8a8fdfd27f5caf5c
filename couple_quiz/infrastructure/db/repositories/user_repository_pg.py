from __future__ import annotations

import uuid

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from couple_quiz.domain.models.user import User
from couple_quiz.domain.ports.user_repository import UserRepository
from couple_quiz.infrastructure.db.orm import UserRow
from couple_quiz.infrastructure.timing import timed_operation

log = structlog.stdlib.get_logger()


class PostgresUserRepository(UserRepository):
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def save(self, user: User) -> User:
        with timed_operation("db.user.save", username=user.username):
            self._session.add(
                UserRow(
                    id=user.id,
                    username=user.username,
                    created_at=user.created_at,
                    updated_at=user.updated_at,
                )
            )
            await self._session.flush()
        return user

    async def get_by_id(self, user_id: uuid.UUID) -> User | None:
        with timed_operation("db.user.get_by_id", user_id=str(user_id)):
            row = await self._session.get(UserRow, user_id)
        return self._to_domain(row) if row is not None else None

    async def get_by_username(self, username: str) -> User | None:
        with timed_operation("db.user.get_by_username", username=username):
            stmt = select(UserRow).where(UserRow.username == username)
            row = (await self._session.execute(stmt)).scalar_one_or_none()
        return self._to_domain(row) if row is not None else None

    async def list_all(self) -> list[User]:
        with timed_operation("db.user.list_all") as timing:
            stmt = select(UserRow).order_by(UserRow.username)
            rows = (await self._session.execute(stmt)).scalars().all()
        log.debug("db.user.list_all.results", returned=len(rows), elapsed_ms=timing.get("elapsed_ms"))
        return [self._to_domain(r) for r in rows]

    @staticmethod
    def _to_domain(row: UserRow) -> User:
        return User(
            id=row.id,
            username=row.username,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )
