"""Alembic environment for the quiz schema.

Runs through the same async engine setup, database URL and structlog
configuration as the service. Pass ``-x database_url=...`` to migrate a
database other than ``DATABASE_URL``.
"""
from __future__ import annotations

import asyncio
from typing import Any

import structlog
from alembic import context
from sqlalchemy import pool
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import create_async_engine

from couple_quiz.infrastructure.db.engine import DATABASE_URL, _mask_password
from couple_quiz.infrastructure.db.orm import Base
from couple_quiz.infrastructure.logging import setup_logging

setup_logging()
log = structlog.stdlib.get_logger("alembic.env")

target_metadata = Base.metadata


def get_url() -> str:
    return context.get_x_argument(as_dictionary=True).get("database_url", DATABASE_URL)


def _configure_options(url: str) -> dict[str, Any]:
    return {
        "target_metadata": target_metadata,
        "compare_type": True,
        # SQLite cannot ALTER constraints in place
        "render_as_batch": url.startswith("sqlite"),
    }


def run_migrations_offline() -> None:
    url = get_url()
    log.info("migrations.offline.started", url=_mask_password(url))
    context.configure(
        url=url,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **_configure_options(url),
    )
    with context.begin_transaction():
        context.run_migrations()


def do_run_migrations(connection: Connection, url: str) -> None:
    context.configure(connection=connection, **_configure_options(url))
    with context.begin_transaction():
        context.run_migrations()


async def run_async_migrations() -> None:
    url = get_url()
    log.info("migrations.started", url=_mask_password(url))
    engine = create_async_engine(url, poolclass=pool.NullPool)
    try:
        async with engine.connect() as connection:
            await connection.run_sync(do_run_migrations, url)
    finally:
        await engine.dispose()
    log.info("migrations.completed")


def run_migrations_online() -> None:
    asyncio.run(run_async_migrations())


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
