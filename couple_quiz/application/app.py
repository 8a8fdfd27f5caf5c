from __future__ import annotations

import time
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, Response
from sqlalchemy import text

from couple_quiz.application.seed_users.use_case import SeedUsersUseCase
from couple_quiz.container import Container
from couple_quiz.infrastructure.db.engine import DATABASE_URL, _mask_password
from couple_quiz.infrastructure.db.repositories.user_repository_pg import PostgresUserRepository
from couple_quiz.infrastructure.logging import setup_logging
from couple_quiz.infrastructure.request_context import (
    CLIENT_ID_HEADER,
    REQUEST_ID_HEADER,
    bind_request_context,
    clear_request_context,
    set_client_id,
    set_request_id,
)
from couple_quiz.infrastructure.web.cors import add_cors
from couple_quiz.infrastructure.web.errors import register_error_handlers
from couple_quiz.infrastructure.web.routes_v1 import router as v1_router

# Configure logging early so all logs use consistent formatting
setup_logging()
log = structlog.stdlib.get_logger()


class App:
    def __init__(self) -> None:
        self._container = Container()
        self._container.config.database_url.from_value(DATABASE_URL)
        self._container.wire()
        log.info("app.db.configured", url=_mask_password(DATABASE_URL))

        self._fastapi = FastAPI(
            title="Couple Quiz Service",
            description="""
Two partners ask each other multiple-choice questions and track how well
each knows the other.

## Features

* **Users** - The two fixed users, seeded at startup
* **Ask** - Author a question with 2 to 4 options for your partner
* **Answer** - Answer questions addressed to you, once, and see the right answer
* **Score** - Percentage of your partner's questions you answered correctly

## Identity

There is no authentication: callers identify themselves by user id.
            """,
            version="1.0.0",
            license_info={
                "name": "MIT",
            },
            openapi_tags=[
                {
                    "name": "users",
                    "description": "Lookup of the two users and their partner relation",
                },
                {
                    "name": "questions",
                    "description": "Asking, answering and scoring questions",
                },
                {
                    "name": "health",
                    "description": "Health check endpoints for monitoring",
                },
            ],
            lifespan=self._lifespan,
        )
        self._fastapi.include_router(v1_router)
        register_error_handlers(self._fastapi)
        add_cors(self._fastapi)
        self._fastapi.middleware("http")(self._logging_middleware)
        self._fastapi.get(
            "/health",
            tags=["health"],
            summary="Health check",
            response_description="Service health status",
        )(self._health_check)

    @property
    def fastapi(self) -> FastAPI:
        return self._fastapi

    @property
    def container(self) -> Container:
        return self._container

    async def __call__(self, scope, receive, send) -> None:
        await self._fastapi(scope, receive, send)

    @asynccontextmanager
    async def _lifespan(self, app: FastAPI):
        await self.seed_users()
        log.info("app.started")
        yield
        await self._container.engine().dispose()
        log.info("app.shutdown")

    async def seed_users(self) -> None:
        factory = self._container.session_factory()
        async with factory() as session:
            await SeedUsersUseCase(PostgresUserRepository(session)).execute()
            await session.commit()

    async def _health_check(self) -> dict:
        """Health check endpoint for Docker/Kubernetes liveness probes."""
        async with self._container.engine().connect() as conn:
            await conn.execute(text("SELECT 1"))
        return {"status": "healthy"}

    @staticmethod
    async def _logging_middleware(request: Request, call_next) -> Response:
        # Starlette headers are case-insensitive
        request_id = set_request_id(request.headers.get(REQUEST_ID_HEADER))
        client_id = set_client_id(request.headers.get(CLIENT_ID_HEADER))

        bind_request_context(
            request_id=request_id,
            client_id=client_id,
            method=request.method,
            path=request.url.path,
        )

        start = time.perf_counter()
        try:
            response = await call_next(request)
            elapsed_ms = round((time.perf_counter() - start) * 1000, 2)

            # Level follows the status class for easier filtering
            if response.status_code >= 500:
                log_fn = log.error
            elif response.status_code >= 400:
                log_fn = log.warning
            else:
                log_fn = log.info
            log_fn("request.completed", status_code=response.status_code, elapsed_ms=elapsed_ms)

            response.headers[REQUEST_ID_HEADER] = request_id
            response.headers[CLIENT_ID_HEADER] = client_id
            return response
        except Exception as e:
            log.error(
                "request.failed",
                elapsed_ms=round((time.perf_counter() - start) * 1000, 2),
                error=str(e),
                error_type=type(e).__name__,
            )
            raise
        finally:
            clear_request_context()
