from __future__ import annotations

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from couple_quiz.domain.errors import (
    ConflictError,
    ForbiddenError,
    InvalidArgumentError,
    NotFoundError,
    QuizError,
)

log = structlog.stdlib.get_logger()

_STATUS_BY_ERROR: dict[type[QuizError], int] = {
    InvalidArgumentError: 400,
    ForbiddenError: 403,
    NotFoundError: 404,
    ConflictError: 409,
}


def status_for(exc: QuizError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return status_code
    return 500


async def quiz_error_handler(request: Request, exc: QuizError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        log.error("request.internal_error", error=exc.message, error_type=type(exc).__name__)
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "kind": exc.kind},
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Malformed request.",
            "kind": InvalidArgumentError.kind,
            "errors": _error_details(exc),
        },
    )


def _error_details(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(err.get("loc", ())), "msg": err.get("msg", "")}
        for err in exc.errors()
    ]


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(QuizError, quiz_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
