"""structlog configuration for the quiz service.

Every record, whether emitted through structlog or plain ``logging`` (uvicorn,
SQLAlchemy, alembic), goes through one stdout handler and carries the
``service`` name plus whatever request context the middleware bound.
"""
from __future__ import annotations

import logging
import os
import sys

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

SERVICE_NAME = "couple-quiz"
LOG_FORMATS = ("console", "json")


def _add_service(_logger: WrappedLogger, _method: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def _pre_chain(fmt: str) -> list[Processor]:
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        _add_service,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]
    # ConsoleRenderer prints exc_info itself; JSON needs it as data
    if fmt == "json":
        processors.append(structlog.processors.dict_tracebacks)
    processors.append(structlog.processors.UnicodeDecoder())
    return processors


def _quiet_levels(level: str) -> dict[str, int]:
    levels = {"uvicorn.access": logging.WARNING}
    if level != "DEBUG":
        # SQL_ECHO output only shows up when debugging
        levels["sqlalchemy.engine"] = logging.WARNING
    return levels


def setup_logging(
    log_level: str | None = None,
    log_format: str | None = None,
) -> None:
    level = (log_level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    fmt = (log_format or os.environ.get("LOG_FORMAT", "console")).lower()
    if fmt not in LOG_FORMATS:
        raise ValueError(f"LOG_FORMAT must be one of {', '.join(LOG_FORMATS)}, got {fmt!r}")

    pre_chain = _pre_chain(fmt)
    renderer: Processor = (
        structlog.processors.JSONRenderer() if fmt == "json" else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
            foreign_pre_chain=pre_chain,
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level)

    for name, quiet_level in _quiet_levels(level).items():
        logging.getLogger(name).setLevel(quiet_level)
