"""Timing helpers for use cases and repository calls.

``timed_operation`` measures a block and logs at debug level.
``log_execution`` wraps a sync or async callable and logs its
started/completed/failed lifecycle at info level.
"""
from __future__ import annotations

import inspect
import time
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, ParamSpec, TypeVar

import structlog

P = ParamSpec("P")
T = TypeVar("T")

log = structlog.stdlib.get_logger()


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


@contextmanager
def timed_operation(operation: str, **context: Any):
    """Measure the enclosed block and log ``<operation>.completed``.

    Yields a dict that receives ``elapsed_ms`` once the block exits, even when
    it raises.

    Example:
        with timed_operation("db.question.save", question_id=str(q.id)) as timing:
            await session.flush()
    """
    timing: dict[str, Any] = {}
    start = time.perf_counter()
    try:
        yield timing
    finally:
        timing["elapsed_ms"] = _elapsed_ms(start)
        log.debug(f"{operation}.completed", elapsed_ms=timing["elapsed_ms"], **context)


def log_execution(operation: str, extract_context: Callable[..., dict[str, Any]] | None = None):
    """Decorator logging the lifecycle of a use case.

    Args:
        operation: Event prefix, e.g. "use_case.submit_answer".
        extract_context: Receives the call's ``(*args, **kwargs)`` and returns
            extra fields for every log entry. Keep it cheap and side-effect free.
    """

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        def _failed(start: float, exc: Exception, context: dict[str, Any]) -> None:
            log.error(
                f"{operation}.failed",
                elapsed_ms=_elapsed_ms(start),
                error=str(exc),
                error_type=type(exc).__name__,
                **context,
            )

        @wraps(func)
        async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            context = extract_context(*args, **kwargs) if extract_context else {}
            log.info(f"{operation}.started", **context)
            start = time.perf_counter()
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                _failed(start, e, context)
                raise
            log.info(f"{operation}.completed", elapsed_ms=_elapsed_ms(start), **context)
            return result

        @wraps(func)
        def sync_wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            context = extract_context(*args, **kwargs) if extract_context else {}
            log.info(f"{operation}.started", **context)
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                _failed(start, e, context)
                raise
            log.info(f"{operation}.completed", elapsed_ms=_elapsed_ms(start), **context)
            return result

        if inspect.iscoroutinefunction(func):
            return async_wrapper  # type: ignore[return-value]
        return sync_wrapper

    return decorator
