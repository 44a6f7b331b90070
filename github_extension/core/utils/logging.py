"""
Structured logging utilities.

Provides logging setup and a context manager for structured operation
logging with timing and error tracking.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from github_extension.core.config.logging_config import LoggingConfig

logger = structlog.get_logger(__name__)


def configure_logging(logging_config: LoggingConfig) -> None:
    """
    Route structlog through the standard library logging machinery.

    Args:
        logging_config: Level, format and renderer selection.
    """
    level = getattr(logging, logging_config.level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=logging_config.format)

    renderer: Any = (
        structlog.processors.JSONRenderer() if logging_config.json else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


@asynccontextmanager
async def log_operation(
    operation: str,
    subject_ids: dict[str, str] | None = None,
    **context: Any,
) -> Any:  # AsyncGenerator[None, None]
    """
    Context manager for structured operation logging.

    Logs operation start, completion, and errors with timing information.

    Args:
        operation: Name of the operation being performed
        subject_ids: Dictionary of subject identifiers (e.g., {"repo": "owner/repo", "pr": "123"})
        **context: Additional context to include in logs

    Example:
        async with log_operation("user_list_lookup", token_count=3):
            users = await fetch_users(...)
    """
    start_time = time.time()
    log_context = {
        "operation": operation,
        **(subject_ids or {}),
        **context,
    }

    logger.info("operation_started", **log_context)

    try:
        yield
    except Exception as e:
        latency_ms = int((time.time() - start_time) * 1000)
        logger.error("operation_failed", error=str(e), latency_ms=latency_ms, **log_context)
        raise
    else:
        latency_ms = int((time.time() - start_time) * 1000)
        logger.info("operation_completed", latency_ms=latency_ms, **log_context)
