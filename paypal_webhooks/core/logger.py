"""Logging setup with Loguru."""

import contextvars
import logging
import sys
from contextlib import contextmanager
from types import FrameType
from typing import Any, Dict, Iterator, Optional

from loguru import logger

# Context variable for per-delivery correlation ID
correlation_id_ctx: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar(
    "correlation_id", default=None
)

__all__ = ["correlation_id_ctx", "correlation_scope", "setup_structured_logging"]


def _correlation_patcher(record: Dict[str, Any]) -> None:
    """
    Patch log records with correlation_id from context.

    Called by Loguru for each log record to inject the correlation_id
    from the ContextVar into the log's extra fields.
    """
    corr_id = correlation_id_ctx.get()
    if corr_id:
        record["extra"]["correlation_id"] = corr_id


@contextmanager
def correlation_scope(correlation_id: Optional[str]) -> Iterator[None]:
    """
    Set the correlation ID for log records emitted inside the block.

    Records carry it as extra.correlation_id whether or not
    setup_structured_logging() has installed the patcher.
    """
    token = correlation_id_ctx.set(correlation_id)
    try:
        if correlation_id:
            with logger.contextualize(correlation_id=correlation_id):
                yield
        else:
            yield
    finally:
        correlation_id_ctx.reset(token)


class InterceptHandler(logging.Handler):
    """Route standard logging records (aiohttp, asyncio) into Loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        # Get corresponding Loguru level if it exists
        try:
            level: Any = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Find caller from where originated the logged message
        frame: Optional[FrameType] = logging.currentframe()
        depth = 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_structured_logging(level: str = "INFO", json_format: bool = False) -> None:
    """
    Setup Loguru logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: Emit serialized JSON records instead of colorized text
    """
    level = level.upper()

    # Remove default handler
    logger.remove()
    logger.configure(patcher=_correlation_patcher)

    if json_format:
        logger.add(sys.stderr, format="{message}", level=level, serialize=True)
    else:
        console_format = (
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        )
        logger.add(sys.stderr, format=console_format, level=level, colorize=True)

    # Intercept all standard logging
    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    logging.root.setLevel(getattr(logging, level))

    logger.debug(f"Logging initialized (level={level}, json={json_format})")
