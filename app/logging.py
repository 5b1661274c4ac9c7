from __future__ import annotations

import logging
import os
from typing import Any

import structlog

from app.core.config import Settings


def _resolve_level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def _resolve_format(settings: Settings) -> str:
    if settings.log_format:
        return settings.log_format.lower()
    return "console" if settings.app_env == "dev" else "json"


def setup_logging(settings: Settings, log_file: str | os.PathLike | None = None) -> None:
    """Configure structlog on top of stdlib logging.

    - JSON lines (or console output in dev) with ISO/UTC timestamp, level and event
    - contextvars are merged so request_id bound by the middleware reaches service logs
    - stdlib records (uvicorn etc.) go through the same renderer
    """

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]

    structlog.configure(
        processors=shared_processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    if _resolve_format(settings) == "console":
        renderer = structlog.dev.ConsoleRenderer()
    else:
        renderer = structlog.processors.JSONRenderer()

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        os.makedirs(os.path.dirname(str(log_file)) or ".", exist_ok=True)
        handlers.append(logging.FileHandler(str(log_file), encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)

    logging.basicConfig(level=_resolve_level(settings.log_level), handlers=handlers, force=True)


def get_logger(*args: Any, **kwargs: Any) -> structlog.stdlib.BoundLogger:  # convenience
    return structlog.get_logger(*args, **kwargs)
