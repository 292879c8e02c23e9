"""Structured request logging."""

from __future__ import annotations

import logging
from typing import Any, Dict

import structlog
from flask import Request

logger = structlog.get_logger("recipes_api")


def configure_logging(level: str = "INFO") -> None:
    """Render log events as JSON lines, dropping anything below ``level``."""

    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level '{level}'.")

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        logger_factory=structlog.WriteLoggerFactory(),
    )


def _request_info(request: Request) -> Dict[str, Any]:
    return {
        "method": request.method,
        "path": request.path,
        "args": request.args.to_dict(),
        "body": request.get_json(silent=True),
        "remote_addr": request.remote_addr,
    }


def log_request(request: Request) -> None:
    logger.info("request", **_request_info(request))


__all__ = ["configure_logging", "log_request"]
