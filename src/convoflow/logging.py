"""convoflow.logging

Package logger helper.

Modules obtain a structured logger with `get_logger(__name__)` and log an event
string plus keyword context:

    logger.warning("Webhook node has no URL", node_id=node.id)

`configure_logging()` is optional; hosts that already configure structlog can skip it.
"""

from __future__ import annotations

import logging
import os
import re
from typing import Any, Optional

import structlog

_CONFIGURED = False

_URL_SECRET_RE = re.compile(r"/(appointment|form)/[0-9a-fA-F]{16,}/")


def configure_logging(*, level: Optional[str] = None, json: bool = False) -> None:
    """Configure structlog over stdlib logging (idempotent)."""
    global _CONFIGURED
    if _CONFIGURED:
        return

    level_name = str(level or os.getenv("CONVOFLOW_LOG_LEVEL") or "INFO").upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format="%(message)s")

    renderer: Any = structlog.processors.JSONRenderer() if json else structlog.dev.ConsoleRenderer()
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _CONFIGURED = True


def get_logger(name: str) -> Any:
    return structlog.get_logger(name)


def mask_webhook_url(url: str) -> str:
    """Hide the shared secret segment of an internal webhook URL."""
    return _URL_SECRET_RE.sub(lambda m: f"/{m.group(1)}/[TOKEN]/", str(url or ""))
