"""Logging setup shared by the API process and the watch_dashboard CLI.

Module code logs through plain ``logging.getLogger(__name__)``; this
routes those records through structlog so relay writes, notification
deliveries and poller events come out in one format. Request ids bound
by RequestTrackingMiddleware are merged into every line.
"""

import logging
import sys
from typing import Optional

import structlog
from app.config import get_settings

# Chatty libraries kept at WARNING unless asked otherwise
_QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "aiosqlite")


def setup_logging(level: Optional[str] = None) -> None:
    """Install the structlog formatter on the root logger.

    Output is JSON lines unless LOG_FORMAT is "text" or the app runs in
    development, where a console renderer is used (colored on a TTY).

    Args:
        level: Overrides settings.LOG_LEVEL, e.g. from ``--log-level``
    """
    settings = get_settings()

    pre_chain: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    use_console = settings.is_development or settings.LOG_FORMAT == "text"
    renderer = (
        structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
        if use_console
        else structlog.processors.JSONRenderer()
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
    root.setLevel(getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO))

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    # SQL statements only when SQLALCHEMY_ECHO is on
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.DEBUG if settings.SQLALCHEMY_ECHO else logging.WARNING
    )
