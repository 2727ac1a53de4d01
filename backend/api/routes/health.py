"""Health check endpoints.

Provides:
- Basic liveness probe (/health)
- Detailed status with a database ping (/health/status)
"""

import platform
import sys
import time
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
import logging

from app.config import get_settings
import db.database as database
from notifications.manager import get_notification_manager

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/health", tags=["health"])

_start_time = time.monotonic()
_start_datetime = datetime.now(timezone.utc).isoformat()


@router.get("", response_model=dict[str, Any])
async def root() -> dict[str, Any]:
    """
    Get API name and version.
    Used as a simple liveness probe.
    """
    settings = get_settings()
    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "status": "ok",
    }


@router.get("/status", response_model=dict[str, Any])
async def system_status() -> dict[str, Any]:
    """
    Detailed status including uptime and component health.
    The database is reported "unavailable" rather than failing the probe.
    """
    settings = get_settings()

    try:
        async with database.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        db_status = "ok"
    except (SQLAlchemyError, OSError) as e:
        logger.error("Database health check failed: %s", e)
        db_status = "unavailable"

    uptime_seconds = time.monotonic() - _start_time
    hours, remainder = divmod(int(uptime_seconds), 3600)
    minutes, seconds = divmod(remainder, 60)

    return {
        "app": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "started_at": _start_datetime,
        "uptime": f"{hours}h {minutes}m {seconds}s",
        "uptime_seconds": round(uptime_seconds, 1),
        "python": {
            "version": sys.version,
            "platform": platform.platform(),
        },
        "components": {
            "api": "running",
            "database": db_status,
            "pending_notifications": get_notification_manager().pending,
        },
    }
