"""FastAPI dependency injection functions."""

import logging
from typing import AsyncIterator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
import db.database as database
from db.models import ConsumerDashboardData, DashboardWebhookData
from core.constants import CONSUMER_RECORD_ID, DASHBOARD_RECORD_ID
from notifications.channels import AutomationWebhookChannel
from notifications.manager import NotificationManager, get_notification_manager
from relay.store import RelayStore, SqlRelayStore
from services.chat_service import ChatService

logger = logging.getLogger(__name__)


async def get_db() -> AsyncIterator[AsyncSession]:
    """
    Provide a database session for API endpoints.

    Services commit their own writes; anything left pending when the
    request fails is rolled back.
    """
    async with database.AsyncSessionLocal() as session:
        try:
            yield session
        except Exception as e:
            logger.error(f"Database error: {str(e)}")
            await session.rollback()
            raise
        finally:
            await session.close()


def get_dashboard_store(db: AsyncSession = Depends(get_db)) -> RelayStore:
    """Single-row store behind the business dashboard relay."""
    return SqlRelayStore(db, DashboardWebhookData, DASHBOARD_RECORD_ID)


def get_consumer_store(db: AsyncSession = Depends(get_db)) -> RelayStore:
    """Single-row store behind the consumer dashboard relay."""
    return SqlRelayStore(db, ConsumerDashboardData, CONSUMER_RECORD_ID)


def get_notifier() -> NotificationManager:
    return get_notification_manager()


def get_chat_service() -> ChatService:
    settings = get_settings()
    channel = AutomationWebhookChannel(
        url=settings.CHAT_WEBHOOK_URL,
        timeout=settings.OUTBOUND_TIMEOUT_SECONDS,
    )
    return ChatService(channel)
