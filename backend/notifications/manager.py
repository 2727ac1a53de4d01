"""Notification Manager: detached, fire-and-forget delivery.

``dispatch`` schedules delivery as a background task and returns
immediately. The caller never awaits the outcome and no failure reaches it:
a double delivery failure is logged as NotificationDeliveryFailure and
dropped. No retry state is persisted.
"""

import asyncio
import logging
from typing import Optional

from app.config import get_settings
from core.exceptions import NotificationDeliveryFailure
from notifications.channels import AutomationWebhookChannel, DeliveryResult, NotificationEnvelope

logger = logging.getLogger(__name__)


class NotificationManager:
    """Runs channel deliveries as unsupervised background tasks.

    Tasks are referenced until done so the event loop cannot collect
    them mid-flight. Singleton, use get_notification_manager().
    """

    def __init__(self, channel: AutomationWebhookChannel):
        self.channel = channel
        self._tasks: set[asyncio.Task] = set()
        self.results: list[DeliveryResult] = []

    def dispatch(self, envelope: NotificationEnvelope) -> asyncio.Task:
        """Schedule delivery of ``envelope`` and return without waiting."""
        task = asyncio.create_task(self._deliver(envelope), name=f"notify:{envelope.event}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _deliver(self, envelope: NotificationEnvelope) -> Optional[DeliveryResult]:
        try:
            result = await self.channel.send(envelope)
            self.results = (self.results + [result])[-100:]
            if not result.success:
                raise NotificationDeliveryFailure(result.error or "Notification delivery failed")
            return result
        except NotificationDeliveryFailure as e:
            logger.error(
                f"Notification dropped: {e.message}",
                extra={"event": envelope.event, "user_id": envelope.user_id},
            )
        except Exception as e:
            logger.error(f"Notification task crashed: {e}", exc_info=True)
        return None

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def drain(self, timeout: Optional[float] = None) -> None:
        """Wait for in-flight deliveries (shutdown and tests)."""
        if not self._tasks:
            return
        await asyncio.wait(list(self._tasks), timeout=timeout)


_manager: Optional[NotificationManager] = None


def get_notification_manager() -> NotificationManager:
    """Get or create the global notification manager."""
    global _manager
    if _manager is None:
        settings = get_settings()
        _manager = NotificationManager(
            AutomationWebhookChannel(
                url=settings.AUTOMATION_WEBHOOK_URL,
                timeout=settings.OUTBOUND_TIMEOUT_SECONDS,
            )
        )
    return _manager


def set_notification_manager(manager: Optional[NotificationManager]) -> None:
    """Replace the global manager (tests and embedding)."""
    global _manager
    _manager = manager
