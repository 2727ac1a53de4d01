"""Dashboard poller: fixed-interval reads of the relay with change detection.

One read fires immediately on ``start()``, then one every ``interval``
seconds until ``stop()``. The cached record is replaced whenever the
returned ``timestamp`` differs from the last one seen (or on the first
successful read). The notifier is told only about real changes: the
first read is initial population, and identical timestamps are ignored,
so static data never re-notifies.

A failed read is logged and leaves the cache untouched; the schedule
keeps running.
"""

import asyncio
import logging
from contextlib import suppress
from typing import Optional

import httpx

from dashboard.client import RelayClient
from dashboard.notifier import Notifier

logger = logging.getLogger(__name__)


class DashboardPoller:
    """Polls a RelayClient and caches the latest record.

    Attributes:
        record: Cached relay record, or None before the first successful read
        is_loading: True while the initial read or a manual refresh is in flight
        last_seen_timestamp: ``timestamp`` of the cached record
        has_new_data: Whether the cached record came from the automation
            (False while the relay is still serving its placeholder)
    """

    def __init__(
        self,
        client: RelayClient,
        interval: float = 10.0,
        notifier: Optional[Notifier] = None,
    ):
        if interval <= 0:
            raise ValueError("Poll interval must be positive")
        self.client = client
        self.interval = interval
        self.notifier = notifier
        self.record: Optional[dict] = None
        self.is_loading = False
        self.last_seen_timestamp: Optional[str] = None
        self.has_new_data = False
        self._has_read = False
        self._task: Optional[asyncio.Task] = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Begin polling. No-op if already running."""
        if self.is_running:
            return
        # Loading until the immediate first read lands
        self.is_loading = self.record is None
        self._task = asyncio.create_task(self._run(), name="dashboard-poller")
        logger.info(f"Dashboard poller started ({self.interval}s interval)", extra={"url": self.client.url})

    async def stop(self) -> None:
        """Cancel polling. Idempotent."""
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        with suppress(asyncio.CancelledError):
            await task
        self.is_loading = False
        logger.info("Dashboard poller stopped")

    async def refresh_now(self) -> bool:
        """Read once outside the schedule. Returns True if the record changed."""
        self.is_loading = True
        try:
            return await self.poll_once()
        finally:
            self.is_loading = False

    async def _run(self) -> None:
        await self.refresh_now()
        while True:
            await asyncio.sleep(self.interval)
            await self.poll_once()

    async def poll_once(self) -> bool:
        """One read + change detection. Returns True if the cache was updated."""
        try:
            body = await self.client.fetch()
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Dashboard poll failed: {e}")
            return False

        data = body.get("data")
        if not isinstance(data, dict):
            logger.warning("Dashboard poll returned no record")
            return False

        timestamp = data.get("timestamp")
        first_read = not self._has_read
        if not first_read and timestamp == self.last_seen_timestamp:
            return False

        self.record = data
        self.last_seen_timestamp = timestamp
        self.has_new_data = bool(body.get("hasNewData"))
        self._has_read = True

        if not first_read and self.has_new_data:
            self._signal(data)
        return True

    def _signal(self, record: dict) -> None:
        logger.info("Dashboard has new data", extra={"timestamp": record.get("timestamp")})
        if self.notifier is None:
            return
        try:
            self.notifier.on_new_data(record)
        except Exception as e:
            logger.error(f"Dashboard notifier failed: {e}", exc_info=True)
