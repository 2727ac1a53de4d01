"""Outbound notification to the automation platform.

The automation webhook is told about every completed wizard. Delivery is
best-effort: one primary attempt that reads the response, then at most one
fallback attempt whose response is treated as opaque.
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

import httpx

from core import metrics

logger = logging.getLogger(__name__)


# ─── Data Types ────────────────────────────────────────────────

class DeliveryMode(str, Enum):
    PRIMARY = "primary"
    FALLBACK = "fallback"


@dataclass
class NotificationEnvelope:
    """Event sent once to the automation platform.

    ``payload_key`` is ``business`` or ``consumer`` (``message`` for chat)
    and names the nested object carried in ``payload``.
    """

    event: str
    payload_key: str
    payload: dict[str, Any]
    user_id: str
    user_email: str = ""
    source: str = "localink_wizard"
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> dict[str, Any]:
        return {
            "event": self.event,
            self.payload_key: self.payload,
            "user": {"id": self.user_id, "email": self.user_email},
            "timestamp": self.timestamp,
            "source": self.source,
        }


@dataclass
class DeliveryResult:
    """Result of a notification delivery."""

    success: bool
    url: str
    mode: Optional[DeliveryMode] = None
    status_code: Optional[int] = None
    response_text: str = ""
    error: Optional[str] = None
    delivered_at: Optional[str] = None
    attempts: int = 0

    def to_dict(self) -> dict:
        data = asdict(self)
        data["mode"] = self.mode.value if self.mode else None
        return data


# ─── Automation webhook channel ────────────────────────────────

class AutomationWebhookChannel:
    """POST JSON envelopes to an automation webhook.

    Config:
        url: Target URL
        timeout: Seconds per attempt; a timeout counts as a network failure
        max_attempts: 1 (primary only) or 2 (primary + fallback)
    """

    def __init__(
        self,
        url: str,
        timeout: float = 15.0,
        max_attempts: int = 2,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.timeout = timeout
        self.max_attempts = max(1, min(max_attempts, 2))
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, transport=self._transport)

    async def post_primary(self, body: dict) -> httpx.Response:
        """Primary attempt: asks for a readable JSON response.

        Raises:
            httpx.HTTPError: On network failure, timeout or non-2xx status
        """
        async with self._client() as client:
            response = await client.post(
                self.url,
                json=body,
                headers={"Content-Type": "application/json", "Accept": "application/json"},
            )
            response.raise_for_status()
            return response

    async def post_fallback(self, body: dict) -> None:
        """Fallback attempt: fire the request and ignore the response.

        Only transport-level failures raise; the status and body are not
        inspected.
        """
        async with self._client() as client:
            await client.post(
                self.url,
                content=json.dumps(body),
                headers={"Content-Type": "application/json"},
            )

    async def send(self, envelope: NotificationEnvelope) -> DeliveryResult:
        """Deliver an envelope, never raising.

        Returns:
            DeliveryResult; ``success`` is False only if every attempt failed
        """
        body = envelope.to_dict()

        try:
            response = await self.post_primary(body)
            metrics.inc("localink_notifications_total", labels={"outcome": "primary"})
            logger.info(
                f"Automation webhook delivered (HTTP {response.status_code})",
                extra={"event": envelope.event},
            )
            return DeliveryResult(
                success=True,
                url=self.url,
                mode=DeliveryMode.PRIMARY,
                status_code=response.status_code,
                response_text=response.text,
                delivered_at=datetime.now(timezone.utc).isoformat(),
                attempts=1,
            )
        except httpx.HTTPError as e:
            primary_error = str(e) or type(e).__name__
            logger.warning(f"Automation webhook primary attempt failed: {primary_error}")

        if self.max_attempts < 2:
            metrics.inc("localink_notifications_total", labels={"outcome": "failed"})
            return DeliveryResult(success=False, url=self.url, error=primary_error, attempts=1)

        try:
            await self.post_fallback(body)
        except httpx.HTTPError as e:
            fallback_error = str(e) or type(e).__name__
            metrics.inc("localink_notifications_total", labels={"outcome": "failed"})
            logger.error(
                f"Automation webhook fallback attempt also failed: {fallback_error}",
                extra={"event": envelope.event, "primary_error": primary_error},
            )
            return DeliveryResult(
                success=False,
                url=self.url,
                error=f"primary: {primary_error}; fallback: {fallback_error}",
                attempts=2,
            )

        metrics.inc("localink_notifications_total", labels={"outcome": "fallback"})
        logger.info("Automation webhook sent via fallback", extra={"event": envelope.event})
        return DeliveryResult(
            success=True,
            url=self.url,
            mode=DeliveryMode.FALLBACK,
            delivered_at=datetime.now(timezone.utc).isoformat(),
            attempts=2,
        )
