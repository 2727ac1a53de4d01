"""Relay handlers: the write/read logic behind each relay endpoint.

Each relay kind (business dashboard, consumer dashboard) implements
BaseRelayHandler. The API layer parses the request, picks a store and
calls ``write`` or ``read``; the handler normalizes, replaces the stored
record and shapes the response body.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional

from core import metrics
from relay import defaults
from relay.models import NormalizedPayload
from relay.normalizer import normalize_consumer_payload, normalize_dashboard_payload
from relay.store import RelayStore

logger = logging.getLogger(__name__)


@dataclass
class RelayReadResult:
    """What a read returns: the stored record or the placeholder."""

    data: dict
    has_new_data: bool
    last_updated: Optional[str] = None

    def to_response(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "success": True,
            "data": self.data,
            "hasNewData": self.has_new_data,
        }
        if self.has_new_data:
            body["lastUpdated"] = self.last_updated
        else:
            body["message"] = "No automation data available yet - showing default content"
        return body


class BaseRelayHandler(ABC):
    """Abstract base for relay kinds."""

    kind: str

    @abstractmethod
    def normalize(self, payload: dict) -> NormalizedPayload:
        """Map an inbound payload onto this relay's record shape."""
        ...

    @abstractmethod
    def default_record(self) -> dict:
        """Placeholder served before the first accepted write."""
        ...

    async def write(self, store: RelayStore, payload: dict) -> dict[str, Any]:
        """Normalize ``payload`` and replace the stored record with it.

        Raises:
            PersistenceError: If the store write fails
        """
        normalized = self.normalize(payload)
        await store.put(normalized.record)

        metrics.inc("localink_relay_writes_total", labels={"relay": self.kind})
        logger.info(
            f"Relay {self.kind} record replaced",
            extra={
                "text_found": normalized.text_found,
                "image_found": normalized.image_found,
            },
        )

        return {
            "success": True,
            "message": "Webhook data received and stored",
            "transformedData": normalized.record,
            "imageProcessed": normalized.image_found,
            "textProcessed": normalized.text_found,
            "realContentFound": normalized.real_content_found,
        }

    async def read(self, store: RelayStore) -> RelayReadResult:
        """Return the latest record, or the placeholder if none exists.

        Raises:
            PersistenceError: If the store read fails
        """
        stored = await store.get()
        if stored is None:
            logger.debug(f"Relay {self.kind}: no stored record, serving default")
            return RelayReadResult(data=self.default_record(), has_new_data=False)

        logger.debug(f"Relay {self.kind}: serving stored record")
        return RelayReadResult(
            data=stored.data,
            has_new_data=True,
            last_updated=stored.updated_at.isoformat() if stored.updated_at else None,
        )


class DashboardRelayHandler(BaseRelayHandler):
    """Business dashboard: promotional text, image and sales forecast."""

    kind = "dashboard"

    def __init__(self, image_min_length: int = 100):
        self.image_min_length = image_min_length

    def normalize(self, payload: dict) -> NormalizedPayload:
        return normalize_dashboard_payload(payload, image_min_length=self.image_min_length)

    def default_record(self) -> dict:
        return defaults.default_dashboard_record()


class ConsumerRelayHandler(BaseRelayHandler):
    """Consumer dashboard: recommendations, local deals, community insights."""

    kind = "consumer"

    def normalize(self, payload: dict) -> NormalizedPayload:
        return normalize_consumer_payload(payload)

    def default_record(self) -> dict:
        return defaults.default_consumer_record()
