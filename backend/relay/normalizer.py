"""Normalization of inbound automation payloads.

The automation platform's output schema is not under our control: field
names drift between workflow versions (``Description`` vs ``description``
vs the misspelt ``Descrption``) and images arrive as raw base64 or as data
URLs. The functions here probe for the known spellings and always produce
a complete record, substituting fixed defaults for anything missing. A
payload is never rejected for missing content.
"""

import copy
import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from relay import defaults
from relay.models import (
    CommunityInsights,
    ConsumerRecord,
    DashboardRecord,
    LocalDeal,
    LocalDeals,
    NormalizedPayload,
    PersonalizedPromotions,
    PersonalizedRecommendations,
    SalesForecast,
)

logger = logging.getLogger(__name__)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def probe_text(payload: dict, fields: Iterable[str]) -> tuple[Optional[str], Optional[str]]:
    """Return ``(value, field)`` for the first non-empty string among ``fields``."""
    for name in fields:
        value = payload.get(name)
        if isinstance(value, str) and value.strip():
            return value, name
    return None, None


def probe_image(
    payload: dict, fields: Iterable[str], min_length: int
) -> tuple[Optional[str], Optional[str]]:
    """Return ``(base64, field)`` for the first image-like candidate.

    A candidate must be a string longer than ``min_length``; short values
    under generic names such as ``data`` are skipped. Any data-URL prefix
    (everything up to the first comma) and all whitespace are removed.
    """
    for name in fields:
        value = payload.get(name)
        if not isinstance(value, str) or len(value) <= min_length:
            continue
        if value.lstrip().startswith("data:") and "," in value:
            value = value.split(",", 1)[1]
        cleaned = "".join(value.split())
        if cleaned:
            return cleaned, name
    return None, None


def _string_list(value: Any) -> Optional[list[str]]:
    if isinstance(value, list) and value:
        return [str(item) for item in value]
    return None


def normalize_dashboard_payload(payload: dict, image_min_length: int = 100) -> NormalizedPayload:
    """Map an automation payload onto the business dashboard record.

    Args:
        payload: Decoded JSON object from the automation platform
        image_min_length: Minimum length for an image candidate string

    Returns:
        NormalizedPayload with the record and content-found flags
    """
    text, text_field = probe_text(payload, defaults.TEXT_FIELDS)
    image_b64, image_field = probe_image(payload, defaults.IMAGE_FIELDS, image_min_length)

    if image_b64:
        image_url = defaults.JPEG_DATA_URL_PREFIX + image_b64
        image_size = len(image_b64) * 3 // 4
    else:
        image_url = defaults.STOCK_IMAGE_URL
        image_size = 0

    raw = copy.deepcopy(payload)
    raw["_meta"] = {
        "textFound": text is not None,
        "textField": text_field,
        "imageFound": image_b64 is not None,
        "imageField": image_field,
        "imageSizeBytes": image_size,
    }

    forecast = payload.get("forecast")
    revenue = payload.get("projectedRevenue")

    record = DashboardRecord(
        personalizedPromotions=PersonalizedPromotions(
            socialMediaDescription=text if text is not None else defaults.DEFAULT_PROMOTION_TEXT,
            imageUrl=image_url,
            imageBlob=image_b64,
        ),
        salesForecast=SalesForecast(
            forecast=str(forecast) if forecast else defaults.DEFAULT_FORECAST,
            projectedRevenue=str(revenue) if revenue else defaults.DEFAULT_PROJECTED_REVENUE,
            keyInsights=_string_list(payload.get("keyInsights")) or list(defaults.DEFAULT_KEY_INSIGHTS),
        ),
        timestamp=utc_now_iso(),
        source=defaults.DASHBOARD_SOURCE,
        rawData=raw,
    )

    logger.info(
        "Normalized dashboard payload",
        extra={"text_field": text_field, "image_field": image_field, "image_size": image_size},
    )

    return NormalizedPayload(
        record=record.model_dump(),
        text_found=text is not None,
        image_found=image_b64 is not None,
        found_fields={"text": text_field, "image": image_field},
    )


def _deal_list(value: Any) -> Optional[list[LocalDeal]]:
    if not isinstance(value, list) or not value:
        return None
    deals = []
    for item in value:
        if not isinstance(item, dict):
            continue
        deals.append(
            LocalDeal(
                business=str(item.get("business", "")),
                offer=str(item.get("offer", "")),
                validUntil=str(item.get("validUntil", "ongoing")),
            )
        )
    return deals or None


def normalize_consumer_payload(payload: dict) -> NormalizedPayload:
    """Map an automation payload onto the consumer dashboard record."""
    title, _ = probe_text(payload, ("title",))
    description, _ = probe_text(payload, ("description", "Description"))
    recommendations = _string_list(payload.get("recommendations"))
    deals = _deal_list(payload.get("deals"))
    insights = _string_list(payload.get("insights"))

    content_found = any(v is not None for v in (description, recommendations, deals, insights))

    record = ConsumerRecord(
        personalizedRecommendations=PersonalizedRecommendations(
            title=title or defaults.DEFAULT_RECOMMENDATIONS_TITLE,
            description=description or defaults.DEFAULT_RECOMMENDATIONS_DESCRIPTION,
            recommendations=recommendations or list(defaults.DEFAULT_RECOMMENDATIONS),
        ),
        localDeals=LocalDeals(
            title=defaults.DEALS_TITLE,
            deals=deals or [LocalDeal(**d) for d in defaults.DEFAULT_DEALS],
        ),
        communityInsights=CommunityInsights(
            title=defaults.INSIGHTS_TITLE,
            insights=insights or list(defaults.DEFAULT_INSIGHTS),
        ),
        timestamp=utc_now_iso(),
        source=defaults.CONSUMER_SOURCE,
        rawData=copy.deepcopy(payload),
    )

    return NormalizedPayload(
        record=record.model_dump(),
        text_found=content_found,
        image_found=False,
    )
