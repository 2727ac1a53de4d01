"""Normalized record shapes served by the webhook relays.

Field names are camelCase because the dashboards read these records as-is.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


# ─── Business dashboard ────────────────────────────────────────

class PersonalizedPromotions(BaseModel):
    socialMediaDescription: str
    imageUrl: str
    imageBlob: Optional[str] = None


class SalesForecast(BaseModel):
    forecast: str
    projectedRevenue: str
    keyInsights: list[str]


class DashboardRecord(BaseModel):
    """The business RelayRecord."""

    personalizedPromotions: PersonalizedPromotions
    salesForecast: SalesForecast
    timestamp: str
    source: str
    rawData: Optional[dict[str, Any]] = None


# ─── Consumer dashboard ────────────────────────────────────────

class PersonalizedRecommendations(BaseModel):
    title: str
    description: str
    recommendations: list[str]


class LocalDeal(BaseModel):
    business: str
    offer: str
    validUntil: str


class LocalDeals(BaseModel):
    title: str
    deals: list[LocalDeal]


class CommunityInsights(BaseModel):
    title: str
    insights: list[str]


class ConsumerRecord(BaseModel):
    """The consumer RelayRecord."""

    personalizedRecommendations: PersonalizedRecommendations
    localDeals: LocalDeals
    communityInsights: CommunityInsights
    timestamp: str
    source: str
    rawData: Optional[dict[str, Any]] = None


class NormalizedPayload(BaseModel):
    """Outcome of normalizing one inbound automation payload."""

    record: dict[str, Any]
    text_found: bool = False
    image_found: bool = False
    found_fields: dict[str, Optional[str]] = Field(default_factory=dict)

    @property
    def real_content_found(self) -> bool:
        return self.text_found or self.image_found
