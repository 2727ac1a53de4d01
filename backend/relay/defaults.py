"""Fallback values and placeholder records for the webhook relays."""

from relay.models import (
    CommunityInsights,
    ConsumerRecord,
    DashboardRecord,
    LocalDeal,
    LocalDeals,
    PersonalizedPromotions,
    PersonalizedRecommendations,
    SalesForecast,
)

# Business relay: candidate field names, probed in order
TEXT_FIELDS = (
    "Description",
    "description",
    "Descrption",
    "socialMediaDescription",
    "promotionText",
    "text",
    "content",
)
IMAGE_FIELDS = (
    "Image",
    "image",
    "imageBase64",
    "image_base64",
    "imageData",
    "data",
)

DEFAULT_PROMOTION_TEXT = "New promotion generated from n8n workflow"
STOCK_IMAGE_URL = (
    "https://images.unsplash.com/photo-1509042239860-f550ce710b93?w=800&h=600&fit=crop"
)
JPEG_DATA_URL_PREFIX = "data:image/jpeg;base64,"
DEFAULT_FORECAST = "Sales forecast updated from automation"
DEFAULT_PROJECTED_REVENUE = "$25,000"
DEFAULT_KEY_INSIGHTS = [
    "Data updated from n8n automation",
    "Real-time webhook integration active",
    "Custom promotion generated",
]

DASHBOARD_SOURCE = "n8n_webhook"
DEFAULT_DASHBOARD_SOURCE = "default_dashboard_data"

# Consumer relay
DEFAULT_RECOMMENDATIONS_TITLE = "Personalized Recommendations"
DEFAULT_RECOMMENDATIONS_DESCRIPTION = "Based on your preferences and local business activity"
DEFAULT_RECOMMENDATIONS = [
    "Check out the weekend pastry sale at Local Bakery",
    "New restaurant opened nearby with great reviews",
    "Local fitness center offering trial classes",
]
DEALS_TITLE = "Local Deals & Promotions"
DEFAULT_DEALS = [
    {"business": "Local Coffee Shop", "offer": "20% off morning coffee", "validUntil": "2025-01-15"},
    {
        "business": "Neighborhood Bookstore",
        "offer": "Buy 2 get 1 free on selected books",
        "validUntil": "2025-01-20",
    },
]
INSIGHTS_TITLE = "Community Insights"
DEFAULT_INSIGHTS = [
    "3 new businesses opened in your area this month",
    "Local farmers market has expanded hours",
    "Community event: Art walk next weekend",
]

CONSUMER_SOURCE = "consumer_automation"
DEFAULT_CONSUMER_SOURCE = "default_consumer_data"

# Placeholder records never change, so repeated reads are identical
PLACEHOLDER_TIMESTAMP = "1970-01-01T00:00:00+00:00"


def default_dashboard_record() -> dict:
    """Record served before any automation write has been accepted."""
    return DashboardRecord(
        personalizedPromotions=PersonalizedPromotions(
            socialMediaDescription=(
                "Your AI-generated promotion will appear here once your automation runs"
            ),
            imageUrl=STOCK_IMAGE_URL,
            imageBlob=None,
        ),
        salesForecast=SalesForecast(
            forecast="Complete the onboarding wizard to receive your sales forecast",
            projectedRevenue="N/A",
            keyInsights=[
                "Connect your business to unlock AI insights",
                "Promotions are generated from your business profile",
                "Forecasts refresh automatically when new data arrives",
            ],
        ),
        timestamp=PLACEHOLDER_TIMESTAMP,
        source=DEFAULT_DASHBOARD_SOURCE,
    ).model_dump()


def default_consumer_record() -> dict:
    return ConsumerRecord(
        personalizedRecommendations=PersonalizedRecommendations(
            title=DEFAULT_RECOMMENDATIONS_TITLE,
            description=(
                "Connect your preferences to see personalized local business recommendations"
            ),
            recommendations=[
                "Discover local businesses tailored to your interests",
                "Get notified about deals from your favorite categories",
                "Find new places based on community activity",
            ],
        ),
        localDeals=LocalDeals(
            title=DEALS_TITLE,
            deals=[
                LocalDeal(
                    business="Sample Local Business",
                    offer="Connect to see real deals in your area",
                    validUntil="ongoing",
                )
            ],
        ),
        communityInsights=CommunityInsights(
            title=INSIGHTS_TITLE,
            insights=[
                "Connect to see insights about your local community",
                "Track new business openings in your area",
                "Stay updated on local events and activities",
            ],
        ),
        timestamp=PLACEHOLDER_TIMESTAMP,
        source=DEFAULT_CONSUMER_SOURCE,
    ).model_dump()
