"""API v1 aggregated router.

All v1 endpoints are registered here and mounted under /api/v1 in main.py.
"""

from fastapi import APIRouter

from api.routes import businesses, chat, health, relay, submissions

api_v1_router = APIRouter()

# Health (no auth required)
api_v1_router.include_router(
    health.router,
    tags=["Health"],
)

# Automation relays (inbound writes + dashboard reads)
api_v1_router.include_router(
    relay.dashboard_router,
    tags=["Relay"],
)
api_v1_router.include_router(
    relay.consumer_router,
    tags=["Relay"],
)

# Onboarding wizard
api_v1_router.include_router(
    submissions.router,
    tags=["Submissions"],
)

# Businesses
api_v1_router.include_router(
    businesses.router,
    tags=["Businesses"],
)

# Chat relay to the automation chatbot
api_v1_router.include_router(
    chat.router,
    tags=["Chat"],
)
