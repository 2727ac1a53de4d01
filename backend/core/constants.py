"""Constants and enums for the LocaLink backend."""

from enum import Enum


class UserType(str, Enum):
    """Who completed the onboarding wizard."""

    BUSINESS = "business"
    CONSUMER = "consumer"


class NotificationEvent(str, Enum):
    """Event tags sent to the automation platform."""

    BUSINESS_WIZARD_COMPLETED = "business_wizard_completed"
    CONSUMER_WIZARD_COMPLETED = "consumer_wizard_completed"
    CHAT_MESSAGE_SENT = "chat_message_sent"


# Source tags
WIZARD_SOURCE = "localink_wizard"
CHAT_SOURCE = "localink_chat"

# Fixed row ids of the single-row relay tables
DASHBOARD_RECORD_ID = "latest_dashboard_data"
CONSUMER_RECORD_ID = "latest_consumer_data"

# Relay entry points, relative to the versioned API prefix
DASHBOARD_RELAY_ROUTE = "/dashboard-webhook-proxy"
CONSUMER_RELAY_ROUTE = "/consumer-dashboard"

# Permissive CORS headers returned by the relay entry points
RELAY_CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
}

# User-visible submission messages
SUBMIT_SUCCESS_BUSINESS = "Business created! Your business has been successfully added."
SUBMIT_SUCCESS_CONSUMER = (
    "Registration completed! Your information has been processed and sent to the AI dashboard."
)
SUBMIT_FAILURE = "Error saving your information. Please try again."
