"""Database models for the LocaLink backend.

This module imports all models to ensure they are registered
with SQLAlchemy's declarative base.
"""

from db.models.business import Business
from db.models.relay_record import ConsumerDashboardData, DashboardWebhookData

__all__ = [
    "Business",
    "ConsumerDashboardData",
    "DashboardWebhookData",
]
