"""Single-row tables holding the latest normalized automation payloads.

Each table only ever holds the row with its fixed id; every accepted
write replaces that row's ``data`` in full.
"""

from datetime import datetime

from sqlalchemy import JSON, DateTime
from sqlalchemy.orm import Mapped, mapped_column

from db.base import Base


class DashboardWebhookData(Base):
    """Latest business dashboard record (promotions + sales forecast)."""

    __tablename__ = "dashboard_webhook_data"

    id: Mapped[str] = mapped_column(primary_key=True)
    data: Mapped[dict] = mapped_column(JSON, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class ConsumerDashboardData(Base):
    """Latest consumer dashboard record (recommendations, deals, insights)."""

    __tablename__ = "consumer_dashboard_data"

    id: Mapped[str] = mapped_column(primary_key=True)
    data: Mapped[dict] = mapped_column(JSON, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
