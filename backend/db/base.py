"""Base model classes for all SQLAlchemy models."""

from datetime import datetime
from uuid import uuid4

from sqlalchemy import func, DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base shared by every table."""

    pass


class BaseModel(Base):
    """Abstract base model with a UUID key and automatic timestamps.

    Provides:
    - id: UUID primary key
    - created_at / updated_at: automatic timestamps
    """

    __abstract__ = True

    id: Mapped[str] = mapped_column(primary_key=True, default=lambda: str(uuid4()))
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=func.now(), onupdate=func.now()
    )
