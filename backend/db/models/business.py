"""Business model: one row per business onboarded through the wizard."""

from typing import Optional

from sqlalchemy import Text
from sqlalchemy.orm import Mapped, mapped_column

from db.base import BaseModel


class Business(BaseModel):
    """A business profile created on wizard completion.

    Rows are create-only from this service; each belongs to exactly one
    authenticated user of the external auth provider.

    Attributes:
        id: UUID primary key
        user_id: Owning actor id (auth provider ``sub``)
        name: Business name
        category: Industry / category
        description: Free-text description
        address: Street address or "City, State"
        goals: What the owner wants to achieve
        help_needed: Where the owner wants help
    """

    __tablename__ = "businesses"

    user_id: Mapped[str] = mapped_column(nullable=False, index=True)
    name: Mapped[str] = mapped_column(nullable=False)
    category: Mapped[str] = mapped_column(nullable=False, default="")
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    address: Mapped[Optional[str]] = mapped_column(nullable=True)
    goals: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    help_needed: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "user_id": self.user_id,
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "address": self.address,
            "goals": self.goals,
            "help_needed": self.help_needed,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
