"""Business persistence."""

from sqlalchemy.ext.asyncio import AsyncSession

from db.models.business import Business
from services.base import BaseService
from wizard.submission import BusinessSubmission


class BusinessService(BaseService[Business]):
    def __init__(self, db: AsyncSession):
        super().__init__(Business, db)

    async def create_from_submission(self, submission: BusinessSubmission, user_id: str) -> Business:
        """Map wizard fields onto a new business row owned by ``user_id``."""
        return await self.create(
            {
                "user_id": user_id,
                "name": submission.businessName.strip(),
                "category": submission.category.strip(),
                "description": submission.description or None,
                "address": submission.address or None,
                "goals": submission.goals or None,
                "help_needed": submission.helpNeeded or None,
            }
        )
