"""Base CRUD service.

Service classes inherit from this. Provides create and read helpers
with owner scoping; SQLAlchemy failures surface as PersistenceError.
"""

from typing import Any, Generic, Optional, Sequence, Type, TypeVar
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import PersistenceError
from db.base import BaseModel

ModelType = TypeVar("ModelType", bound=BaseModel)


class BaseService(Generic[ModelType]):
    """Generic create/read service for any SQLAlchemy model.

    Usage:
        class BusinessService(BaseService[Business]):
            def __init__(self, db: AsyncSession):
                super().__init__(Business, db)
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession):
        self.model = model
        self.db = db

    # ─── Read ──────────────────────────────────────────────

    async def get_by_id(self, id: str) -> Optional[ModelType]:
        """Get a single record by ID."""
        try:
            result = await self.db.execute(select(self.model).where(self.model.id == id))
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to load {self.model.__tablename__}", details=str(e))
        return result.scalar_one_or_none()

    async def list_for_user(
        self,
        user_id: str,
        offset: int = 0,
        limit: int = 50,
    ) -> Sequence[ModelType]:
        """List a user's records, newest first."""
        query = (
            select(self.model)
            .where(self.model.user_id == user_id)
            .order_by(self.model.created_at.desc())
            .offset(offset)
            .limit(limit)
        )
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to list {self.model.__tablename__}", details=str(e))
        return result.scalars().all()

    # ─── Create ────────────────────────────────────────────

    async def create(self, data: dict[str, Any]) -> ModelType:
        """Create and commit a new record.

        Args:
            data: Dict of field values

        Returns:
            Created model instance

        Raises:
            PersistenceError: If the insert fails
        """
        if "id" not in data:
            data["id"] = str(uuid4())

        instance = self.model(**data)
        try:
            self.db.add(instance)
            await self.db.commit()
            await self.db.refresh(instance)
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceError(f"Failed to create {self.model.__tablename__}", details=str(e))
        return instance
