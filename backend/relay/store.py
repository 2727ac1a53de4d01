"""Single-record storage behind the webhook relays.

A RelayStore holds at most one record. ``put`` replaces it in full
(last write wins; no merge, no version check), ``get`` returns it or None.
"""

import copy
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Type

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import PersistenceError
from db.base import Base


@dataclass
class StoredRecord:
    """A stored relay record plus the time it was written."""

    data: dict
    updated_at: datetime


class RelayStore(ABC):
    """Repository interface for the single latest relay record."""

    @abstractmethod
    async def get(self) -> Optional[StoredRecord]:
        ...

    @abstractmethod
    async def put(self, data: dict) -> StoredRecord:
        ...


class InMemoryRelayStore(RelayStore):
    """Process-local store. Not shared between workers."""

    def __init__(self):
        self._record: Optional[StoredRecord] = None

    async def get(self) -> Optional[StoredRecord]:
        return self._record

    async def put(self, data: dict) -> StoredRecord:
        self._record = StoredRecord(data=copy.deepcopy(data), updated_at=datetime.now(timezone.utc))
        return self._record


class SqlRelayStore(RelayStore):
    """Store backed by a single-row table keyed by a fixed id.

    Usage:
        store = SqlRelayStore(db, DashboardWebhookData, DASHBOARD_RECORD_ID)
        await store.put(record)
    """

    def __init__(self, db: AsyncSession, model: Type[Base], row_id: str):
        self.db = db
        self.model = model
        self.row_id = row_id

    async def get(self) -> Optional[StoredRecord]:
        try:
            result = await self.db.execute(
                select(self.model)
                .where(self.model.id == self.row_id)
                .execution_options(populate_existing=True)
            )
            row = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to fetch {self.model.__tablename__}", details=str(e))

        if row is None or not row.data:
            return None
        return StoredRecord(data=row.data, updated_at=row.updated_at)

    async def put(self, data: dict) -> StoredRecord:
        now = datetime.now(timezone.utc)
        try:
            await self.db.execute(self._upsert(data, now))
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceError(f"Failed to store {self.model.__tablename__}", details=str(e))

        return StoredRecord(data=data, updated_at=now)

    def _upsert(self, data: dict, now: datetime):
        # Single statement so concurrent first writes cannot both INSERT
        dialect = self.db.get_bind().dialect.name
        insert = postgresql.insert if dialect == "postgresql" else sqlite.insert
        stmt = insert(self.model).values(id=self.row_id, data=data, updated_at=now)
        return stmt.on_conflict_do_update(
            index_elements=[self.model.id],
            set_={"data": stmt.excluded.data, "updated_at": stmt.excluded.updated_at},
        )
