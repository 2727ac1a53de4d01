"""Tests for the single-record relay stores."""

import pytest

from core.constants import DASHBOARD_RECORD_ID
from db.models import DashboardWebhookData
from relay.store import InMemoryRelayStore, SqlRelayStore


@pytest.mark.unit
class TestInMemoryRelayStore:
    async def test_empty(self):
        assert await InMemoryRelayStore().get() is None

    async def test_last_write_wins(self):
        store = InMemoryRelayStore()
        await store.put({"n": 1})
        await store.put({"n": 2})
        stored = await store.get()
        assert stored.data == {"n": 2}

    async def test_stored_copy_is_isolated(self):
        store = InMemoryRelayStore()
        data = {"nested": {"v": 1}}
        await store.put(data)
        data["nested"]["v"] = 99
        assert (await store.get()).data == {"nested": {"v": 1}}


@pytest.mark.integration
class TestSqlRelayStore:
    async def test_empty_table(self, db_session):
        store = SqlRelayStore(db_session, DashboardWebhookData, DASHBOARD_RECORD_ID)
        assert await store.get() is None

    async def test_upsert_keeps_single_row(self, db_session):
        from sqlalchemy import func, select

        store = SqlRelayStore(db_session, DashboardWebhookData, DASHBOARD_RECORD_ID)
        await store.put({"timestamp": "t1"})
        await store.put({"timestamp": "t2"})

        count = await db_session.scalar(select(func.count()).select_from(DashboardWebhookData))
        assert count == 1
        stored = await store.get()
        assert stored.data == {"timestamp": "t2"}
        assert stored.updated_at is not None

    async def test_visible_from_another_session(self, db_engine, db_session):
        from sqlalchemy.ext.asyncio import AsyncSession
        from sqlalchemy.orm import sessionmaker

        await SqlRelayStore(db_session, DashboardWebhookData, DASHBOARD_RECORD_ID).put({"v": 1})

        factory = sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
        async with factory() as other:
            stored = await SqlRelayStore(other, DashboardWebhookData, DASHBOARD_RECORD_ID).get()
        assert stored.data == {"v": 1}

    async def test_concurrent_first_writes_do_not_conflict(self, tmp_path):
        import asyncio

        from sqlalchemy import func, select
        from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
        from sqlalchemy.orm import sessionmaker

        import db.models  # noqa: F401
        from db.base import Base

        # Separate connections per session, so both writes really race
        engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'relay.db'}")
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

        factory = sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
        try:
            async with factory() as a, factory() as b:
                results = await asyncio.gather(
                    SqlRelayStore(a, DashboardWebhookData, DASHBOARD_RECORD_ID).put({"v": "A"}),
                    SqlRelayStore(b, DashboardWebhookData, DASHBOARD_RECORD_ID).put({"v": "B"}),
                )
            assert [r.data for r in results] == [{"v": "A"}, {"v": "B"}]

            async with factory() as check:
                count = await check.scalar(select(func.count()).select_from(DashboardWebhookData))
                stored = await SqlRelayStore(check, DashboardWebhookData, DASHBOARD_RECORD_ID).get()
            assert count == 1
            assert stored.data in ({"v": "A"}, {"v": "B"})
        finally:
            await engine.dispose()
