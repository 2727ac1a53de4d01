"""Integration tests for wizard submission and business listing."""

import pytest
from sqlalchemy import func, select

from core.constants import SUBMIT_FAILURE, SUBMIT_SUCCESS_BUSINESS, SUBMIT_SUCCESS_CONSUMER
from core.exceptions import PersistenceError
from db.models import Business
from services.business_service import BusinessService

BUSINESS_BODY = {
    "userType": "business",
    "businessName": "Corner Bakery",
    "category": "Food & Beverage",
    "description": "Sourdough and pastries",
    "address": "12 Main St, Austin, TX",
    "goals": "More weekday foot traffic",
    "helpNeeded": "Social media",
}

CONSUMER_BODY = {
    "userType": "consumer",
    "serviceTypes": ["restaurants", "fitness"],
    "location": "Austin, TX",
    "generalHelp": "deals",
}


@pytest.mark.integration
class TestBusinessSubmission:
    async def test_creates_business_and_notifies(
        self, client, auth_headers, test_actor, automation, notification_manager, db_session
    ):
        resp = await client.post("/api/v1/submissions", json=BUSINESS_BODY, headers=auth_headers)
        assert resp.status_code == 201
        body = resp.json()

        assert body["success"] is True
        assert body["message"] == SUBMIT_SUCCESS_BUSINESS
        assert body["record"]["name"] == "Corner Bakery"
        assert body["record"]["user_id"] == test_actor.id

        count = await db_session.scalar(select(func.count()).select_from(Business))
        assert count == 1
        stored = await BusinessService(db_session).get_by_id(body["record"]["id"])
        assert stored.help_needed == "Social media"

        await notification_manager.drain(timeout=2)
        assert len(automation.requests) == 1
        sent = automation.bodies[0]
        assert sent["event"] == "business_wizard_completed"
        assert sent["business"]["user_type"] == "business"
        assert sent["business"]["name"] == "Corner Bakery"
        assert sent["user"] == {"id": test_actor.id, "email": test_actor.email}
        assert sent["source"] == "localink_wizard"

    async def test_succeeds_when_automation_unreachable(
        self, client, auth_headers, automation, notification_manager
    ):
        automation.mode = "down"
        resp = await client.post("/api/v1/submissions", json=BUSINESS_BODY, headers=auth_headers)
        assert resp.status_code == 201

        await notification_manager.drain(timeout=2)
        # Primary + fallback attempted, failure swallowed
        assert len(automation.requests) == 2
        assert notification_manager.results[-1].success is False

    async def test_unauthenticated(self, client, automation, notification_manager, db_session):
        resp = await client.post("/api/v1/submissions", json=BUSINESS_BODY)
        assert resp.status_code == 401
        assert resp.json()["detail"] == "User not authenticated"

        await notification_manager.drain(timeout=2)
        assert automation.requests == []
        assert await db_session.scalar(select(func.count()).select_from(Business)) == 0

    async def test_invalid_token(self, client):
        resp = await client.post(
            "/api/v1/submissions",
            json=BUSINESS_BODY,
            headers={"Authorization": "Bearer not-a-jwt"},
        )
        assert resp.status_code == 401

    @pytest.mark.parametrize("name", ["", "   "])
    async def test_validation_error(self, client, auth_headers, db_session, name):
        resp = await client.post(
            "/api/v1/submissions",
            json={**BUSINESS_BODY, "businessName": name},
            headers=auth_headers,
        )
        assert resp.status_code == 422
        assert await db_session.scalar(select(func.count()).select_from(Business)) == 0

    async def test_persistence_failure(
        self, client, auth_headers, automation, notification_manager, monkeypatch
    ):
        async def failing_create(self, data):
            raise PersistenceError("Failed to create businesses", details="disk I/O error")

        monkeypatch.setattr("services.base.BaseService.create", failing_create)

        resp = await client.post("/api/v1/submissions", json=BUSINESS_BODY, headers=auth_headers)
        assert resp.status_code == 500
        assert resp.json() == {
            "success": False,
            "error": SUBMIT_FAILURE,
            "details": "disk I/O error",
        }

        await notification_manager.drain(timeout=2)
        assert automation.requests == []


@pytest.mark.integration
class TestConsumerSubmission:
    async def test_not_persisted_but_notified(
        self, client, auth_headers, automation, notification_manager, db_session
    ):
        resp = await client.post("/api/v1/submissions", json=CONSUMER_BODY, headers=auth_headers)
        assert resp.status_code == 201
        body = resp.json()
        assert body["message"] == SUBMIT_SUCCESS_CONSUMER
        assert body["record"]["user_type"] == "consumer"
        assert body["record"]["location"] == "Austin, TX"

        assert await db_session.scalar(select(func.count()).select_from(Business)) == 0

        await notification_manager.drain(timeout=2)
        sent = automation.bodies[0]
        assert sent["event"] == "consumer_wizard_completed"
        consumer = sent["consumer"]
        assert consumer["serviceTypes"] == ["restaurants", "fitness"]
        assert consumer["generalHelp"] == "deals"
        assert consumer["analysisType"] == "not-selected"
        assert consumer["goalDescription"] == "not-specified"
        assert consumer["created_at"]


@pytest.mark.integration
class TestBusinessListing:
    async def test_lists_only_own_businesses(
        self, client, auth_headers, make_auth_headers, notification_manager
    ):
        for name in ("First", "Second"):
            resp = await client.post(
                "/api/v1/submissions",
                json={**BUSINESS_BODY, "businessName": name},
                headers=auth_headers,
            )
            assert resp.status_code == 201

        other = make_auth_headers("someone-else", "other@example.com")
        await client.post(
            "/api/v1/submissions",
            json={**BUSINESS_BODY, "businessName": "Not mine"},
            headers=other,
        )
        await notification_manager.drain(timeout=2)

        resp = await client.get("/api/v1/businesses", headers=auth_headers)
        assert resp.status_code == 200
        names = [b["name"] for b in resp.json()]
        assert set(names) == {"First", "Second"}

    async def test_requires_auth(self, client):
        resp = await client.get("/api/v1/businesses")
        assert resp.status_code == 401
