"""Integration tests for the relay endpoints."""

import pytest
from httpx import ASGITransport, AsyncClient

from app.config import get_settings
from app.dependencies import get_dashboard_store
from core import metrics
from core.exceptions import PersistenceError
from relay import defaults
from relay.store import RelayStore

DASHBOARD = "/api/v1/dashboard-webhook-proxy"
CONSUMER = "/api/v1/consumer-dashboard"


@pytest.mark.integration
class TestDashboardRelayWrite:
    async def test_empty_payload_stores_fallback_record(self, client, automation_headers):
        resp = await client.post(DASHBOARD, json={}, headers=automation_headers)
        assert resp.status_code == 200
        body = resp.json()

        assert body["success"] is True
        assert body["message"] == "Webhook data received and stored"
        assert body["realContentFound"] is False
        assert body["textProcessed"] is False
        assert body["imageProcessed"] is False
        promo = body["transformedData"]["personalizedPromotions"]
        assert promo["socialMediaDescription"] == defaults.DEFAULT_PROMOTION_TEXT
        assert promo["imageUrl"] == defaults.STOCK_IMAGE_URL

        # The fallback record is stored as real data
        read = (await client.get(DASHBOARD)).json()
        assert read["hasNewData"] is True
        assert read["data"]["personalizedPromotions"]["socialMediaDescription"] == defaults.DEFAULT_PROMOTION_TEXT

    async def test_image_round_trip(self, client, automation_headers, sample_image):
        await client.post(
            DASHBOARD,
            json={"Descrption": "Two-for-one tacos", "Image": sample_image},
            headers=automation_headers,
        )

        body = (await client.get(DASHBOARD)).json()
        promo = body["data"]["personalizedPromotions"]
        assert promo["socialMediaDescription"] == "Two-for-one tacos"
        assert promo["imageUrl"] == "data:image/jpeg;base64," + sample_image
        assert promo["imageBlob"] == sample_image
        assert body["data"]["rawData"]["_meta"]["textField"] == "Descrption"

    async def test_last_write_wins(self, client, automation_headers):
        await client.post(DASHBOARD, json={"Description": "first"}, headers=automation_headers)
        await client.post(DASHBOARD, json={"Description": "second"}, headers=automation_headers)

        body = (await client.get(DASHBOARD)).json()
        assert body["data"]["personalizedPromotions"]["socialMediaDescription"] == "second"

    async def test_replacement_does_not_merge_fields(self, client, automation_headers):
        await client.post(
            DASHBOARD,
            json={"Description": "first", "forecast": "Up 12% next month", "campaign": "spring"},
            headers=automation_headers,
        )
        await client.post(DASHBOARD, json={"Description": "second"}, headers=automation_headers)

        data = (await client.get(DASHBOARD)).json()["data"]
        assert data["salesForecast"]["forecast"] == defaults.DEFAULT_FORECAST
        assert "campaign" not in data["rawData"]

    async def test_missing_authorization_rejected(self, client):
        resp = await client.post(DASHBOARD, json={"Description": "x"})
        assert resp.status_code == 401
        assert resp.json() == {"success": False, "error": "Missing authorization header"}
        assert resp.headers["access-control-allow-origin"] == "*"

        # Nothing stored
        assert (await client.get(DASHBOARD)).json()["hasNewData"] is False

    async def test_bare_bearer_rejected(self, client):
        resp = await client.post(DASHBOARD, json={}, headers={"Authorization": "Bearer "})
        assert resp.status_code == 401

    async def test_any_bearer_value_accepted(self, client):
        resp = await client.post(DASHBOARD, json={}, headers={"Authorization": "Bearer whatever"})
        assert resp.status_code == 200

    async def test_open_write_when_gate_disabled(self, client, monkeypatch):
        monkeypatch.setattr(get_settings(), "RELAY_REQUIRE_AUTH", False)
        resp = await client.post(DASHBOARD, json={"Description": "open"})
        assert resp.status_code == 200

    async def test_malformed_json(self, client, automation_headers):
        resp = await client.post(
            DASHBOARD,
            content=b"{not json",
            headers={**automation_headers, "Content-Type": "application/json"},
        )
        assert resp.status_code == 400
        assert resp.json() == {"success": False, "error": "Invalid JSON body"}
        assert (await client.get(DASHBOARD)).json()["hasNewData"] is False

    async def test_non_object_json(self, client, automation_headers):
        resp = await client.post(DASHBOARD, json=["a", "b"], headers=automation_headers)
        assert resp.status_code == 400
        assert resp.json()["success"] is False

    async def test_write_counted(self, client, automation_headers):
        await client.post(DASHBOARD, json={}, headers=automation_headers)
        assert metrics.get_counter("localink_relay_writes_total", {"relay": "dashboard"}) == 1


@pytest.mark.integration
class TestDashboardRelayRead:
    async def test_default_when_empty(self, client):
        resp = await client.get(DASHBOARD)
        assert resp.status_code == 200
        body = resp.json()

        assert body["success"] is True
        assert body["hasNewData"] is False
        assert body["data"]["source"] == "default_dashboard_data"
        assert "message" in body
        assert "lastUpdated" not in body

    async def test_default_reads_are_identical(self, client):
        first = (await client.get(DASHBOARD)).json()
        second = (await client.get(DASHBOARD)).json()
        assert first == second

    async def test_stored_reads_are_identical(self, client, automation_headers):
        await client.post(DASHBOARD, json={"text": "steady"}, headers=automation_headers)
        first = (await client.get(DASHBOARD)).json()
        second = (await client.get(DASHBOARD)).json()

        assert first == second
        assert first["lastUpdated"]

    async def test_cors_headers_on_read(self, client):
        resp = await client.get(DASHBOARD)
        assert resp.headers["access-control-allow-origin"] == "*"


@pytest.mark.integration
class TestRelayMethods:
    async def test_options_preflight(self, client):
        resp = await client.options(DASHBOARD)
        assert resp.status_code == 200
        assert resp.content == b""
        assert resp.headers["access-control-allow-origin"] == "*"
        assert "POST" in resp.headers["access-control-allow-methods"]
        assert "authorization" in resp.headers["access-control-allow-headers"]

    async def test_browser_preflight_bypasses_api_cors(self, client):
        resp = await client.options(
            DASHBOARD,
            headers={
                "Origin": "https://dashboard.example.com",
                "Access-Control-Request-Method": "POST",
                "Access-Control-Request-Headers": "authorization, content-type",
            },
        )
        assert resp.status_code == 200
        assert resp.content == b""
        assert resp.headers["access-control-allow-origin"] == "*"
        assert resp.headers["access-control-allow-methods"] == "GET, POST, OPTIONS"

    async def test_preflight_from_any_origin_with_narrowed_api_origins(self, monkeypatch):
        from app.main import create_app

        monkeypatch.setattr(get_settings(), "ALLOWED_ORIGINS", "https://app.localink.test")
        narrowed = create_app()
        preflight = {
            "Origin": "https://elsewhere.example.com",
            "Access-Control-Request-Method": "GET",
        }

        async with AsyncClient(transport=ASGITransport(app=narrowed), base_url="http://test") as ac:
            relay_resp = await ac.options(CONSUMER, headers=preflight)
            api_resp = await ac.options("/api/v1/chat", headers=preflight)

        assert relay_resp.status_code == 200
        assert relay_resp.content == b""
        assert relay_resp.headers["access-control-allow-origin"] == "*"
        # The rest of the API still enforces the configured origins
        assert api_resp.status_code == 400

    @pytest.mark.parametrize("method", ["PUT", "PATCH", "DELETE", "TRACE"])
    async def test_other_verbs_not_allowed(self, client, method):
        resp = await client.request(method, DASHBOARD)
        assert resp.status_code == 405
        assert resp.json() == {"error": "Method not allowed"}
        assert resp.headers["access-control-allow-origin"] == "*"


@pytest.mark.integration
class TestConsumerRelay:
    async def test_default_when_empty(self, client):
        body = (await client.get(CONSUMER)).json()
        assert body["hasNewData"] is False
        assert body["data"]["source"] == "default_consumer_data"

    async def test_write_then_read(self, client, automation_headers):
        resp = await client.post(
            CONSUMER,
            json={"recommendations": ["Visit the new bookshop"], "insights": ["Street fair Saturday"]},
            headers=automation_headers,
        )
        assert resp.status_code == 200
        assert resp.json()["realContentFound"] is True

        body = (await client.get(CONSUMER)).json()
        assert body["hasNewData"] is True
        assert body["data"]["source"] == "consumer_automation"
        assert body["data"]["personalizedRecommendations"]["recommendations"] == ["Visit the new bookshop"]
        assert "lastUpdated" in body

    async def test_relays_are_independent(self, client, automation_headers):
        await client.post(CONSUMER, json={"insights": ["x"]}, headers=automation_headers)
        assert (await client.get(DASHBOARD)).json()["hasNewData"] is False

    async def test_requires_authorization(self, client):
        resp = await client.post(CONSUMER, json={})
        assert resp.status_code == 401


class _FailingStore(RelayStore):
    async def get(self):
        raise PersistenceError("Failed to fetch dashboard_webhook_data", details="disk I/O error")

    async def put(self, data):
        raise PersistenceError("Failed to store dashboard_webhook_data", details="disk I/O error")


@pytest.mark.integration
class TestRelayPersistenceFailure:
    @pytest.fixture(autouse=True)
    def failing_store(self, app):
        app.dependency_overrides[get_dashboard_store] = _FailingStore

    async def test_write_failure(self, client, automation_headers):
        resp = await client.post(DASHBOARD, json={"Description": "x"}, headers=automation_headers)
        assert resp.status_code == 500
        assert resp.json() == {
            "success": False,
            "error": "Failed to store dashboard_webhook_data",
            "details": "disk I/O error",
        }
        assert resp.headers["access-control-allow-origin"] == "*"

    async def test_read_failure(self, client):
        resp = await client.get(DASHBOARD)
        assert resp.status_code == 500
        body = resp.json()
        assert body["success"] is False
        assert body["details"] == "disk I/O error"
        assert resp.headers["access-control-allow-origin"] == "*"

    async def test_other_relay_unaffected(self, client):
        resp = await client.get(CONSUMER)
        assert resp.status_code == 200
