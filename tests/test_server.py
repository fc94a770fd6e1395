"""Tests for pommai.server — FastAPI routes and lifespan helpers."""

import json

import httpx
import pytest

from pommai.engine import CommandEngine
from pommai.events.event_bus import EventBus
from pommai.events.types import EventType
from pommai.server.app import create_app, start_listening


# ---------------------------------------------------------------------------
# GET /health
# ---------------------------------------------------------------------------


class TestHealthEndpoint:
    async def test_health_returns_ok_status(self, async_client: httpx.AsyncClient):
        response = await async_client.get("/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["session_status"] == "idle"
        assert body["recognizer_initialized"] is False
        assert body["init_error"] is None

    async def test_health_returns_version(self, async_client: httpx.AsyncClient):
        from pommai import __version__

        body = (await async_client.get("/health")).json()
        assert body["version"] == __version__

    async def test_health_trigger_counts(
        self, async_client: httpx.AsyncClient, engine: CommandEngine
    ):
        body = (await async_client.get("/health")).json()
        assert body["triggers"] == engine.registry.counts()

    async def test_health_returns_subscriber_count(
        self, async_client: httpx.AsyncClient, event_bus: EventBus
    ):
        assert (await async_client.get("/health")).json()["subscribers"] == 0
        await event_bus.subscribe()
        assert (await async_client.get("/health")).json()["subscribers"] == 1


# ---------------------------------------------------------------------------
# POST /resolve
# ---------------------------------------------------------------------------


class TestResolveEndpoint:
    async def test_resolve_command(self, async_client: httpx.AsyncClient):
        response = await async_client.post("/resolve", json={"text": "உட்கார்!"})
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "ok"
        assert body["result"]["found"] is True
        assert body["result"]["category"] == "command"
        assert body["result"]["payload"] == "sit"
        assert body["result"]["tier"] == "exact"

    async def test_resolve_word_payload(self, async_client: httpx.AsyncClient):
        body = (await async_client.post("/resolve", json={"text": "maram"})).json()
        assert body["result"]["category"] == "word"
        assert body["result"]["payload"]["surface_form"] == "மரம்"
        assert body["result"]["payload"]["gloss_english"] == "tree"

    async def test_resolve_no_match(self, async_client: httpx.AsyncClient):
        body = (await async_client.post("/resolve", json={"text": "hello"})).json()
        assert body["status"] == "ok"
        assert body["result"]["found"] is False

    async def test_resolve_emits_to_bus(
        self, async_client: httpx.AsyncClient, event_bus: EventBus
    ):
        queue = await event_bus.subscribe()
        await async_client.post("/resolve", json={"text": "நட"})
        event = queue.get_nowait()
        assert event.type == EventType.RESOLVED
        assert event.result.payload == "walk"

    async def test_malformed_json(self, async_client: httpx.AsyncClient):
        response = await async_client.post(
            "/resolve",
            content=b"this is not json",
            headers={"Content-Type": "application/json"},
        )
        assert response.json() == {"status": "error", "reason": "invalid json"}

    @pytest.mark.parametrize("payload", [{}, {"text": ""}, {"text": 5}, ["நட"]])
    async def test_text_required(self, async_client: httpx.AsyncClient, payload):
        body = (await async_client.post("/resolve", json=payload)).json()
        assert body == {"status": "error", "reason": "text is required"}


# ---------------------------------------------------------------------------
# GET /triggers
# ---------------------------------------------------------------------------


class TestTriggersEndpoint:
    async def test_lists_all(
        self, async_client: httpx.AsyncClient, engine: CommandEngine
    ):
        body = (await async_client.get("/triggers")).json()
        assert body["count"] == len(engine.registry)
        assert len(body["triggers"]) == body["count"]

    async def test_filter_by_category(self, async_client: httpx.AsyncClient):
        body = (await async_client.get("/triggers", params={"category": "command"})).json()
        assert body["status"] == "ok"
        assert {t["category"] for t in body["triggers"]} == {"command"}
        assert "உட்கார்" in [t["normalized_text"] for t in body["triggers"]]

    async def test_unknown_category(self, async_client: httpx.AsyncClient):
        body = (await async_client.get("/triggers", params={"category": "emoji"})).json()
        assert body["status"] == "error"
        assert "emoji" in body["reason"]


# ---------------------------------------------------------------------------
# POST /listen/start, POST /listen/stop
# ---------------------------------------------------------------------------


class TestListenEndpoints:
    async def test_start_and_stop(self, async_client: httpx.AsyncClient, recognizer):
        body = (await async_client.post("/listen/start")).json()
        assert body == {"status": "ok", "session_status": "listening"}
        assert recognizer.running is True

        body = (await async_client.post("/listen/stop")).json()
        assert body == {"status": "ok", "session_status": "stopped"}
        assert recognizer.running is False

    async def test_start_reports_init_error(
        self, failing_recognizer, registry, fast_policy
    ):
        engine = CommandEngine(failing_recognizer, registry, policy=fast_policy)
        app = create_app(engine, auto_listen=False)
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as client:
            body = (await client.post("/listen/start")).json()
            assert body == {"status": "error", "reason": "permission denied"}

            health = (await client.get("/health")).json()
            assert health["init_error"] == "permission denied"
            assert health["desired_listening"] is False


class TestStartListening:
    async def test_success_clears_init_error(self, app):
        app.state.init_error = "stale"
        assert await start_listening(app) is True
        assert app.state.init_error is None
        assert app.state.engine.snapshot().desired_listening is True

    async def test_failure_recorded(self, failing_recognizer, registry):
        app = create_app(CommandEngine(failing_recognizer, registry), auto_listen=False)
        assert await start_listening(app) is False
        assert app.state.init_error == "permission denied"


# ---------------------------------------------------------------------------
# GET /events (SSE stream)
# ---------------------------------------------------------------------------


class TestSSEEventStream:
    """The SSE handler relays bus events.

    Streaming through httpx + ASGI blocks until the first yield, so the
    bus side is exercised directly and the route is checked for presence.
    """

    async def test_subscriber_receives_resolution(
        self, engine: CommandEngine, event_bus: EventBus
    ):
        queue = await event_bus.subscribe()
        engine.resolve_text("பூனை")

        received = queue.get_nowait()
        data = json.loads(received.model_dump_json())
        assert data["type"] == "resolved"
        assert data["result"]["payload"]["surface_form"] == "பூனை"

    def test_event_stream_route_registered(self, app):
        assert "/events" in [route.path for route in app.routes]

    def test_app_state(self, app, engine: CommandEngine):
        assert app.state.engine is engine
        assert app.state.event_bus is engine.event_bus
        assert app.state.auto_listen is False
