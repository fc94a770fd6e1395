"""HTTP routes for the Pommai server.

Endpoints
---------
GET  /health        Version, session state, trigger counts and the last
                    initialization error, if any.

POST /resolve       Resolve a typed transcript: ``{"text": "..."}``.

GET  /triggers      List registry entries, optionally filtered by
                    ``?category=command|letter|word``.

POST /listen/start  Declare listening intent (initializes the recognizer on
                    first use).

POST /listen/stop   Withdraw listening intent.

GET  /events        Streams transcript, resolved and session-error events as
                    Server-Sent Events.
"""

import asyncio
import logging

from fastapi import APIRouter, Request
from sse_starlette.sse import EventSourceResponse

from pommai import __version__
from pommai.engine import CommandEngine
from pommai.events.event_bus import EventBus
from pommai.resolver.types import TriggerCategory
from pommai.session.errors import InitializationError

logger = logging.getLogger(__name__)

router = APIRouter()


def _get_engine(request: Request) -> CommandEngine:
    return request.app.state.engine


def _get_event_bus(request: Request) -> EventBus:
    return request.app.state.event_bus


# ---------------------------------------------------------------------------
# GET /health
# ---------------------------------------------------------------------------


@router.get("/health")
async def health(request: Request) -> dict:
    """Return server health information.

    Used by the CLI ``status`` command.
    """
    engine = _get_engine(request)
    snapshot = engine.snapshot()
    return {
        "status": "ok",
        "version": __version__,
        "session_status": snapshot.status.value,
        "desired_listening": snapshot.desired_listening,
        "restart_pending": snapshot.restart_pending,
        "recognizer_initialized": snapshot.initialized,
        "init_error": getattr(request.app.state, "init_error", None),
        "triggers": engine.registry.counts(),
        "subscribers": _get_event_bus(request).subscriber_count,
    }


# ---------------------------------------------------------------------------
# POST /resolve
# ---------------------------------------------------------------------------


@router.post("/resolve")
async def resolve(request: Request) -> dict:
    """Resolve a transcript without going through the recognizer."""
    try:
        body = await request.json()
    except Exception:
        return {"status": "error", "reason": "invalid json"}

    text = body.get("text") if isinstance(body, dict) else None
    if not isinstance(text, str) or not text.strip():
        return {"status": "error", "reason": "text is required"}

    result = _get_engine(request).resolve_text(text)
    return {"status": "ok", "transcript": text, "result": result.model_dump(mode="json")}


# ---------------------------------------------------------------------------
# GET /triggers
# ---------------------------------------------------------------------------


@router.get("/triggers")
async def triggers(request: Request, category: str | None = None) -> dict:
    registry = _get_engine(request).registry
    if category is None:
        entries = list(registry)
    else:
        try:
            entries = registry.by_category(TriggerCategory(category))
        except ValueError:
            return {"status": "error", "reason": f"unknown category {category!r}"}

    return {
        "status": "ok",
        "count": len(entries),
        "triggers": [e.model_dump(mode="json") for e in entries],
    }


# ---------------------------------------------------------------------------
# POST /listen/start, POST /listen/stop
# ---------------------------------------------------------------------------


@router.post("/listen/start")
async def listen_start(request: Request) -> dict:
    engine = _get_engine(request)
    try:
        await engine.start()
    except InitializationError as exc:
        request.app.state.init_error = str(exc)
        logger.error("Cannot start listening: %s", exc)
        return {"status": "error", "reason": str(exc)}

    request.app.state.init_error = None
    return {"status": "ok", "session_status": engine.snapshot().status.value}


@router.post("/listen/stop")
async def listen_stop(request: Request) -> dict:
    engine = _get_engine(request)
    engine.stop()
    return {"status": "ok", "session_status": engine.snapshot().status.value}


# ---------------------------------------------------------------------------
# GET /events  (Server-Sent Events)
# ---------------------------------------------------------------------------


@router.get("/events")
async def event_stream(request: Request) -> EventSourceResponse:
    """Stream engine events as Server-Sent Events.

    Each SSE message has:
    * ``event``: the event type (``transcript``, ``resolved``,
      ``session_error``)
    * ``data``: the full event serialised as a JSON string
    """
    event_bus = _get_event_bus(request)

    async def _generate():
        queue = await event_bus.subscribe()
        try:
            while True:
                if await request.is_disconnected():
                    logger.debug("SSE client disconnected")
                    break
                try:
                    event = await asyncio.wait_for(queue.get(), timeout=15.0)
                except asyncio.TimeoutError:
                    yield {"comment": "ping"}
                    continue
                yield {"event": event.type.value, "data": event.model_dump_json()}
        except asyncio.CancelledError:
            logger.debug("SSE stream cancelled")
        finally:
            await event_bus.unsubscribe(queue)
            logger.debug("SSE subscriber cleaned up")

    return EventSourceResponse(_generate())
