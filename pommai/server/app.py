"""FastAPI application factory for Pommai.

``create_app()`` builds the trigger registry, the event bus and the command
engine, and attaches them to ``app.state``.  The lifespan starts listening
on startup (unless ``POMMAI_AUTO_LISTEN`` is off) and releases the
recognizer on shutdown.
"""

import logging
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import FastAPI

from pommai import __version__
from pommai.config import AUTO_LISTEN, VOCAB_PATH
from pommai.engine import CommandEngine
from pommai.server.routes import router
from pommai.session.errors import InitializationError
from pommai.vocab.loader import load_registry

logger = logging.getLogger(__name__)


async def start_listening(app: FastAPI) -> bool:
    """Start the engine, recording an initialization failure on app state."""
    engine: CommandEngine = app.state.engine
    try:
        await engine.start()
    except InitializationError as exc:
        app.state.init_error = str(exc)
        logger.error("Speech recognition unavailable: %s", exc)
        return False
    app.state.init_error = None
    return True


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    logger.info("Pommai server starting up")
    if app.state.auto_listen:
        await start_listening(app)
    try:
        yield
    finally:
        logger.info("Pommai server shutting down")
        await app.state.engine.close()


def create_app(
    engine: CommandEngine | None = None,
    *,
    vocab_path: Path | None = VOCAB_PATH,
    auto_listen: bool = AUTO_LISTEN,
) -> FastAPI:
    """Build and return a fully-configured FastAPI application.

    The returned app has:
    * ``app.state.event_bus``: the bus the engine publishes on
    * ``app.state.engine``: the :class:`CommandEngine`
    * ``app.state.init_error``: last initialization failure, or None
    * the ``/health``, ``/resolve``, ``/triggers``, ``/listen/*`` and
      ``/events`` routes
    """
    app = FastAPI(title="Pommai", version=__version__, lifespan=lifespan)

    if engine is None:
        from pommai.stt.whisper_recognizer import WhisperRecognizer

        engine = CommandEngine(WhisperRecognizer(), load_registry(vocab_path))

    app.state.event_bus = engine.event_bus
    app.state.engine = engine
    app.state.init_error = None
    app.state.auto_listen = auto_listen

    app.include_router(router)

    logger.info("FastAPI app created (%d triggers)", len(engine.registry))
    return app
