"""
Pastebin - Main FastAPI application.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pastebin.config import Settings, settings as default_settings
from pastebin.lifecycle import Lifecycle
from pastebin.reaper import Reaper
from pastebin.routes import health, pastes, web
from pastebin.store import connect

# Configure logging
logging.basicConfig(
    level=default_settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open storage and run the reaper for the lifetime of the app."""
    settings = app.state.settings
    logger.info("Pastebin application starting...")

    # A storage failure here aborts startup
    store = connect(settings)
    lifecycle = Lifecycle(Reaper(store), settings.REAP_INTERVAL_SECONDS)
    app.state.store = store
    app.state.lifecycle = lifecycle
    lifecycle.start()
    try:
        yield
    finally:
        logger.info("Pastebin application shutting down...")
        lifecycle.stop(timeout=settings.REAP_INTERVAL_SECONDS + 5)
        store.close()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application. Storage is opened on startup, not here."""
    settings = settings or default_settings

    app = FastAPI(
        title="Pastebin",
        description="Share text snippets through short, expiring links",
        version="1.0.0",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # Add CORS middleware (optional, for cross-origin requests)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(pastes.router)
    app.include_router(web.router)

    return app


app = create_app()
