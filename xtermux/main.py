"""
Application entry point: builds the FastAPI app and runs it under uvicorn.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from xtermux import __version__
from xtermux.api import admin, ai, catalog, fast_api, guides
from xtermux.api.ai_proxy import AIProxy
from xtermux.api.models import HealthResponse
from xtermux.database.config.config import Settings, settings as default_settings
from xtermux.database.core.db import Database
from xtermux.logger import configure_logging

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, ai_client: Optional[Any] = None) -> FastAPI:
    """
    Build the application.

    Parameters
    ----------
    settings : Settings, optional
        Defaults to the module-level settings loaded from the environment.
    ai_client : optional
        An OpenAI-compatible client to use instead of the one built from
        the settings.
    """
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db = Database(settings.database_url)
        db.create_all()
        app.state.db = db
        if ai_client is not None:
            app.state.ai_proxy = AIProxy(ai_client, default_model=settings.AI_DEFAULT_MODEL, max_tokens=settings.AI_MAX_TOKENS)
        else:
            app.state.ai_proxy = AIProxy.from_settings(settings)
        logger.info("XTermux API %s started in %s mode", __version__, settings.INIT_MODE)
        yield
        db.dispose()
        logger.info("XTermux API shutdown")

    app = FastAPI(title="XTermux API", version=__version__, lifespan=lifespan)
    app.state.settings = settings

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.FRONTEND_URL],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(fast_api.router)
    app.include_router(admin.router)
    app.include_router(ai.router)
    app.include_router(catalog.router)
    app.include_router(guides.router)

    @app.get("/health", response_model=HealthResponse)
    def health():
        return HealthResponse(
            status="ok",
            database=app.state.db.ping(),
            ai_configured=app.state.ai_proxy.configured,
        )

    return app


app = create_app()


def run() -> None:
    uvicorn.run("xtermux.main:app", host=default_settings.HOST, port=default_settings.PORT)


if __name__ == "__main__":
    run()
