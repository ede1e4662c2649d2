"""
Main entrypoint for the Catalog API.

This module assembles the FastAPI application: it sets up logging,
builds the document store, the mail transport and the record services,
and includes the REST and GraphQL routers.  ``create_app`` builds the
app, which is then instantiated at module import time as ``app`` so
that it can be run with uvicorn, e.g.::

    uvicorn catalog_api.app.main:app --reload

Services live on ``app.state`` and reach the route handlers through
the dependencies in ``api.deps``.
"""

import logging
import sqlite3
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse

from .api.graphql import create_graphql_router
from .api.v1.router import router as v1_router
from .core.config import Settings, settings as default_settings
from .core.db import create_store, init_db
from .core.logging_config import setup_logging
from .core.mail import Mailer
from .core.security import build_users
from .services.film_service import FilmService
from .services.song_service import SongService

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use.  Defaults to the settings read from the
        environment at import time; tests pass their own instance.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    settings = settings or default_settings

    # Initialise logging before anything else so that the setup below
    # can log.
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)

    store = create_store(settings)
    mailer = Mailer(settings)
    app.state.settings = settings
    app.state.users = build_users(settings)
    app.state.store = store
    app.state.film_service = FilmService(store, mailer)
    app.state.song_service = SongService(store, mailer)

    app.include_router(v1_router, prefix="/api")
    app.include_router(create_graphql_router(), prefix="/graphql")

    @app.exception_handler(sqlite3.Error)
    async def database_error_handler(request: Request, exc: sqlite3.Error) -> PlainTextResponse:
        logger.exception("Database error on %s %s", request.method, request.url.path)
        return PlainTextResponse("Internal Server Error", status_code=500)

    @app.on_event("startup")
    async def startup_event() -> None:
        # Creates the tables and indexes if missing; the in-memory store
        # is already seeded by ``create_store``.
        if not settings.mock_db:
            init_db(store, populate=settings.db_populate)
        logger.info("%s %s started", settings.project_name, settings.api_version)

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
