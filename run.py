"""Entry point for the catalog API.

Starts the FastAPI application with Uvicorn.  Intended to be executed
from the project root, for example in Docker, where you only specify a
single Python file to run.

Host and port come from ``API_HOST`` and ``API_PORT`` (see
``catalog_api/app/core/config.py`` for all supported variables).

Usage:
    python run.py
"""
import asyncio
import logging

from uvicorn import Config, Server

from catalog_api.app.core.config import settings
from catalog_api.app.main import app


async def run_api() -> None:
    """Serve the API until the process is stopped."""
    config = Config(
        app=app,
        host=settings.api_host,
        port=settings.api_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


async def main() -> None:
    try:
        await run_api()
    except Exception:
        logging.exception("Exception in API server")
        raise


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
