"""Entry point for serving the Score Archive API.

Launches the FastAPI application with Uvicorn.  Host, port and every
other option are read from environment variables (see
``score_archive_api/app/core/config.py``), for example ``HOST``,
``PORT``, ``DATABASE_URL`` and ``LOG_LEVEL``.

Usage:
    python run.py
"""
import asyncio

from uvicorn import Config, Server

from score_archive_api.app.core.config import settings
from score_archive_api.app.main import app


async def main() -> None:
    """Serve the archive API until interrupted."""
    config = Config(app=app, host=settings.host, port=settings.port, reload=False, log_level=settings.log_level.lower())
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
