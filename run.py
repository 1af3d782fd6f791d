"""Entry point for serving the Finance Ledger API.

Host and port are read from the ``HOST`` and ``PORT`` environment
variables (defaults ``0.0.0.0`` and ``8000``).  ``SECRET_KEY`` must be
set or startup fails.

Usage:
    SECRET_KEY=... python run.py
"""
import asyncio

from uvicorn import Config, Server

from finance_ledger_api.app.core.config import settings
from finance_ledger_api.app.main import app


async def main() -> None:
    """Serve the API until interrupted."""
    config = Config(
        app=app,
        host=settings.host,
        port=settings.port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
    server = Server(config)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, SystemExit):
        pass
