"""
Main entrypoint for the Finance Ledger API.

This module assembles the FastAPI application: logging, exception
handlers, versioned routers and the lifespan hook that applies database
migrations.  The app is instantiated at import time as ``app`` so it
can be served directly::

    uvicorn finance_ledger_api.app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.db import init_db
from .core.errors import register_exception_handlers
from .core.logging_config import setup_logging


logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    setup_logging(settings.log_level, settings.log_file or None)

    @asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        # Tokens can be neither issued nor checked without a secret.
        if not settings.secret_key:
            raise RuntimeError("SECRET_KEY must be set before starting the API")
        init_db()
        logger.info("%s %s started", settings.project_name, settings.api_version)
        yield

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    register_exception_handlers(app)
    app.include_router(v1_router, prefix="/api/v1")

    return app


app = create_app()
