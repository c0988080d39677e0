"""
Main entrypoint for the Church Portal API.

This module assembles the FastAPI application, sets up logging, error
handlers and versioned routers.  ``create_app`` builds and configures
the app; a default instance is created at import time as ``app`` so it
can be served directly, e.g.::

    uvicorn church_portal_api.app.main:app --reload

Each application owns its repository.  Pass a ``Storage`` to
``create_app`` to choose one (tests use a fresh ``MemStorage`` per
test); otherwise a new ``MemStorage`` is created.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from .api.v1.router import router as v1_router
from .core.config import settings
from .core.errors import install_exception_handlers
from .core.logging_config import setup_logging
from .core.storage import MemStorage, Storage
from .services.user_service import UserService


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    # Memory storage starts empty, so the configured administrator is
    # (re)created on every start.
    if settings.admin_username and settings.admin_password:
        await UserService.ensure_admin(
            app.state.storage,
            settings.admin_username,
            settings.admin_password,
            settings.admin_email,
        )
    logger.info("%s %s started", settings.project_name, settings.api_version)
    yield


def create_app(storage: Optional[Storage] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    storage : Optional[Storage]
        Repository used by every route of this application.  Defaults to
        a new, empty ``MemStorage``.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Initialise logging before anything else so that the modules below
    # can safely log messages.
    setup_logging(
        settings.log_level,
        settings.log_file or None,
        fmt=settings.log_format,
        datefmt=settings.log_date_format,
    )

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.storage = storage if storage is not None else MemStorage()
    # ``jti`` -> ``exp`` of tokens revoked through /logout.
    app.state.revoked_tokens = {}

    install_exception_handlers(app)
    app.include_router(v1_router, prefix=settings.api_prefix)
    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
