"""FastAPI application: client intake portal API.

The wizard frontend and the operator dashboard talk to the portal
exclusively through this API.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from core import __version__
from src.config.settings import PortalSettings, load_settings
from src.intake.errors import IntakeError

from .context import PortalContext, build_context
from .routers import admin, projects, reminders, steps, uploads

logger = logging.getLogger(__name__)


def create_app(
    settings: Optional[PortalSettings] = None,
    context: Optional[PortalContext] = None,
) -> FastAPI:
    """Build the app; tests pass a ready ``context`` with fake transports."""
    if context is not None:
        settings = context.settings
    settings = settings or load_settings()
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = FastAPI(
        title="Client Intake Portal API",
        version=__version__,
        description="Seven-step web-site intake wizard with uploads, notifications and reminders",
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.context = context or build_context(settings)

    # -----------------------------------------------------------------------
    # CORS
    # -----------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=3600,
    )

    # -----------------------------------------------------------------------
    # Errors
    # -----------------------------------------------------------------------
    @app.exception_handler(IntakeError)
    async def intake_error_handler(request: Request, exc: IntakeError):
        if exc.http_status >= 500:
            logger.error("Unhandled portal error on %s: %s", request.url.path, exc)
        return JSONResponse(status_code=exc.http_status, content={"detail": exc.to_detail()})

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------
    app.include_router(steps.router, prefix="/v1", tags=["steps"])
    app.include_router(projects.router, prefix="/v1", tags=["projects"])
    app.include_router(uploads.router, prefix="/v1", tags=["uploads"])
    app.include_router(reminders.router, prefix="/v1", tags=["reminders"])
    app.include_router(admin.router, prefix="/v1", tags=["admin"])

    # -----------------------------------------------------------------------
    # Health Check
    # -----------------------------------------------------------------------
    @app.get("/health")
    async def health():
        return {"status": "ok", "version": __version__}

    @app.get("/")
    async def root():
        return {"message": settings.brand, "docs": "/docs"}

    return app


app = create_app()
