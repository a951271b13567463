"""
Business Portal API Server

Entry point for the FastAPI application.
"""

from contextlib import asynccontextmanager

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bizportal.api import router as api_router
from bizportal.core.config import get_settings
from bizportal.core.database import engine, get_session_context, init_db
from bizportal.core.errors import register_error_handlers
from bizportal.core.logging import configure_logging
from bizportal.core.middleware import RequestLogMiddleware, SecurityHeadersMiddleware
from bizportal.services.users import ensure_ceo

settings = get_settings()
log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    log.info("portal.starting", debug=settings.debug)
    await init_db()
    async with get_session_context() as session:
        await ensure_ceo(session, settings)
    yield
    log.info("portal.shutting_down")
    await engine.dispose()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging(settings.log_level, settings.log_format)

    app = FastAPI(
        title="Business Portal",
        description="CEO, employee and client portal: directory, projects and timesheets.",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )

    # Middleware (last added is outermost)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLogMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "Authorization"],
    )

    register_error_handlers(app)

    app.include_router(api_router, prefix="/api")

    @app.get("/health", tags=["System"])
    async def health_check():
        """Health check endpoint for liveness probes."""
        return {"status": "ok"}

    @app.get("/ready", tags=["System"])
    async def readiness_check():
        """Readiness check endpoint for startup probes."""
        return {"status": "ready"}

    return app


app = create_app()


def run() -> None:
    uvicorn.run(
        "bizportal.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )


if __name__ == "__main__":
    run()
