"""
Habba Registration API Server

Entry point for the FastAPI application.
"""

import structlog
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import get_registration_policy, get_settings
from app.core.database import ping_db
from app.core.logging import configure_logging
from app.core.middleware import RequestContextMiddleware
from app.services.notifications import FcmTopicSubscriber
from app.api.v1 import router as api_v1_router

settings = get_settings()
log = structlog.get_logger()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    configure_logging(settings.log_level, settings.log_format)

    app = FastAPI(
        title="Habba Registrations",
        description="Event registration for the Habba college festival.",
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    app.state.topic_subscriber = FcmTopicSubscriber(
        access_token=settings.fcm_access_token,
        iid_url=settings.fcm_iid_url,
        timeout=settings.fcm_timeout_seconds,
    )

    # Middleware (outermost first)
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type", "user_id", "X-Request-ID"],
    )

    # API routes
    app.include_router(api_v1_router, prefix="/api/v1")

    @app.get("/health", tags=["System"])
    async def health_check():
        """Health check endpoint for liveness probes."""
        return {"status": "ok"}

    @app.get("/ready", tags=["System"])
    async def readiness_check():
        """Readiness check endpoint: the database must answer."""
        try:
            await ping_db()
        except (SQLAlchemyError, OSError) as exc:
            log.warning("readiness.db_unreachable", error=str(exc))
            return JSONResponse(status_code=503, content={"status": "unavailable"})
        return {"status": "ready"}

    @app.on_event("startup")
    async def on_startup():
        policy = get_registration_policy()
        log.info(
            "habba.starting",
            faculty_only_events=len(policy.faculty_only_events),
            restricted_events=len(policy.restricted_affiliation_events),
        )
        await app.state.topic_subscriber.open()

    @app.on_event("shutdown")
    async def on_shutdown():
        log.info("habba.shutting_down")
        await app.state.topic_subscriber.close()

    return app


app = create_app()


def run():
    """Serve the API with uvicorn on the configured host and port."""
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
