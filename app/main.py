"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.exceptions import AppException
from app.core.logging import setup_logging
from app.db.mongodb import close_mongodb, connect_mongodb, get_mongodb
from app.db.redis import close_redis, connect_redis, get_redis
from app.dependencies.services import NpsServices, build_mongo_services
from app.domains.events.router import router as events_router
from app.domains.response.router import router as response_router
from app.domains.scoring.router import router as scoring_router
from app.domains.survey.router import router as survey_router
from app.domains.survey_config.router import router as config_router
from app.integrations.mail import get_email_transport
from app.middlewares.security import RateLimitMiddleware, SecurityHeadersMiddleware
from app.sockets.broadcast import SocketIOBroadcaster
from app.sockets.server import sio

logger = logging.getLogger(__name__)


def create_app(services: NpsServices | None = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        services: Pre-wired services. When omitted, MongoDB and Redis are
            connected on startup and the production services are built.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator:
        """Application lifespan events."""
        # Startup
        setup_logging()
        logger.info(f"Starting NPS Surveys in {settings.environment} mode...")

        if services is not None:
            app.state.nps = services
            yield
            return

        await connect_mongodb()
        await connect_redis()
        app.state.nps = build_mongo_services(
            get_mongodb(),
            get_redis(),
            transport=get_email_transport(),
            broadcaster=SocketIOBroadcaster(sio),
        )

        yield

        # Shutdown
        logger.info("Shutting down NPS Surveys...")
        await close_mongodb()
        await close_redis()

    app = FastAPI(
        title="NPS Surveys",
        description="Net Promoter Score surveys for resolved helpdesk tickets",
        version="0.1.0",
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
        lifespan=lifespan,
    )
    if services is not None:
        app.state.nps = services

    # Security middlewares (order matters: first added = last executed)
    app.add_middleware(SecurityHeadersMiddleware)

    # Rate limiting (only in production)
    if settings.is_production:
        app.add_middleware(RateLimitMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "OPTIONS"],
        allow_headers=["Authorization", "Content-Type", "X-API-Key"],
        expose_headers=["X-RateLimit-Limit", "X-RateLimit-Remaining"],
    )

    # Exception handlers
    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException):
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "error": {
                    "code": exc.error_code,
                    "message": exc.message,
                    "details": exc.details,
                }
            },
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        if settings.is_development:
            return JSONResponse(
                status_code=500,
                content={
                    "error": {
                        "code": "INTERNAL_ERROR",
                        "message": str(exc),
                        "details": {"type": type(exc).__name__},
                    }
                },
            )
        return JSONResponse(
            status_code=500,
            content={
                "error": {
                    "code": "INTERNAL_ERROR",
                    "message": "An unexpected error occurred",
                }
            },
        )

    # Health check endpoint
    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "environment": settings.environment}

    # API info endpoint
    @app.get("/")
    async def root():
        return {
            "name": "NPS Surveys API",
            "version": "0.1.0",
            "docs": "/docs" if settings.is_development else None,
        }

    # Register routers
    _register_routers(app)

    return app


def _register_routers(app: FastAPI) -> None:
    """Register all API routers."""
    api_prefix = settings.api_prefix

    app.include_router(events_router, prefix=api_prefix, tags=["Host Events"])
    app.include_router(survey_router, prefix=api_prefix, tags=["Surveys"])
    app.include_router(config_router, prefix=api_prefix, tags=["Config"])
    app.include_router(scoring_router, prefix=api_prefix, tags=["Reports"])
    app.include_router(response_router, prefix=api_prefix, tags=["Responses"])
