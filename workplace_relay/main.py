"""
FastAPI Application Entry Point

This module creates and configures the FastAPI application.
It sets up all routes, middleware, and exception handlers.

Design Decisions:
- Use lifespan events to own the shared HTTP client
- Warn at startup about insecure or incomplete configuration
- Keep the settings on app.state for route dependencies
- Map downstream failures to 502 and missing configuration to 500
- Expose health check endpoints
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import httpx
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from workplace_relay import __version__
from workplace_relay.config import Settings, SignatureMode, get_settings
from workplace_relay.logging_config import get_logger, setup_logging
from workplace_relay.services.errors import ConfigurationMissingError, DownstreamError
from workplace_relay.webhook import router as webhook_router

# Initialize logging first
setup_logging()

logger = get_logger(__name__)


def _log_configuration(settings: Settings) -> None:
    """Log the security-relevant configuration choices."""
    if settings.signature_mode is SignatureMode.DISABLED:
        logger.warning(
            "AppSecret not configured, payload signature verification is disabled"
        )
    else:
        logger.info("Payload signature verification enabled")

    if not settings.verification_token:
        logger.warning("VerificationToken not configured, handshakes will be rejected")

    if not settings.access_token:
        logger.warning("AccessToken not configured, Graph lookups will fail")

    if not settings.slack_configured:
        logger.warning("SlackWebhookUri not configured, notifications cannot be forwarded")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Settings to use; defaults to the cached environment settings

    Returns:
        Configured FastAPI application instance
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Create the shared HTTP client and validate configuration."""
        logger.info(
            "Starting Workplace relay",
            host=settings.host,
            port=settings.port
        )
        _log_configuration(settings)

        app.state.http_client = httpx.AsyncClient(timeout=settings.http_timeout)
        try:
            yield
        finally:
            await app.state.http_client.aclose()
            logger.info("Shutting down Workplace relay")

    app = FastAPI(
        title="Workplace Relay",
        description="Relays Workplace group posts to a Slack incoming webhook",
        version=__version__,
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json"
    )

    # Routes read the settings this application was built with
    app.state.settings = settings

    app.include_router(webhook_router)

    @app.exception_handler(DownstreamError)
    async def downstream_exception_handler(
        request: Request,
        exc: DownstreamError
    ) -> JSONResponse:
        """Report a failed Graph or Slack call."""
        logger.error(
            "Downstream call failed",
            path=request.url.path,
            error=str(exc),
            error_type=type(exc).__name__,
            status_code=exc.status_code
        )
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"detail": str(exc), "type": type(exc).__name__}
        )

    @app.exception_handler(ConfigurationMissingError)
    async def configuration_exception_handler(
        request: Request,
        exc: ConfigurationMissingError
    ) -> JSONResponse:
        """Report a missing required setting."""
        logger.error(
            "Required configuration missing",
            path=request.url.path,
            error=str(exc)
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": str(exc), "type": type(exc).__name__}
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(
        request: Request,
        exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.error(
            "Unhandled exception",
            path=request.url.path,
            method=request.method,
            error=str(exc),
            error_type=type(exc).__name__
        )

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "Internal server error",
                "type": type(exc).__name__
            }
        )

    @app.get("/")
    async def root():
        """Root endpoint with basic info."""
        return {
            "name": "Workplace Relay",
            "version": __version__,
            "status": "running",
            "docs": "/docs"
        }

    @app.get("/health")
    async def health_check():
        """
        Health check endpoint.

        Returns basic health status for load balancers and monitors.
        """
        return {
            "status": "healthy",
            "service": "workplace-relay",
            "version": __version__
        }

    @app.get("/ready")
    async def readiness_check():
        """
        Readiness check endpoint.

        The relay is ready once it has somewhere to forward notifications.
        """
        if not settings.slack_configured:
            logger.error("Readiness check failed", reason="SlackWebhookUri not configured")
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Not ready: SlackWebhookUri not configured"
            )

        return {
            "status": "ready",
            "service": "workplace-relay",
            "signature_mode": settings.signature_mode.value
        }

    return app


# Create the application instance
app = create_app()
