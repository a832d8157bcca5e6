"""
FastAPI API Service Entry Point
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.responses import Response

from agent.services.pending_meeting_service import PendingMeetingService
from api.middleware.request_logging import RequestLoggingMiddleware
from api.pages import render_page
from api.routes import payments, scheduling
from database.pending_store import DuplicateKeyError, PendingMeetingStore
from shared.booking_client import BookingClient
from shared.logging_config import configure_logging
from shared.startup_validator import StartupValidationError, validate_startup_config

# Configure structured JSON logging on startup
configure_logging()
logger = logging.getLogger(__name__)


def create_app(service: PendingMeetingService | None = None) -> FastAPI:
    """
    Build the application.

    Args:
        service: Pending meeting service to use. When omitted, a fresh
            in-memory store and booking client are created, so every
            application instance has its own pending meetings.
    """
    if service is None:
        service = PendingMeetingService(PendingMeetingStore(), BookingClient())

    app = FastAPI(
        title="Scheduler Payment Gate",
        version="1.0.0",
    )
    app.state.pending_meeting_service = service

    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(scheduling.router, tags=["scheduling"])
    app.include_router(payments.router, tags=["payments"])

    @app.on_event("startup")
    async def startup_config_validation():
        """
        Validate critical configuration at startup.

        Raises:
            StartupValidationError: If critical configuration is invalid
        """
        logger.info("Running API startup configuration validation...")
        try:
            await validate_startup_config()
            logger.info("API startup configuration validation passed")
        except StartupValidationError as e:
            logger.critical(f"API startup blocked due to configuration errors: {e}")
            raise  # FastAPI will fail to start

    @app.exception_handler(DuplicateKeyError)
    async def duplicate_key_handler(request: Request, exc: DuplicateKeyError) -> Response:
        """A second scheduler redirect for the same booking is an internal fault."""
        logger.critical(
            f"Duplicate pending meeting rejected: {exc}",
            extra={"request_path": request.url.path},
        )
        return render_page(request, "error.html", status_code=500)

    @app.get("/health")
    async def health_check(request: Request) -> JSONResponse:
        """Health check endpoint for monitoring."""
        store = request.app.state.pending_meeting_service.store
        return JSONResponse(
            status_code=200,
            content={"status": "healthy", "pending_meetings": len(store)},
        )

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint"""
        return {"message": "Scheduler Payment Gate - Use /health for health checks"}

    return app


app = create_app()
