"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from artwork_agent.api.models import (
    AnalyzeResponse,
    ArtworkPayload,
    IdentificationPayload,
)
from artwork_agent.api.session import router as session_router
from artwork_agent.app_logging import configure_logging
from artwork_agent.containers import AppContainer
from artwork_agent.domain.errors import (
    ConfigurationError,
    UpstreamError,
    ValidationError,
)
from artwork_agent.domain.images import ImagePayload
from artwork_agent.services.artworks import build_artwork_context

SERVICE_NAME = "artwork-agent"

_INVALID_IMAGE_DATA = (
    "Invalid request: imageData is required and must be a base64 string"
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        try:
            await app.state.container.close_resources()
        except Exception:
            logger.exception("Failed to close resources")

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    app.include_router(session_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {
            "status": "ok",
            "service": SERVICE_NAME,
            "timestamp": datetime.now(tz=UTC).isoformat(),
        }

    @app.post("/analyze", response_model=None)
    async def analyze(request: Request) -> JSONResponse:
        """Identify the artwork in a base64 image."""
        state_container: AppContainer = request.app.state.container
        try:
            body = await request.json()
        except ValueError:
            return _error_response(400, _INVALID_IMAGE_DATA)
        image_data = body.get("imageData") if isinstance(body, dict) else None
        if not isinstance(image_data, str) or not image_data:
            return _error_response(400, _INVALID_IMAGE_DATA)

        logger.info("Starting artwork identification")
        try:
            record = await state_container.identification_service.identify(
                ImagePayload.from_base64(image_data)
            )
        except ValidationError as exc:
            return _error_response(400, exc.message)
        except ConfigurationError as exc:
            logger.error(
                "Vision model is misconfigured", extra={"detail": exc.detail}
            )
            return _error_response(500, exc.message, details=exc.detail)
        except UpstreamError as exc:
            logger.warning(
                "Artwork identification failed", extra={"detail": exc.detail}
            )
            return _error_response(500, exc.message, details=exc.detail)

        entry = state_container.catalog.lookup(record.name, record.artist)
        context = build_artwork_context(record, entry)
        response = AnalyzeResponse(
            identification=IdentificationPayload.from_record(record),
            artwork=ArtworkPayload.from_context(context),
        )
        return JSONResponse(response.to_json_dict())

    return app


def _error_response(
    status_code: int, error: str, details: str | None = None
) -> JSONResponse:
    content: dict[str, str] = {"error": error}
    if details:
        content["details"] = details
    return JSONResponse(content, status_code=status_code)
