"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
error mapping and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from plantcare.agent.plant_agent import AssistantServiceError
from plantcare.api.routes import router as chat_router
from plantcare.models.schemas import ErrorResponse

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    # Startup
    logger.info("Starting Plant Care Assistant API...")
    yield
    # Shutdown
    logger.info("Shutting down Plant Care Assistant API...")


async def assistant_error_handler(
    request: Request, exc: AssistantServiceError
) -> JSONResponse:
    """Answer assistant errors with an ``{"error": ...}`` body."""
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(error=exc.message).model_dump(),
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="Plant Care Assistant API",
        description=(
            "AI plant care assistant. Answers questions about watering, light, "
            "pests and diseases from text and plant photos, keeping a "
            "multi-turn conversation per session."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    application.add_exception_handler(AssistantServiceError, assistant_error_handler)
    application.include_router(chat_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "plant-care-assistant"}

    return application


app = create_app()
