"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from docassist.adapter.chat_adapter import get_chat_adapter
from docassist.adapter.vision import get_vision_service
from docassist.api.chat import router as chat_router
from docassist.api.images import router as images_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown lifecycle.

    Logs which providers the environment selected.

    Args:
        app: The FastAPI application instance.

    Yields:
        Control to the application while it runs.
    """
    # Startup
    logger.info("Starting Document Assistant API...")
    provider = get_chat_adapter().provider
    if provider is None:
        logger.warning("No GROQ_API_KEY or OPENAI_API_KEY set; chat replies will be placeholders")
    else:
        logger.info(f"Chat provider: {provider.name} ({provider.model})")
    if not get_vision_service().enabled:
        logger.info("Vision analysis disabled; image uploads get placeholder descriptions")
    yield
    # Shutdown
    logger.info("Shutting down Document Assistant API...")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application instance.
    """
    application = FastAPI(
        title="Document Assistant API",
        description=(
            "Chat backend for a document assistant. Adapts chat widget requests "
            "to a single chat-completion call, grounding answers in the uploaded "
            "documents supplied as context, and describes uploaded images when a "
            "vision-capable model is configured."
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

    application.include_router(chat_router)
    application.include_router(images_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "docassist"}

    return application


app = create_app()
