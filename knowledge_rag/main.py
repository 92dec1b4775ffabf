"""
FastAPI application entry point.

Initializes FastAPI app, registers routers, adds middleware, and configures lifespan.

Dependencies: fastapi, knowledge_rag.api, knowledge_rag.observability, knowledge_rag.configs
System role: Application initialization and configuration
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from knowledge_rag.api import api_router
from knowledge_rag.api.deps import get_service_cache
from knowledge_rag.configs import get_settings
from knowledge_rag.observability.logger import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Configures logging on startup and drops cached services on shutdown.
    Services are built lazily on first request.
    """
    configure_logging()
    settings = get_settings()
    logger.info(
        f"Application startup: environment={settings.environment}, "
        f"store={settings.retrieval.store_type}, chat_model={settings.providers.chat_model}"
    )

    yield

    get_service_cache().clear()
    logger.info("Application shutdown")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    app = FastAPI(
        title="Knowledge Base RAG API",
        description="Organization knowledge base Q&A with hybrid retrieval and cited answers",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Conversation-Id"],
    )

    app.include_router(api_router, prefix="/api/v1")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "knowledge_rag.main:app",
        host="localhost",
        port=8082,
        reload=get_settings().debug,
    )
