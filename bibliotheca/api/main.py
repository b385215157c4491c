"""
Bibliotheca API

FastAPI application entry point.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from fastapi import Depends, FastAPI
from pymongo.errors import PyMongoError

from .schemas import HealthResponse
from .routes import books_router, users_router, genres_router, comments_router
from .middleware import (
    setup_cors,
    setup_logging,
    setup_exception_handlers,
    LoggingConfig,
    get_cors_config,
)
from .dependencies import (
    get_database,
    get_settings,
    init_services,
    reset_services,
    Settings,
)
from bibliotheca.storage import MongoDatabase


VERSION = "1.0.0"

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# =============================================================================
# Application Lifespan
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Handles startup and shutdown tasks:
    - Build the database handle and repositories
    - Ensure indexes
    - Close the client on shutdown
    """
    settings = getattr(app.state, "settings", None) or get_settings()
    logger.info(f"Starting Bibliotheca in {settings.environment} mode")

    services = init_services(settings)
    app.state.services = services

    try:
        try:
            await services.database.ensure_indexes()
        except PyMongoError as e:
            # Serve anyway; requests will answer 503 until the store is back
            logger.error(f"Failed to ensure indexes: {e}")

        logger.info("Bibliotheca started successfully")

        yield

    finally:
        logger.info("Shutting down Bibliotheca...")
        await services.database.close()
        reset_services()
        logger.info("Shutdown complete")


# =============================================================================
# Application Factory
# =============================================================================

def create_app(settings: Settings = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        settings: Application settings. If None, loads from environment.

    Returns:
        Configured FastAPI application.
    """
    if settings is None:
        settings = get_settings()

    app = FastAPI(
        title="Bibliotheca",
        description="Library catalog: books, users, genres and reviews.",
        version=VERSION,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
        openapi_url="/openapi.json" if settings.debug else None,
        lifespan=lifespan,
    )
    app.state.settings = settings

    # ==========================================================================
    # Middleware (order matters - first added = innermost)
    # ==========================================================================

    setup_logging(
        app,
        config=LoggingConfig(
            enabled=True,
            log_request_body=settings.debug,
        ),
        structured=settings.environment != "development",
    )

    setup_exception_handlers(app)

    setup_cors(app, config=get_cors_config(settings.environment))

    # ==========================================================================
    # Routers
    # ==========================================================================

    api_prefix = "/api"

    app.include_router(books_router, prefix=api_prefix)
    app.include_router(users_router, prefix=api_prefix)
    app.include_router(genres_router, prefix=api_prefix)
    app.include_router(comments_router, prefix=api_prefix)

    # ==========================================================================
    # Root Routes
    # ==========================================================================

    @app.get("/", include_in_schema=False)
    async def root():
        """Root endpoint with API info."""
        return {
            "name": "Bibliotheca",
            "version": VERSION,
            "status": "running",
            "docs": "/docs" if settings.debug else None,
        }

    @app.get("/health", response_model=HealthResponse, tags=["System"])
    async def health_check(database: MongoDatabase = Depends(get_database)) -> HealthResponse:
        """
        Health check endpoint.

        Returns status of the document store.
        """
        reachable = await database.ping()

        return HealthResponse(
            status="healthy" if reachable else "degraded",
            version=VERSION,
            components={"database": "healthy" if reachable else "unreachable"},
        )

    return app


# =============================================================================
# Application Instance
# =============================================================================

app = create_app()


# =============================================================================
# CLI Entry Point
# =============================================================================

def main():
    """Run the application using uvicorn."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "bibliotheca.api.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    main()
