"""
FastAPI Application Factory.

Usage:
    # Development
    PYTHONPATH=src uvicorn api.app:create_app --factory --reload

    # Production
    PYTHONPATH=src uvicorn api.app:app --host 0.0.0.0 --port 8080 --workers 4

    # Or use the convenience function
    from api.app import create_app
    app = create_app()
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.errors import register_exception_handlers
from config.settings import get_settings
from core.logging import configure_logging, get_logger
from core.middleware import RequestTracingMiddleware


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan handler.

    Configures logging on startup. Model and Algolia clients are built per
    request from the caller's credentials, so there is nothing to warm up.
    """
    settings = get_settings()

    configure_logging(
        json_logs=settings.is_production,
        log_level="DEBUG" if settings.debug else "INFO",
    )

    logger.info(
        "Starting generative relevance API",
        environment=settings.environment,
        port=settings.port,
        default_model=settings.default_model,
    )

    yield

    logger.info("Shutting down generative relevance API")


def create_app() -> FastAPI:
    """
    Create and configure the FastAPI application.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()

    app = FastAPI(
        title="Generative Relevance API",
        description="""
        AI-suggested Algolia index configuration.

        ## Main Endpoints

        - `POST /api/generate-suggestions` - Suggest settings for sample records
        - `POST /api/indices` - Create an index configured with AI suggestions
        - `/api/indices/{indexName}/settings` - Read / update index settings
        - `GET /api/indices/{indexName}/hits` - Browse index records
        - `POST /api/tasks` - Poll Algolia task status
        - `POST /api/configuration-feedback` - Upvote / downvote a suggestion

        All `/api` routes require HTTP Basic authentication.

        ## Health Checks

        - `/health` - Basic health check
        - `/live` - Kubernetes liveness probe
        """,
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.is_development else None,
        redoc_url="/redoc" if settings.is_development else None,
    )

    # =========================================================================
    # Middleware (order matters - first added = outermost)
    # =========================================================================

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Request tracing (adds X-Request-ID, logs timing)
    app.add_middleware(RequestTracingMiddleware)

    register_exception_handlers(app)

    # =========================================================================
    # Routes
    # =========================================================================

    from api.routes.health import router as health_router
    app.include_router(health_router)

    from api.routes.suggestions import router as suggestions_router
    app.include_router(suggestions_router)

    from api.routes.indices import router as indices_router
    app.include_router(indices_router)

    from api.routes.tasks import router as tasks_router
    app.include_router(tasks_router)

    from api.routes.feedback import router as feedback_router
    app.include_router(feedback_router)

    return app


# Create default app instance for uvicorn
# Usage: uvicorn api.app:app
app = create_app()
