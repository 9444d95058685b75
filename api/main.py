"""
API Application Entry Point

Defines the FastAPI application serving the provider login endpoints.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.config import get_settings, EnvironmentType
from api.utils.error_handlers import add_exception_handlers
from api.routes import auth

settings = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger("api")


def create_application() -> FastAPI:
    """
    Create and configure FastAPI application instance.

    Returns:
        Configured FastAPI application
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.API_TITLE,
        description=settings.API_DESCRIPTION,
        version=settings.API_VERSION,
        docs_url="/docs" if settings.ENVIRONMENT != EnvironmentType.PRODUCTION else None,
        redoc_url="/redoc" if settings.ENVIRONMENT != EnvironmentType.PRODUCTION else None,
        debug=settings.DEBUG
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    add_exception_handlers(app)

    app.include_router(auth.router)

    @app.get("/health", tags=["Monitoring"])
    async def health_check():
        """API health check endpoint."""
        return {"status": "healthy"}

    logger.info(f"Application initialized in {settings.ENVIRONMENT.value} environment")
    return app


# Create application instance
app = create_application()
