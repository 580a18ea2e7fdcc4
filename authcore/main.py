"""
FastAPI main application
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from authcore.core.config import get_settings
from authcore.core.logging_config import setup_logging
from authcore.api.router import api_router


logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan events"""
        # Startup - migrations handle database schema
        setup_logging(settings.DEBUG)
        logger.info("Starting %s API...", settings.PROJECT_NAME)
        yield
        logger.info("Shutting down %s API...", settings.PROJECT_NAME)

    app = FastAPI(
        title=f"{settings.PROJECT_NAME} API",
        description=settings.DESCRIPTION,
        version=settings.VERSION,
        lifespan=lifespan
    )

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_HOSTS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix=settings.API_V1_PREFIX)

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {"message": f"{settings.PROJECT_NAME} API", "version": settings.VERSION}

    return app


if __name__ == "__main__":
    uvicorn.run(
        "authcore.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
