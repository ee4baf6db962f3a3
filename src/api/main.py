"""FastAPI application entry point."""

import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from src.api.config import get_api_settings
from src.api.routes import assignments, experiments, health, metrics
from src.api.services.experiment_service import experiment_service
from src.config import settings

api_settings = get_api_settings()


def configure_logging(debug: bool = False) -> None:
    """Configure the loguru sink.

    Debug mode lowers the level and adds the source location to each line.
    """
    logger.remove()
    if debug:
        logger.add(
            sys.stderr,
            level="DEBUG",
            format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {file}:{line} - {message}",
        )
    else:
        logger.add(sys.stderr, level=settings.log_level)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler.

    Bootstraps the seed experiments on startup.
    """
    # Startup
    logger.info("Starting up A/B testing server...")

    if not experiment_service.is_ready:
        experiment_service.bootstrap()

    yield

    # Shutdown
    logger.info("Stopping web server")


# Create FastAPI app
app = FastAPI(
    title=api_settings.api_title,
    version=api_settings.api_version,
    description=api_settings.api_description,
    lifespan=lifespan,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router)
app.include_router(metrics.router)
app.include_router(experiments.router)
app.include_router(assignments.router)
