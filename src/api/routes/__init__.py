"""API routes module.

Exports all route handlers for the FastAPI application.
"""

from src.api.routes.assignments import router as assignments_router
from src.api.routes.experiments import router as experiments_router
from src.api.routes.health import router as health_router
from src.api.routes.metrics import router as metrics_router

__all__ = [
    "assignments_router",
    "experiments_router",
    "health_router",
    "metrics_router",
]
