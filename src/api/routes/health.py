"""Health and readiness endpoints."""

from fastapi import APIRouter, Depends, HTTPException

from src.api.config import get_api_settings
from src.api.schemas.stats import HealthResponse
from src.api.services.experiment_service import ExperimentService, get_experiment_service

router = APIRouter(tags=["health"])
api_settings = get_api_settings()


@router.get("/health", response_model=HealthResponse)
async def health_check(
    service: ExperimentService = Depends(get_experiment_service),
) -> HealthResponse:
    """Health check endpoint.

    Always answers while the process is up.
    """
    return HealthResponse(
        status="healthy" if service.is_ready else "starting",
        experiments_loaded=len(service.registry),
        version=api_settings.api_version,
    )


@router.get("/ready")
async def readiness_check(
    service: ExperimentService = Depends(get_experiment_service),
) -> dict[str, str]:
    """Readiness endpoint.

    Returns 503 until the seed experiments are bootstrapped.
    """
    if not service.is_ready:
        raise HTTPException(status_code=503, detail="Service not ready")
    return {"status": "ready"}
