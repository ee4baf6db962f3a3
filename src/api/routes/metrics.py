"""Prometheus scrape endpoint."""

from fastapi import APIRouter, Depends, Response

from src.api.services.experiment_service import ExperimentService, get_experiment_service

router = APIRouter(tags=["metrics"])


@router.get("/metrics")
async def get_metrics(
    service: ExperimentService = Depends(get_experiment_service),
) -> Response:
    """Expose assignment and conversion counters in Prometheus text format."""
    payload, content_type = service.metrics.exposition()
    return Response(content=payload, media_type=content_type)
