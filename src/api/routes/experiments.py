"""API routes for experiment management."""

from fastapi import APIRouter, Depends, HTTPException

from src.api.schemas.experiments import ExperimentCreate, ExperimentResponse
from src.api.services.experiment_service import ExperimentService, get_experiment_service
from src.experimentation import Experiment, ExperimentNotFoundError, InvalidExperimentError

router = APIRouter(prefix="/experiments", tags=["experiments"])


def _to_response(experiment: Experiment) -> ExperimentResponse:
    return ExperimentResponse(
        name=experiment.name,
        variants=list(experiment.variants),
        start_date=experiment.start_date,
        end_date=experiment.end_date,
    )


@router.get("", response_model=list[ExperimentResponse])
async def list_experiments(
    service: ExperimentService = Depends(get_experiment_service),
) -> list[ExperimentResponse]:
    """List all experiments.

    Order is not guaranteed.
    """
    return [_to_response(e) for e in service.registry.list_experiments()]


@router.post("", response_model=ExperimentResponse, status_code=201)
async def create_experiment(
    experiment: ExperimentCreate,
    service: ExperimentService = Depends(get_experiment_service),
) -> ExperimentResponse:
    """Create or replace an experiment.

    Args:
        experiment: Experiment definition.
    """
    try:
        created = service.registry.create(
            experiment.name,
            experiment.variants,
            start_date=experiment.start_date,
            end_date=experiment.end_date,
        )
    except InvalidExperimentError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return _to_response(created)


@router.get("/{experiment_name}", response_model=ExperimentResponse)
async def get_experiment(
    experiment_name: str,
    service: ExperimentService = Depends(get_experiment_service),
) -> ExperimentResponse:
    """Get experiment details.

    Args:
        experiment_name: Name of the experiment.
    """
    try:
        experiment = service.registry.lookup(experiment_name)
    except ExperimentNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))

    return _to_response(experiment)
