from fastapi import APIRouter, HTTPException, Response, status

from data.store import ExperimentStore
from models.experiments import (
    Experiment,
    ExperimentConfig,
    ExperimentStatusUpdate,
    VariantAssignmentResponse,
)
from models.results import ExperimentResults
from services import assignment, registry, results
from api.depends import CLIENT_AUTH, STORE_DEPENDENCY

import logging

logger = logging.getLogger(__name__)

experiment_router = APIRouter(
    prefix="/experiments",
    tags=["experiments"],
    dependencies=[CLIENT_AUTH], # CLIENT_AUTH is applied to all routes in this router
)


@experiment_router.get("", response_model=list[Experiment])
def list_experiments_route(store: ExperimentStore = STORE_DEPENDENCY):
    """List every experiment known to this instance, in creation order."""
    return registry.list_experiments(store)


# POST /experiments/{experiment_id} (get-or-create, an existing experiment is returned unchanged)
@experiment_router.post("/{experiment_id}", response_model=Experiment)
def get_or_create_experiment_route(
    experiment_id: str,
    experiment_config: ExperimentConfig | None = None,
    store: ExperimentStore = STORE_DEPENDENCY,
):
    """Register an experiment. The configuration only applies when the experiment is new."""
    return registry.get_or_create_experiment(store, experiment_id, experiment_config)


@experiment_router.get("/{experiment_id}", response_model=Experiment)
def get_experiment_route(experiment_id: str, store: ExperimentStore = STORE_DEPENDENCY):
    experiment = registry.get_experiment(store, experiment_id)
    if not experiment:
        raise HTTPException(status_code=404, detail=f"Experiment {experiment_id} not found.")
    return experiment


@experiment_router.put("/{experiment_id}/status", status_code=status.HTTP_204_NO_CONTENT)
def update_experiment_status_route(
    experiment_id: str,
    status_update: ExperimentStatusUpdate,
    store: ExperimentStore = STORE_DEPENDENCY,
):
    """Change an experiment's status. Unknown experiments are ignored."""
    registry.update_experiment_status(store, experiment_id, status_update.status)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# GET /experiments/{experiment_id}/variant/{user_id} (sticky assignment)
@experiment_router.get("/{experiment_id}/variant/{user_id}", response_model=VariantAssignmentResponse)
def get_user_variant_route(
    experiment_id: str,
    user_id: str,
    store: ExperimentStore = STORE_DEPENDENCY,
):
    """Get user's variant. Creates the experiment with defaults and assigns the user if needed."""
    variant = assignment.get_variant(store, experiment_id, user_id)
    recorded = assignment.get_assignment(store, experiment_id, user_id)
    return VariantAssignmentResponse(
        experiment_id=experiment_id,
        user_id=user_id,
        variant=variant,
        assigned_at=recorded.assigned_at if recorded else None,
    )


# GET /experiments/{experiment_id}/results
@experiment_router.get("/{experiment_id}/results", response_model=ExperimentResults)
def get_experiment_results_route(
    experiment_id: str,
    event_type: str | None = None,      # restrict to one conversion type, e.g. purchase
    store: ExperimentStore = STORE_DEPENDENCY,
):
    """
    Per-variant users, conversions and value for this instance's traffic.
    """
    summary = results.get_experiment_results(store, experiment_id, event_type=event_type)
    if summary.experiment is None:
        raise HTTPException(status_code=404, detail=f"Experiment {experiment_id} not found.")
    return summary
