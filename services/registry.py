from data.store import ExperimentStore
from models.experiments import Experiment, ExperimentConfig, ExperimentStatus
import logging

logger = logging.getLogger(__name__)


def get_experiment(store: ExperimentStore, experiment_id: str) -> Experiment | None:
    """ Look up an experiment without creating it """
    return store.experiments.get(experiment_id)


def get_or_create_experiment(store: ExperimentStore, experiment_id: str, config: ExperimentConfig | None = None) -> Experiment:
    """
    Return the experiment registered under experiment_id, creating it first if needed.

    This is get-or-create, not upsert: when the experiment already exists the
    config passed on this call is ignored. A new experiment starts from the
    defaults (control/variant_a split 50/50, active) and only the fields
    explicitly set on config override them. The name defaults to the id.
    """
    experiment = store.experiments.get(experiment_id)
    if experiment:
        return experiment

    overrides = config.model_dump(exclude_unset=True, exclude_none=True) if config else {}
    # an empty name falls back to the id as well
    if not overrides.get("name"):
        overrides["name"] = experiment_id
    experiment = Experiment(id=experiment_id, **overrides)
    if experiment.start_date is None:
        experiment.start_date = experiment.created_at

    store.experiments[experiment_id] = experiment
    logger.info("create new experiment %s success, status: %s, variants: %s",
                experiment_id, experiment.status.value, [v.value for v in experiment.variants])
    return experiment


def update_experiment_status(store: ExperimentStore, experiment_id: str, status: ExperimentStatus) -> None:
    """ Change the status of an existing experiment. Unknown ids are ignored. """
    experiment = store.experiments.get(experiment_id)
    if not experiment:
        logger.debug("update_experiment_status %s ignored, experiment not found", experiment_id)
        return

    previous = experiment.status
    experiment.status = ExperimentStatus(status)
    logger.info("experiment %s status changed from %s to %s", experiment_id, previous.value, experiment.status.value)


def list_experiments(store: ExperimentStore) -> list[Experiment]:
    return list(store.experiments.values())
