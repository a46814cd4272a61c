from models.experiments import Experiment, UserVariant
from models.conversions import Conversion
import logging

logger = logging.getLogger(__name__)


class ExperimentStore:
    """
    Process-local state for the experiment services.

    Holds the experiment registry, the sticky user assignments keyed by
    (experiment_id, user_id) and the append-only sequence of conversions.
    Nothing here is shared between processes: each instance of the service
    keeps and reports on its own traffic only.
    """

    def __init__(self):
        self.experiments: dict[str, Experiment] = {}
        self.assignments: dict[tuple[str, str], UserVariant] = {}
        self.conversions: list[Conversion] = []

    def clear(self):
        logger.debug("clearing experiment store: %d experiments, %d assignments, %d conversions",
                     len(self.experiments), len(self.assignments), len(self.conversions))
        self.experiments.clear()
        self.assignments.clear()
        self.conversions.clear()

    def assignments_for(self, experiment_id: str) -> list[UserVariant]:
        return [a for a in self.assignments.values() if a.experiment_id == experiment_id]

    def conversions_for(self, experiment_id: str) -> list[Conversion]:
        return [c for c in self.conversions if c.experiment_id == experiment_id]


# Initialize a default store (singleton)
_DEFAULT_STORE = ExperimentStore()

def get_experiment_store() -> ExperimentStore:
    return _DEFAULT_STORE
