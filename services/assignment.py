from data.store import ExperimentStore
from models.experiments import Experiment, ExperimentStatus, UserVariant, VariantType
from services.registry import get_or_create_experiment
import logging

logger = logging.getLogger(__name__)

BUCKET_COUNT = 100
_INT32_MASK = 0xFFFFFFFF
_INT32_SIGN = 0x80000000


def rolling_hash(value: str) -> int:
    """
    32-bit rolling polynomial string hash (h = h * 31 + c) over UTF-16 code units.

    Arithmetic wraps to a signed 32-bit integer and the absolute value is
    returned, so the result matches assignments made by the JavaScript
    client for the same input. Note abs(-2**31) is 2**31.
    """
    h = 0
    data = value.encode("utf-16-le", "surrogatepass")
    for i in range(0, len(data), 2):
        code_unit = data[i] | (data[i + 1] << 8)
        h = (h * 31 + code_unit) & _INT32_MASK
    if h & _INT32_SIGN:
        h -= _INT32_MASK + 1
    return abs(h)


def bucket_for(experiment_id: str, user_id: str) -> int:
    """ Bucket 0..99 for the pair; user id first, then experiment id """
    return rolling_hash(user_id + experiment_id) % BUCKET_COUNT


def choose_variant(experiment: Experiment, bucket: int) -> VariantType:
    """
    Walk the declared variants accumulating their allocation; the first variant
    whose cumulative share exceeds the bucket wins. Variants without an
    allocation entry count as 0%. Buckets left unallocated fall back to control.
    """
    cumulative = 0
    for variant in experiment.variants:
        cumulative += experiment.traffic_allocation.get(variant, 0)
        if bucket < cumulative:
            return variant

    logger.debug("bucket %d unallocated in experiment %s, falling back to control", bucket, experiment.id)
    return VariantType.CONTROL


def get_assignment(store: ExperimentStore, experiment_id: str, user_id: str) -> UserVariant | None:
    """ Get existing assignment from the store """
    return store.assignments.get((experiment_id, user_id))


def get_variant(store: ExperimentStore, experiment_id: str, user_id: str) -> VariantType:
    """
    Return the user's variant for the experiment, assigning one if needed.

    Assignments are sticky: once recorded, the same variant is returned on every
    later call. Experiments that are not active always answer control and
    record nothing, so the user is assigned for real once the experiment is
    activated.
    """
    existing_assignment = get_assignment(store, experiment_id, user_id)
    if existing_assignment:
        logger.debug("Found assignment for user %s on %s: %s",
                     user_id, experiment_id, existing_assignment.variant.value)
        return existing_assignment.variant

    experiment = get_or_create_experiment(store, experiment_id)
    if experiment.status != ExperimentStatus.ACTIVE:
        logger.debug("experiment %s is %s, serving control to user %s without assignment",
                     experiment_id, experiment.status.value, user_id)
        return VariantType.CONTROL

    bucket = bucket_for(experiment_id, user_id)
    variant = choose_variant(experiment, bucket)

    store.assignments[(experiment_id, user_id)] = UserVariant(
        experiment_id=experiment_id,
        user_id=user_id,
        variant=variant,
    )
    logger.info("User %s newly assigned to %s (experiment %s, bucket %d).",
                user_id, variant.value, experiment_id, bucket)
    return variant
