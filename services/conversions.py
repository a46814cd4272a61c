from typing import Any, Callable
from data.store import ExperimentStore
from models.conversions import Conversion, DEFAULT_EVENT_TYPE
from models.experiments import VariantType, utcnow
from celery_tasks.conversion_tasks import persist_conversion
import logging
import uuid

logger = logging.getLogger(__name__)


def new_conversion_id(experiment_id: str, user_id: str, converted_at) -> str:
    """
    experimentId:userId:epochMillis followed by a short random suffix, so that
    two conversions from the same user within one millisecond stay distinct.
    """
    millis = int(converted_at.timestamp() * 1000)
    return f"{experiment_id}:{user_id}:{millis}:{uuid.uuid4().hex[:8]}"


def dispatch_conversion(payload: dict[str, Any]) -> None:
    """
    Hand the conversion to the Celery worker and return without waiting.
    Failing to enqueue is logged and dropped; conversions are never retried.
    """
    try:
        task = persist_conversion.delay(payload)
        logger.debug("persist_conversion task %s queued for conversion %s", task.id, payload["id"])
    except Exception as e:
        logger.warning("Failed to queue conversion %s for persistence: %s", payload.get("id"), e)


def track_conversion(
    store: ExperimentStore,
    experiment_id: str,
    user_id: str,
    variant: VariantType,
    event_type: str = DEFAULT_EVENT_TYPE,
    event_value: float | None = None,
    metadata: dict[str, Any] | None = None,
    dispatch: Callable[[dict[str, Any]], None] = dispatch_conversion,
) -> Conversion:
    """
    Record a conversion for (experiment_id, user_id, variant) and mirror it to
    durable storage in the background.

    The variant is trusted as given; it is not checked against the user's
    recorded assignment. The conversion is appended to the store before the
    mirror is attempted, so it is always visible to get_experiment_results
    even when persistence fails.
    """
    converted_at = utcnow()
    conversion = Conversion(
        id=new_conversion_id(experiment_id, user_id, converted_at),
        experiment_id=experiment_id,
        user_id=user_id,
        variant=variant,
        event_type=event_type,
        event_value=event_value,
        metadata=metadata,
        converted_at=converted_at,
    )
    store.conversions.append(conversion)
    logger.info("conversion %s recorded: experiment %s, user %s, variant %s, type %s",
                conversion.id, experiment_id, user_id, conversion.variant.value, event_type)

    try:
        dispatch(conversion.model_dump(mode="json"))
    except Exception as e:
        logger.warning("Failed to persist conversion %s: %s", conversion.id, e)

    return conversion
