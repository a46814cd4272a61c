from collections import defaultdict
from data.store import ExperimentStore
from models.results import ExperimentResults, VariantStats
from models.experiments import utcnow
from services.registry import get_experiment
import logging

logger = logging.getLogger(__name__)


def get_experiment_results(store: ExperimentStore, experiment_id: str, event_type: str | None = None) -> ExperimentResults:
    """
    Calculates per-variant statistics from this process's assignments and conversions.

    Only variants with at least one assignment are reported. A user converting
    several times counts once towards conversions, but every event value
    counts towards total_value. total_conversions is the raw number of matching
    conversion events across all variants.
    """
    experiment_conversions = store.conversions_for(experiment_id)
    if event_type is not None:
        experiment_conversions = [c for c in experiment_conversions if c.event_type == event_type]

    # Count distinct users per variant
    users_per_variant: dict[str, set[str]] = defaultdict(set)
    for assignment in store.assignments_for(experiment_id):
        users_per_variant[assignment.variant.value].add(assignment.user_id)

    variant_stats: dict[str, VariantStats] = {}
    for variant, users in users_per_variant.items():
        variant_conversions = [c for c in experiment_conversions if c.variant.value == variant]
        conversions = len({c.user_id for c in variant_conversions})
        total_value = sum(c.event_value or 0 for c in variant_conversions)
        rate = (conversions * 100 / len(users)) if users else 0.0

        variant_stats[variant] = VariantStats(
            users=len(users),
            conversions=conversions,
            conversion_rate=rate,
            total_value=total_value,
            average_value=total_value / conversions if conversions > 0 else 0.0,
        )

    logger.debug("calculated results for %s: %d variants, %d conversions",
                 experiment_id, len(variant_stats), len(experiment_conversions))

    return ExperimentResults(
        experiment=get_experiment(store, experiment_id),
        variants=variant_stats,
        total_conversions=len(experiment_conversions),
        report_generated_at=utcnow(),
    )
