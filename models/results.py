from pydantic import BaseModel
from datetime import datetime
from models.experiments import Experiment

class VariantStats(BaseModel):
    """Aggregate statistics for a single variant."""
    users: int
    conversions: int
    conversion_rate: float # Calculated as (conversions / users) * 100
    total_value: float
    average_value: float

class ExperimentResults(BaseModel):
    """Schema returned by GET /experiments/{id}/results."""
    experiment: Experiment | None
    # Key is the variant tag (e.g., 'variant_a')
    variants: dict[str, VariantStats]
    total_conversions: int
    report_generated_at: datetime
