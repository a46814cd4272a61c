from pydantic import BaseModel, Field
from datetime import datetime
from typing import Any
from models.experiments import VariantType, utcnow

DEFAULT_EVENT_TYPE = "conversion"


class ConversionCreate(BaseModel):
    """Schema for recording a conversion via POST /experiments/{id}/conversions."""
    user_id: str
    variant: VariantType
    event_type: str = Field(default=DEFAULT_EVENT_TYPE, description="Type of conversion (e.g., 'purchase', 'signup').")
    event_value: float | None = Field(default=None, description="Optional magnitude, e.g. revenue.")
    metadata: dict[str, Any] | None = Field(default=None, description="Flexible JSON for extra context.")


class Conversion(BaseModel):
    """An append-only conversion event tied to an experiment, user and variant."""
    id: str
    experiment_id: str
    user_id: str
    variant: VariantType
    event_type: str = DEFAULT_EVENT_TYPE
    event_value: float | None = None
    metadata: dict[str, Any] | None = None
    converted_at: datetime = Field(default_factory=utcnow)
