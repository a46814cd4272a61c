from pydantic import BaseModel, Field, field_validator
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated


class VariantType(str, Enum):
    """Closed set of variant tags an experiment can declare."""
    CONTROL = "control"
    VARIANT_A = "variant_a"
    VARIANT_B = "variant_b"
    VARIANT_C = "variant_c"


class ExperimentStatus(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


Percentage = Annotated[int, Field(ge=0, le=100)]

DEFAULT_VARIANTS = [VariantType.CONTROL, VariantType.VARIANT_A]
DEFAULT_TRAFFIC_ALLOCATION = {
    VariantType.CONTROL: 50,
    VariantType.VARIANT_A: 50,
    VariantType.VARIANT_B: 0,
    VariantType.VARIANT_C: 0,
}


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _check_variants(variants: list[VariantType] | None) -> list[VariantType] | None:
    if variants is None:
        return variants
    if not variants:
        raise ValueError("variants must not be empty")
    if len(set(variants)) != len(variants):
        raise ValueError("variants must not contain duplicates")
    return variants


class ExperimentConfig(BaseModel):
    """
    Optional configuration used when an experiment is first created.
    Only the fields explicitly set override the defaults. The traffic
    allocation is not required to sum to 100; unallocated buckets fall
    back to control at assignment time.
    """
    name: str | None = None
    description: str | None = None
    variants: list[VariantType] | None = None
    traffic_allocation: dict[VariantType, Percentage] | None = None
    status: ExperimentStatus | None = None
    start_date: datetime | None = None
    end_date: datetime | None = None

    @field_validator("variants")
    @classmethod
    def validate_variants(cls, variants):
        return _check_variants(variants)


class Experiment(BaseModel):
    """An experiment definition held by the registry."""
    id: str
    name: str
    description: str | None = None
    variants: list[VariantType] = Field(default_factory=lambda: list(DEFAULT_VARIANTS))
    traffic_allocation: dict[VariantType, Percentage] = Field(default_factory=lambda: dict(DEFAULT_TRAFFIC_ALLOCATION))
    status: ExperimentStatus = ExperimentStatus.ACTIVE
    start_date: datetime | None = None
    end_date: datetime | None = None
    created_at: datetime = Field(default_factory=utcnow)

    @field_validator("variants")
    @classmethod
    def validate_variants(cls, variants):
        return _check_variants(variants)


class UserVariant(BaseModel):
    """A sticky assignment of one user to one variant of an experiment."""
    experiment_id: str
    user_id: str
    variant: VariantType
    assigned_at: datetime = Field(default_factory=utcnow)


class ExperimentStatusUpdate(BaseModel):
    """Body of PUT /experiments/{id}/status."""
    status: ExperimentStatus


class VariantAssignmentResponse(BaseModel):
    """Schema returned by GET /experiments/{id}/variant/{user_id}."""
    experiment_id: str
    user_id: str
    variant: VariantType
    # None when the experiment is inactive and nothing was recorded
    assigned_at: datetime | None = None
