from fastapi import APIRouter, status
from sqlalchemy.orm import Session

from data.database import ConversionRecord
from data.store import ExperimentStore
from models.conversions import Conversion, ConversionCreate
from services import conversions
from api.depends import CLIENT_AUTH, DB_DEPENDENCY, STORE_DEPENDENCY

import logging

logger = logging.getLogger(__name__)

conversion_router = APIRouter(
    prefix="/experiments/{experiment_id}/conversions",
    tags=["conversions"],
    dependencies=[CLIENT_AUTH]
)


@conversion_router.post("", response_model=Conversion, status_code=status.HTTP_202_ACCEPTED)
def track_conversion_route(
    experiment_id: str,
    conversion_data: ConversionCreate,
    store: ExperimentStore = STORE_DEPENDENCY,
):
    """
    Record a conversion (purchase, signup, ...) for a user.
    The conversion is counted immediately; writing it to the database is
    handed to a celery worker and never delays the response.
    """
    return conversions.track_conversion(
        store,
        experiment_id,
        conversion_data.user_id,
        conversion_data.variant,
        event_type=conversion_data.event_type,
        event_value=conversion_data.event_value,
        metadata=conversion_data.metadata,
    )


@conversion_router.get("", response_model=list[Conversion])
def list_persisted_conversions_route(
    experiment_id: str,
    db: Session = DB_DEPENDENCY,
):
    """Conversions already mirrored to the database, oldest first."""
    records = db.query(ConversionRecord).filter(
        ConversionRecord.experiment_id == experiment_id
    ).order_by(ConversionRecord.converted_at).all()
    logger.debug("found %d persisted conversions for %s", len(records), experiment_id)
    return [Conversion(**record.to_dict()) for record in records]
