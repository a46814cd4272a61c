from celery_config import celery_app
from data.database import ConversionRecord, SessionLocal, create_conversion_table
from typing import Any
import logging

logger = logging.getLogger(__name__)


# No retries: a conversion that cannot be mirrored is logged and dropped.
# The in-process ledger keeps it regardless.
@celery_app.task(bind=True, max_retries=0, ignore_result=True)
def persist_conversion(self, conversion_data: dict[str, Any]) -> bool:
    """
    Mirror one conversion into ab_test_conversions, creating the table on first use.
    Returns True when the row was written, False when persistence failed.
    """
    db = None
    try:
        create_conversion_table()
        db = SessionLocal()
        record = ConversionRecord.from_dict(conversion_data)
        db.add(record)
        db.commit()
        logger.info("Task %s[%s]. Persisted conversion %s for user %s (%s).",
                    self.name, self.request.id, record.id, record.user_id, record.event_type)
        return True
    except Exception as exc:
        if db:
            db.rollback()
        logger.warning("Database not available for conversion tracking, conversion %s dropped: %s",
                       conversion_data.get("id"), exc)
        return False
    finally:
        if db:
            db.close()
