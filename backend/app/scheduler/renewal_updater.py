"""Daily: roll stale next billing dates forward"""
from app.core.database import SessionLocal
from app.services.renewal_service import job_today, update_expired_renewal_dates
from app.core.logging import get_logger

logger = get_logger(__name__)


def run_renewal_catch_up():
    """Called by the scheduler. Errors are logged so the scheduler keeps running."""
    db = SessionLocal()
    try:
        result = update_expired_renewal_dates(db, today=job_today())
        if result.updated > 0:
            logger.info(f"Renewal catch-up finished: {result.updated}/{result.processed} updated")
        return result
    except Exception as e:
        logger.error(f"Renewal catch-up failed: {e}", exc_info=True)
        db.rollback()
        return None
    finally:
        db.close()
