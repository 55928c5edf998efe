"""Job trigger for an external cron service"""
from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.services.renewal_service import job_today, update_expired_renewal_dates
from app.routers.deps import require_cron_secret

router = APIRouter(prefix="/api/jobs", tags=["jobs"])


@router.post("/renewals", dependencies=[Depends(require_cron_secret)])
async def run_renewal_jobs(db: Session = Depends(get_db)):
    """Roll stale next billing dates forward"""
    result = update_expired_renewal_dates(db, today=job_today())
    return {
        "success": True,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "results": {
            "renewal_dates_updated": {
                "processed": result.processed,
                "updated": result.updated,
                "skipped": result.skipped,
            },
        },
    }
