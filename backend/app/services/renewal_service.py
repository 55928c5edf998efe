"""Renewal catch-up: roll stale next billing dates forward"""
from dataclasses import dataclass, asdict
from datetime import date, datetime
from typing import Optional
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from app.core.config import settings
from app.models.subscription import Subscription
from app.services.billing_cycle import InvalidCycleError, next_billing_date_on_or_after_now
from app.core.logging import get_logger

logger = get_logger(__name__)


@dataclass
class RenewalUpdateResult:
    processed: int = 0
    updated: int = 0
    skipped: int = 0


def job_today() -> date:
    """Today's date in SCHEDULER_TIMEZONE. Every trigger of the job uses this."""
    return datetime.now(ZoneInfo(settings.SCHEDULER_TIMEZONE)).date()


def update_expired_renewal_dates(
    db: Session,
    today: Optional[date] = None,
    batch_size: Optional[int] = None,
) -> RenewalUpdateResult:
    """Advance every auto-renewing subscription whose next billing date has passed.

    Each record steps forward from its stored next billing date, not from its
    start date. `today` is fixed for the whole run. Records with an unknown
    billing cycle are logged and skipped.
    """
    today = today or job_today()
    batch_size = batch_size or settings.RENEWAL_BATCH_SIZE
    result = RenewalUpdateResult()
    last_id = 0

    while True:
        batch = db.query(Subscription).filter(
            Subscription.auto_renew == True,
            Subscription.next_billing_date != None,
            Subscription.next_billing_date < today,
            Subscription.id > last_id,
        ).order_by(Subscription.id.asc()).limit(batch_size).all()

        if not batch:
            break

        for sub in batch:
            result.processed += 1
            try:
                new_date = next_billing_date_on_or_after_now(
                    sub.next_billing_date, sub.billing_cycle, sub.frequency, now=today,
                )
            except InvalidCycleError as e:
                result.skipped += 1
                logger.warning(
                    f"Renewal date skipped: subscription_id={sub.id}, error={e}",
                    extra={"extra_data": {"subscription_id": sub.id, "billing_cycle": sub.billing_cycle}},
                )
                continue

            logger.debug(
                f"Renewal date advanced: subscription_id={sub.id}, "
                f"{sub.next_billing_date} -> {new_date}"
            )
            sub.next_billing_date = new_date
            sub.notified_for_current_cycle = False
            result.updated += 1

        last_id = batch[-1].id
        db.commit()

    logger.info(
        f"Renewal dates updated: updated={result.updated}, "
        f"processed={result.processed}, skipped={result.skipped}, today={today}",
        extra={"extra_data": {**asdict(result), "today": today.isoformat()}},
    )
    return result
