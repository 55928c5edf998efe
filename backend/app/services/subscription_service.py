"""Tracked subscription records: create/update with billing date upkeep"""
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from app.models.subscription import Subscription
from app.services.billing_cycle import next_billing_date_on_or_after_now
from app.core.logging import get_logger

logger = get_logger(__name__)

BILLING_FIELDS = ("start_date", "billing_cycle", "frequency")


def apply_billing_fields(
    sub: Subscription,
    changed_fields: set[str],
    explicit_next_billing_date: Optional[date] = None,
    today: Optional[date] = None,
    is_update: bool = False,
) -> Subscription:
    """Keep next_billing_date in step with the billing fields.

    Recomputed from start_date when a billing field changed and the caller did
    not supply a next billing date. On update, a moved next billing date starts
    a new cycle, so the reminder flag is cleared.
    """
    previous_next = sub.next_billing_date if is_update else None

    if explicit_next_billing_date is not None:
        sub.next_billing_date = explicit_next_billing_date
    elif changed_fields & set(BILLING_FIELDS) and sub.start_date and sub.billing_cycle:
        sub.next_billing_date = next_billing_date_on_or_after_now(
            sub.start_date, sub.billing_cycle, sub.frequency, now=today,
        )

    if is_update and previous_next is not None and sub.next_billing_date != previous_next:
        sub.notified_for_current_cycle = False

    return sub


def list_subscriptions(db: Session, owner_id: int) -> list[Subscription]:
    """Subscriptions owned by a user, soonest billing first"""
    return db.query(Subscription).filter(
        Subscription.owner_id == owner_id,
    ).order_by(Subscription.next_billing_date.asc(), Subscription.id.asc()).all()


def get_subscription(db: Session, owner_id: int, subscription_id: int) -> Optional[Subscription]:
    return db.query(Subscription).filter(
        Subscription.id == subscription_id,
        Subscription.owner_id == owner_id,
    ).first()


def create_subscription(db: Session, owner_id: int, data: dict, today: Optional[date] = None) -> Subscription:
    """Create a subscription record"""
    explicit_next = data.pop("next_billing_date", None)
    sub = Subscription(owner_id=owner_id, **data)
    if sub.frequency is None:
        sub.frequency = 1
    apply_billing_fields(sub, set(BILLING_FIELDS), explicit_next, today=today)

    db.add(sub)
    db.commit()
    db.refresh(sub)
    logger.info(
        f"Subscription created: id={sub.id}, owner_id={owner_id}, "
        f"cycle={sub.billing_cycle}x{sub.frequency}, next_billing_date={sub.next_billing_date}"
    )
    return sub


def update_subscription(db: Session, sub: Subscription, data: dict, today: Optional[date] = None) -> Subscription:
    """Apply a partial update. `data` holds only the fields the caller sent.

    An explicit None for next_billing_date clears the stored date.
    """
    clear_next = "next_billing_date" in data and data["next_billing_date"] is None
    explicit_next = data.pop("next_billing_date", None)
    changed = set()
    for field, value in data.items():
        if getattr(sub, field) != value:
            setattr(sub, field, value)
            changed.add(field)

    if clear_next:
        if sub.next_billing_date is not None:
            sub.next_billing_date = None
            sub.notified_for_current_cycle = False
            changed.add("next_billing_date")
    else:
        apply_billing_fields(sub, changed, explicit_next, today=today, is_update=True)
    db.commit()
    db.refresh(sub)
    if changed or explicit_next is not None:
        logger.info(
            f"Subscription updated: id={sub.id}, fields={sorted(changed)}, "
            f"next_billing_date={sub.next_billing_date}",
            extra={"extra_data": {"subscription_id": sub.id, "fields": sorted(changed)}},
        )
    return sub
