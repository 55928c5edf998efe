"""Plan change preview / confirm: loads records and hands them to the estimator"""
from datetime import datetime
from typing import Optional, Union

from sqlalchemy.orm import Session

from app.models.plan import Plan
from app.models.user_plan import UserPlan
from app.services.proration_service import (
    CurrentSubscriptionSnapshot,
    IneligibleUpgrade,
    PlanSnapshot,
    ProrationPreview,
    UpgradeType,
    classify_upgrade,
    estimate_proration,
)
from app.core.logging import get_logger

logger = get_logger(__name__)

ACTIVE_STATUSES = ("active", "trialing")

# Provider call the confirm step delegates to, per upgrade type
PROVIDER_ACTIONS = {
    UpgradeType.NEW_SUBSCRIPTION: "checkout",
    UpgradeType.PLAN_CHANGE: "update_subscription",
    UpgradeType.IMMEDIATE_CHARGE: "one_time_charge",
}


def get_purchasable_plan(db: Session, slug: str) -> Optional[Plan]:
    return db.query(Plan).filter(Plan.slug == slug, Plan.is_active == True).first()


def get_active_user_plan(db: Session, user_id: int) -> Optional[UserPlan]:
    """Current active (or trialing) plan record, newest first"""
    return db.query(UserPlan).filter(
        UserPlan.user_id == user_id,
        UserPlan.status.in_(ACTIVE_STATUSES),
    ).order_by(UserPlan.start_date.desc(), UserPlan.id.desc()).first()


def plan_snapshot(plan: Plan) -> PlanSnapshot:
    return PlanSnapshot(name=plan.name, price_cents=plan.price, billing_cycle=plan.billing_cycle)


def current_snapshot(user_plan: Optional[UserPlan]) -> Optional[CurrentSubscriptionSnapshot]:
    if user_plan is None or user_plan.plan is None:
        return None
    return CurrentSubscriptionSnapshot(
        plan=plan_snapshot(user_plan.plan),
        expires_at=user_plan.expires_at,
    )


def preview_plan_change(
    db: Session,
    user_id: int,
    target: Plan,
    now: Optional[datetime] = None,
) -> Union[ProrationPreview, IneligibleUpgrade]:
    """Cost preview shown before the user confirms a plan change"""
    current = current_snapshot(get_active_user_plan(db, user_id))
    preview = estimate_proration(current, plan_snapshot(target), now=now)
    if isinstance(preview, ProrationPreview):
        logger.info(
            f"Plan change preview: user_id={user_id}, target={target.slug}, "
            f"type={preview.upgrade_type.value}, due={preview.amount_due_cents}, "
            f"credit={preview.credit_cents}",
            extra={"extra_data": {"user_id": user_id, "plan_slug": target.slug, "upgrade_type": preview.upgrade_type.value}},
        )
    return preview


def confirm_plan_change(
    db: Session,
    user_id: int,
    target: Plan,
) -> Union[tuple[UpgradeType, str], IneligibleUpgrade]:
    """Re-derive the classification and pick the provider action.

    The estimate from the preview step is never reused here. The provider
    computes the amount actually charged.
    """
    current = current_snapshot(get_active_user_plan(db, user_id))
    upgrade_type = classify_upgrade(current, plan_snapshot(target))
    if isinstance(upgrade_type, IneligibleUpgrade):
        return upgrade_type

    action = PROVIDER_ACTIONS[upgrade_type]
    logger.info(
        f"Plan change confirmed: user_id={user_id}, target={target.slug}, "
        f"type={upgrade_type.value}, provider_action={action}",
        extra={"extra_data": {"user_id": user_id, "plan_slug": target.slug, "provider_action": action}},
    )
    return upgrade_type, action
