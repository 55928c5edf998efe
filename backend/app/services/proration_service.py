"""Plan change cost preview

Advisory only. Nothing here talks to the payment provider; the provider
computes the real charge at checkout and its number wins.

Classification:
    current plan is lifetime                -> IneligibleUpgrade
    no current plan, or current plan free   -> new_subscription (full price)
    target plan is lifetime                 -> immediate_charge (full price)
    otherwise                               -> plan_change (prorated estimate)

Proration uses fixed cycle lengths (30 days per month, 365 per year) rather than
the real length of the current period. These are user-facing amounts: do not
switch to calendar-exact lengths without product sign-off.
"""
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional, Union

from app.core.logging import get_logger

logger = get_logger(__name__)

SECONDS_PER_DAY = 86400

CYCLE_LENGTH_DAYS = {
    "monthly": 30,
    "yearly": 365,
}

LIFETIME_INELIGIBLE_REASON = "You already have a lifetime subscription"


class PlanCycle(str, Enum):
    FREE = "free"
    MONTHLY = "monthly"
    YEARLY = "yearly"
    LIFETIME = "lifetime"


class UpgradeType(str, Enum):
    NEW_SUBSCRIPTION = "new_subscription"
    PLAN_CHANGE = "plan_change"
    IMMEDIATE_CHARGE = "immediate_charge"


@dataclass(frozen=True)
class PlanSnapshot:
    name: str
    price_cents: int
    billing_cycle: PlanCycle

    def __post_init__(self):
        object.__setattr__(self, "billing_cycle", PlanCycle(self.billing_cycle))
        if self.price_cents < 0:
            raise ValueError(f"price_cents must be >= 0, got {self.price_cents}")


@dataclass(frozen=True)
class CurrentSubscriptionSnapshot:
    plan: PlanSnapshot
    expires_at: Optional[datetime] = None


@dataclass(frozen=True)
class ProrationPreview:
    upgrade_type: UpgradeType
    credit_cents: int
    amount_due_cents: int
    days_remaining: int
    is_estimate: bool


@dataclass(frozen=True)
class IneligibleUpgrade:
    """The change is not allowed. A business outcome, not an error."""

    reason: str


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _has_paid_subscription(current: Optional[CurrentSubscriptionSnapshot]) -> bool:
    return current is not None and current.plan.billing_cycle is not PlanCycle.FREE


def classify_upgrade(
    current: Optional[CurrentSubscriptionSnapshot],
    target: PlanSnapshot,
) -> Union[UpgradeType, IneligibleUpgrade]:
    """Decide which purchase path a change from `current` to `target` takes"""
    if current is not None and current.plan.billing_cycle is PlanCycle.LIFETIME:
        return IneligibleUpgrade(reason=LIFETIME_INELIGIBLE_REASON)
    if not _has_paid_subscription(current):
        return UpgradeType.NEW_SUBSCRIPTION
    if target.billing_cycle is PlanCycle.LIFETIME:
        return UpgradeType.IMMEDIATE_CHARGE
    return UpgradeType.PLAN_CHANGE


def days_remaining(expires_at: Optional[datetime], now: datetime) -> int:
    """Whole days left until `expires_at`, rounded up. 0 if absent or past."""
    if expires_at is None:
        return 0
    delta = _as_utc(expires_at) - _as_utc(now)
    if delta.total_seconds() <= 0:
        return 0
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY)


def unused_credit_cents(price_cents: int, cycle: PlanCycle, remaining_days: int) -> int:
    """Credit for unused time, rounded half-up to whole cents"""
    if remaining_days <= 0:
        return 0
    cycle_length = CYCLE_LENGTH_DAYS[PlanCycle(cycle).value]
    credit = Decimal(price_cents) * remaining_days / cycle_length
    return int(credit.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def estimate_proration(
    current: Optional[CurrentSubscriptionSnapshot],
    target: PlanSnapshot,
    now: Optional[datetime] = None,
) -> Union[ProrationPreview, IneligibleUpgrade]:
    """Estimate what switching to `target` would cost right now"""
    if now is None:
        now = datetime.now(timezone.utc)

    upgrade_type = classify_upgrade(current, target)
    if isinstance(upgrade_type, IneligibleUpgrade):
        logger.info(f"Plan change rejected: target={target.name}, reason={upgrade_type.reason}")
        return upgrade_type

    if upgrade_type is not UpgradeType.PLAN_CHANGE:
        return ProrationPreview(
            upgrade_type=upgrade_type,
            credit_cents=0,
            amount_due_cents=target.price_cents,
            days_remaining=0,
            is_estimate=False,
        )

    remaining = days_remaining(current.expires_at, now)
    credit = unused_credit_cents(current.plan.price_cents, current.plan.billing_cycle, remaining)
    return ProrationPreview(
        upgrade_type=upgrade_type,
        credit_cents=credit,
        amount_due_cents=max(0, target.price_cents - credit),
        days_remaining=remaining,
        is_estimate=True,
    )
