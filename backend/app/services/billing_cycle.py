"""Billing cycle date arithmetic

Pure functions: no I/O and no state. The only ambient input is "today", which
callers may pass in explicitly so that a batch sees one stable value.

Month and year steps use dateutil's relativedelta, which clamps to the last
valid day of the target month:

    2024-01-31 + 1 month -> 2024-02-29
    2024-02-29 + 1 year  -> 2025-02-28

Stepping is applied to the previous result, so a clamped day carries forward
(01-31 -> 02-29 -> 03-29).
"""
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional, Union

from dateutil.relativedelta import relativedelta

DateLike = Union[date, datetime]


class BillingCycle(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class InvalidCycleError(ValueError):
    """Raised for a billing cycle value outside BillingCycle"""

    def __init__(self, cycle):
        super().__init__(f"Unknown billing cycle: {cycle!r}")
        self.cycle = cycle


def parse_cycle(cycle) -> BillingCycle:
    """Coerce a string or BillingCycle, raising InvalidCycleError otherwise"""
    if isinstance(cycle, BillingCycle):
        return cycle
    try:
        return BillingCycle(cycle)
    except ValueError:
        raise InvalidCycleError(cycle) from None


def normalize_repeat_every(repeat_every: Optional[int]) -> int:
    """Non-positive (or missing) counts are treated as 1"""
    if repeat_every is None or repeat_every < 1:
        return 1
    return int(repeat_every)


def advance_one_cycle(value: DateLike, cycle, repeat_every: int = 1) -> DateLike:
    """Advance `value` by `repeat_every` units of `cycle`.

    Returns the same type that was passed in (date or datetime).
    """
    cycle = parse_cycle(cycle)
    n = normalize_repeat_every(repeat_every)

    if cycle is BillingCycle.DAILY:
        return value + timedelta(days=n)
    if cycle is BillingCycle.WEEKLY:
        return value + timedelta(days=7 * n)
    if cycle is BillingCycle.MONTHLY:
        return value + relativedelta(months=n)
    if cycle is BillingCycle.YEARLY:
        return value + relativedelta(years=n)
    raise InvalidCycleError(cycle)


def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def next_billing_date_on_or_after_now(
    from_date: DateLike,
    cycle,
    repeat_every: int = 1,
    now: Optional[DateLike] = None,
) -> date:
    """First date reachable from `from_date` by whole cycles that is after today.

    Both `from_date` and `now` are compared as calendar dates; time of day is
    dropped. If `from_date` is already in the future it is returned as is.

    Callers use this both for a new record (from its start date) and to catch
    up a stale record (from its stored next billing date).
    """
    cycle = parse_cycle(cycle)
    n = normalize_repeat_every(repeat_every)
    today = _as_date(now) if now is not None else date.today()

    next_date = _as_date(from_date)
    while next_date <= today:
        next_date = advance_one_cycle(next_date, cycle, n)
    return next_date
