from pydantic import BaseModel, Field
from typing import Literal


class PlanChangeRequest(BaseModel):
    plan_slug: str = Field(min_length=1, max_length=64)


class ProrationPreviewResponse(BaseModel):
    plan_slug: str
    plan_name: str
    upgrade_type: Literal["new_subscription", "plan_change", "immediate_charge"]
    credit_cents: int
    amount_due_cents: int
    days_remaining: int
    is_estimate: bool


class PlanChangeResponse(BaseModel):
    plan_slug: str
    upgrade_type: Literal["new_subscription", "plan_change", "immediate_charge"]
    # What the payment provider should do next; the provider computes the final amount
    provider_action: Literal["checkout", "update_subscription", "one_time_charge"]
    cancels_current: bool
