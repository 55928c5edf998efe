from pydantic import BaseModel, Field, field_validator
from typing import Literal, Optional
from datetime import date, datetime

BillingCycleValue = Literal["daily", "weekly", "monthly", "yearly"]


class SubscriptionCreateRequest(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    amount: int = Field(ge=0, description="Amount in cents")
    currency: str = Field(default="USD", min_length=3, max_length=3)
    billing_cycle: BillingCycleValue = "monthly"
    frequency: int = Field(default=1, description="Bill every N cycles")
    start_date: date
    next_billing_date: Optional[date] = None
    free_trial_end_date: Optional[date] = None
    auto_renew: bool = True
    notes: Optional[str] = None


class SubscriptionUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    amount: Optional[int] = Field(default=None, ge=0)
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    billing_cycle: Optional[BillingCycleValue] = None
    frequency: Optional[int] = None
    start_date: Optional[date] = None
    next_billing_date: Optional[date] = None
    free_trial_end_date: Optional[date] = None
    auto_renew: Optional[bool] = None
    notes: Optional[str] = None

    @field_validator(
        "name", "amount", "currency", "billing_cycle", "frequency", "start_date", "auto_renew",
    )
    @classmethod
    def not_null(cls, value):
        # Omitted means unchanged; null is only accepted on clearable fields
        if value is None:
            raise ValueError("may not be null")
        return value


class SubscriptionInfo(BaseModel):
    id: int
    name: str
    amount: int
    currency: str
    billing_cycle: str
    frequency: int
    start_date: date
    next_billing_date: Optional[date] = None
    free_trial_end_date: Optional[date] = None
    auto_renew: bool
    notified_for_current_cycle: bool
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
