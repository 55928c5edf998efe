# Import every model (for Alembic autogenerate)
from app.models.plan import Plan
from app.models.user_plan import UserPlan
from app.models.subscription import Subscription

__all__ = [
    "Plan",
    "UserPlan",
    "Subscription",
]
