from sqlalchemy import Column, Integer, String, DateTime, Enum as SAEnum, ForeignKey, func
from sqlalchemy.orm import relationship
from app.core.database import Base


class UserPlan(Base):
    __tablename__ = "user_plans"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)
    plan_id = Column(Integer, ForeignKey("plans.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(
        SAEnum("active", "cancelled", "expired", "past_due", "trialing", name="user_plan_status"),
        nullable=False,
        default="active",
    )
    start_date = Column(DateTime, nullable=False, server_default=func.now())
    expires_at = Column(DateTime, nullable=True, comment="NULL for free and lifetime plans")
    cancelled_at = Column(DateTime, nullable=True)
    payment_provider = Column(String(32), nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())

    plan = relationship("Plan", lazy="joined")
