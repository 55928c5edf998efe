from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime, Text, func
from app.core.database import Base


class Subscription(Base):
    """A third-party subscription tracked by a user (streaming, SaaS, ...)"""

    __tablename__ = "subscriptions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(Integer, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    amount = Column(Integer, nullable=False, default=0, comment="Amount in cents")
    currency = Column(String(3), nullable=False, default="USD")
    # Stored as text; validated by the API schema and parse_cycle
    billing_cycle = Column(String(16), nullable=False, default="monthly", comment="daily / weekly / monthly / yearly")
    frequency = Column(Integer, nullable=False, default=1, comment="Bill every N cycles")
    start_date = Column(Date, nullable=False)
    next_billing_date = Column(Date, nullable=True, index=True)
    free_trial_end_date = Column(Date, nullable=True)
    auto_renew = Column(Boolean, nullable=False, default=True)
    notified_for_current_cycle = Column(Boolean, nullable=False, default=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())
