from sqlalchemy import Column, Integer, String, Boolean, Text, DateTime, Enum as SAEnum, func
from app.core.database import Base


class Plan(Base):
    __tablename__ = "plans"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(64), nullable=False, unique=True, comment="free / pro / lifetime ...")
    description = Column(Text, nullable=True)
    price = Column(Integer, nullable=False, default=0, comment="Price in cents")
    currency = Column(String(3), nullable=False, default="USD")
    billing_cycle = Column(
        SAEnum("free", "monthly", "yearly", "lifetime", name="plan_billing_cycle"),
        nullable=False,
        default="monthly",
    )
    is_active = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0, comment="Display order (lower first)")

    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now(), onupdate=func.now())
