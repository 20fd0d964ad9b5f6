from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, true
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.db.base import Base


class Company(Base):
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    ruc_nit = Column(String, unique=True, nullable=False, index=True)
    plan_id = Column(Integer, ForeignKey("subscription_plans.id", ondelete="SET NULL"), nullable=True, index=True)
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())

    # Bumped by every gated reservation; the row the entitlement gate locks
    quota_revision = Column(Integer, nullable=False, default=0, server_default="0")

    created_at = Column(DateTime(timezone=True), server_default=func.now())

    plan = relationship("SubscriptionPlan", back_populates="companies")

    def __repr__(self):
        return f"<Company(id={self.id}, name={self.name!r}, plan_id={self.plan_id})>"
