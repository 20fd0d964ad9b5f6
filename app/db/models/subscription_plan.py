from sqlalchemy import Column, Integer, String, Numeric, Boolean, JSON, true
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from app.db.base import Base

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
LimitsDocument = JSON().with_variant(JSONB(), "postgresql")


class SubscriptionPlan(Base):
    """
    A named bundle of quota limits a company subscribes to.

    `limits` maps quota keys (max_establishments, max_total_users, ...) to an
    integer cap or -1 for unlimited. Always assign a new dict when editing it:
    in-place mutation of the JSON value is not tracked.
    """
    __tablename__ = "subscription_plans"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, unique=True, nullable=False, index=True)
    price = Column(Numeric(12, 2), nullable=False, default=0)
    implementation_fee = Column(Numeric(12, 2), nullable=False, default=0)
    limits = Column(LimitsDocument, nullable=False, default=dict)
    modules = Column(LimitsDocument, nullable=False, default=dict)
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())

    companies = relationship("Company", back_populates="plan")

    def __repr__(self):
        return f"<SubscriptionPlan(id={self.id}, name={self.name!r})>"
