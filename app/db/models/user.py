from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint, true
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from app.db.base import Base

SELLER_ROLE_MARKERS = ("seller", "vendedor")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    full_name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    memberships = relationship("CompanyUser", back_populates="user")


class CompanyUser(Base):
    """
    Membership of a user in a company.

    Active memberships count towards the company's users quota; memberships
    with a seller role also count towards the sellers quota.
    """
    __tablename__ = "company_users"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    role = Column(String, nullable=False, default="seller")
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    user = relationship("User", back_populates="memberships")

    __table_args__ = (
        UniqueConstraint("company_id", "user_id", name="uq_company_user"),
    )

    @property
    def is_seller(self) -> bool:
        return is_seller_role(self.role)


def is_seller_role(role: str) -> bool:
    """Roles whose name mentions seller/vendedor count against max_sellers."""
    role_lower = (role or "").lower()
    return any(marker in role_lower for marker in SELLER_ROLE_MARKERS)
