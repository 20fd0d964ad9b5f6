from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Index, true
from sqlalchemy.sql import func
from app.db.base import Base


class Establishment(Base):
    __tablename__ = "establishments"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)
    code = Column(String(3), nullable=False)  # SRI series, e.g. "001"
    name = Column(String, nullable=False)
    address = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("idx_establishments_company_active", "company_id", "is_active"),
    )
