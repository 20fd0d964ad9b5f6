from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, Index, true
from sqlalchemy.sql import func
from app.db.base import Base


class Warehouse(Base):
    __tablename__ = "warehouses"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False, index=True)
    establishment_id = Column(Integer, ForeignKey("establishments.id"), nullable=False, index=True)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    __table_args__ = (
        Index("idx_warehouses_company_active", "company_id", "is_active"),
    )
