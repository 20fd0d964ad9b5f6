"""
Pydantic schemas for countable resources.
"""
from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field


class EstablishmentCreate(BaseModel):
    code: str = Field(..., description="Three digit series", pattern=r"^\d{3}$")
    name: str = Field(..., min_length=1, max_length=255)
    address: Optional[str] = Field(None, max_length=500)


class EstablishmentResponse(EstablishmentCreate):
    id: int
    company_id: int
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class EmissionPointCreate(BaseModel):
    code: str = Field(..., description="Three digit series", pattern=r"^\d{3}$")
    description: Optional[str] = Field(None, max_length=255)


class EmissionPointResponse(EmissionPointCreate):
    id: int
    company_id: int
    establishment_id: int
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class WarehouseCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=500)


class WarehouseResponse(WarehouseCreate):
    id: int
    company_id: int
    establishment_id: int
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class ContactCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    tax_id: Optional[str] = Field(None, max_length=20)
    contact_type: str = Field("client", pattern="^(client|provider|employee)$")


class ContactResponse(ContactCreate):
    id: int
    company_id: int
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CompanyUserCreate(BaseModel):
    user_id: int = Field(..., description="Existing user to assign")
    role: str = Field("seller", min_length=1, max_length=50, description="Role name within the company")


class CompanyUserResponse(CompanyUserCreate):
    id: int
    company_id: int
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
