"""
Pydantic schemas for subscription plan endpoints.
"""
from decimal import Decimal
from typing import Dict, Optional, Any
from pydantic import BaseModel, Field


class SubscriptionPlanResponse(BaseModel):
    id: int = Field(..., description="Plan ID")
    name: str = Field(..., description="Plan name")
    price: Decimal = Field(..., description="Monthly price")
    implementation_fee: Decimal = Field(..., description="One-off implementation fee")
    limits: Dict[str, Any] = Field(..., description="Quota key -> cap (-1 for unlimited)")
    modules: Dict[str, Any] = Field(..., description="Module flags")
    is_active: bool = Field(..., description="Whether the plan is offered")

    class Config:
        from_attributes = True
        json_schema_extra = {
            "example": {
                "id": 1,
                "name": "Plan Pyme",
                "price": "45.00",
                "implementation_fee": "0.00",
                "limits": {"max_sellers": 3, "max_total_users": 3, "max_establishments": 2},
                "modules": {"audit": True, "logistics": False},
                "is_active": True
            }
        }


class SubscriptionPlanUpdate(BaseModel):
    """Administrative plan edit. Submitted limits are merged over the stored ones."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    price: Optional[Decimal] = Field(None, ge=0)
    implementation_fee: Optional[Decimal] = Field(None, ge=0)
    limits: Optional[Dict[str, Any]] = Field(None, description="Quota keys to set")
    modules: Optional[Dict[str, bool]] = Field(None)
    is_active: Optional[bool] = Field(None)


class PlanAssignment(BaseModel):
    plan_id: int = Field(..., description="Subscription plan ID")
