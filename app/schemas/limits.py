"""
Pydantic schemas for quota and limit-info endpoints.
"""
from typing import Dict, Optional
from pydantic import BaseModel, Field


class LimitInfo(BaseModel):
    """Active count and plan limit for one resource type."""
    count: int = Field(..., ge=0, description="Active resources of this type")
    limit: int = Field(..., ge=-1, description="Plan limit (-1 for unlimited)")

    class Config:
        json_schema_extra = {
            "example": {"count": 1, "limit": 3}
        }


class UserLimitInfo(BaseModel):
    """Users and sellers counts and limits for a company."""
    total_count: int = Field(..., ge=0, description="Active company users")
    total_limit: int = Field(..., ge=-1, description="max_total_users (-1 for unlimited)")
    sellers_count: int = Field(..., ge=0, description="Active users with a seller role")
    sellers_limit: int = Field(..., ge=-1, description="max_sellers (-1 for unlimited)")


class QuotaDecisionResponse(BaseModel):
    """Quota decision for one resource type."""
    resource: str = Field(..., description="Resource type (establishments, warehouses, ...)")
    limit_key: str = Field(..., description="Quota key in the plan's limits")
    count: int = Field(..., description="Active resources of this type")
    limit: int = Field(..., description="Plan limit (-1 for unlimited)")
    allowed: bool = Field(..., description="Whether one more can be created")
    remaining: int = Field(..., description="Remaining quota (-1 for unlimited)")
    unlimited: bool = Field(..., description="Whether this resource type is unlimited")


class CompanyLimitsResponse(BaseModel):
    """Response schema for GET /companies/{company_id}/limits."""
    company_id: int = Field(..., description="Company ID")
    plan: Optional[str] = Field(None, description="Subscription plan name (None if no plan)")
    resources: Dict[str, QuotaDecisionResponse] = Field(..., description="Per-resource decisions")

    class Config:
        json_schema_extra = {
            "example": {
                "company_id": 1,
                "plan": "Plan Pyme",
                "resources": {
                    "establishments": {
                        "resource": "establishments",
                        "limit_key": "max_establishments",
                        "count": 2,
                        "limit": 2,
                        "allowed": False,
                        "remaining": 0,
                        "unlimited": False
                    }
                }
            }
        }

