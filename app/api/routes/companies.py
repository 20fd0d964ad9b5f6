"""
Company entitlement endpoints: plan assignment and limits summary.
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.schemas.limits import CompanyLimitsResponse
from app.schemas.plan import PlanAssignment, SubscriptionPlanResponse
from app.services import plan_catalog_service
from app.services.quota_service import get_company_limits

router = APIRouter(prefix="/companies", tags=["Companies"])


@router.get("/{company_id}/limits", response_model=CompanyLimitsResponse)
def company_limits(company_id: int, db: Session = Depends(get_db)):
    """
    Quota decision for every resource type.

    Each entry has: resource, limit_key, count, limit, allowed, remaining, unlimited.
    """
    return get_company_limits(db, company_id)


@router.put("/{company_id}/plan", response_model=SubscriptionPlanResponse)
def assign_company_plan(company_id: int, data: PlanAssignment, db: Session = Depends(get_db)):
    company = plan_catalog_service.assign_plan(db, company_id, data.plan_id)
    return SubscriptionPlanResponse.model_validate(company.plan)
