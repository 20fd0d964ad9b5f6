"""
Subscription plan endpoints.

Administrative edits are validated and merged; authentication of the
administrator happens upstream.
"""
import logging
from typing import List
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.schemas.plan import SubscriptionPlanResponse, SubscriptionPlanUpdate
from app.services import plan_catalog_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/subscription-plans", tags=["Subscription Plans"])


@router.get("", response_model=List[SubscriptionPlanResponse])
def list_subscription_plans(
    include_inactive: bool = Query(False, description="Include plans no longer offered"),
    db: Session = Depends(get_db)
):
    plans = plan_catalog_service.list_plans(db, include_inactive=include_inactive)
    return [SubscriptionPlanResponse.model_validate(p) for p in plans]


@router.get("/{plan_id}", response_model=SubscriptionPlanResponse)
def get_subscription_plan(plan_id: int, db: Session = Depends(get_db)):
    return SubscriptionPlanResponse.model_validate(plan_catalog_service.get_plan(db, plan_id))


@router.patch("/{plan_id}", response_model=SubscriptionPlanResponse)
def update_subscription_plan(plan_id: int, data: SubscriptionPlanUpdate, db: Session = Depends(get_db)):
    """
    Edit a plan.

    - limits are merged over the stored document (keys are never removed)
    - max_sellers may not exceed max_total_users unless either is -1
    - responds 400 on illegal limit values
    """
    plan = plan_catalog_service.update_plan(db, plan_id, data.model_dump(exclude_unset=True))
    logger.debug(f"Plan edit applied: plan_id={plan_id}")
    return SubscriptionPlanResponse.model_validate(plan)
