"""
Subscription plan catalog.

Reads plans, applies administrative edits and assigns plans to companies.
Every edit is validated and stores fallback keys explicitly, so documents
written here resolve the same way at read time.
"""
import logging
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from app.core.errors import PlanNotFound
from app.core.plan_limits import (
    DEFAULT_PLAN_CATALOG,
    QUOTA_KEYS,
    materialize_fallbacks,
    validate_limits,
)
from app.db.models import Company, SubscriptionPlan
from app.services.quota_service import get_company

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("name", "price", "implementation_fee", "modules", "is_active")


def seed_default_plans(db: Session) -> int:
    """
    Insert the default plans that do not exist yet (matched by name).

    Returns:
        Number of plans created
    """
    existing = {name for (name,) in db.query(SubscriptionPlan.name).all()}
    created = 0
    for plan_data in DEFAULT_PLAN_CATALOG:
        if plan_data["name"] in existing:
            continue
        db.add(SubscriptionPlan(
            name=plan_data["name"],
            price=Decimal(plan_data["price"]),
            implementation_fee=Decimal("0"),
            limits=dict(plan_data["limits"]),
            modules=dict(plan_data["modules"]),
            is_active=True,
        ))
        created += 1
    db.flush()
    if created:
        logger.info(f"Seeded {created} subscription plans")
    return created


def list_plans(db: Session, include_inactive: bool = False) -> List[SubscriptionPlan]:
    query = db.query(SubscriptionPlan)
    if not include_inactive:
        query = query.filter(SubscriptionPlan.is_active.is_(True))
    return query.order_by(SubscriptionPlan.price.asc(), SubscriptionPlan.id.asc()).all()


def get_plan(db: Session, plan_id: int) -> SubscriptionPlan:
    plan = db.query(SubscriptionPlan).filter(SubscriptionPlan.id == plan_id).first()
    if not plan:
        raise PlanNotFound(plan_id)
    return plan


def get_plan_by_name(db: Session, name: str) -> SubscriptionPlan:
    plan = db.query(SubscriptionPlan).filter(SubscriptionPlan.name == name).first()
    if not plan:
        raise PlanNotFound(name)
    return plan


def update_plan(db: Session, plan_id: int, changes: Dict[str, Any]) -> SubscriptionPlan:
    """
    Administrative plan edit.

    Submitted limits are merged over the stored document: keys are never
    dropped by an edit. The merged document is validated, then fallback keys
    are written out.

    Raises:
        PlanNotFound: plan does not exist
        InvalidPlanData: a limit is illegal or sellers exceed total users
    """
    plan = get_plan(db, plan_id)

    if changes.get("limits") is not None:
        merged = dict(plan.limits or {})
        merged.update(changes["limits"])
        validate_limits(merged)
        plan.limits = materialize_fallbacks(merged)

    for field_name in EDITABLE_FIELDS:
        if changes.get(field_name) is not None:
            setattr(plan, field_name, changes[field_name])

    db.commit()
    db.refresh(plan)

    logger.info(f"Subscription plan updated: plan_id={plan.id}, name={plan.name!r}, limits={plan.limits}")
    return plan


def set_plan_limit(db: Session, plan_name: str, key: str, value: int) -> bool:
    """
    Set one quota key on a plan, looked up by name.

    Idempotent: nothing is written when the stored value already matches.
    Like update_plan, fallback keys are written out on change.

    Returns:
        True if the plan changed
    """
    plan = get_plan_by_name(db, plan_name)
    current = dict(plan.limits or {})

    if key in current and current[key] == value:
        logger.info(f"Plan {plan_name!r} already has {key}={value}, nothing to do")
        return False

    current[key] = value
    if key in QUOTA_KEYS:
        validate_limits(current)
    plan.limits = materialize_fallbacks(current)
    db.commit()

    logger.info(f"Plan {plan_name!r} updated: {key}={value}")
    return True


def assign_plan(db: Session, company_id: int, plan_id: int) -> Company:
    """Subscribe a company to a plan."""
    company = get_company(db, company_id)
    plan = get_plan(db, plan_id)
    company.plan_id = plan.id
    db.commit()
    db.refresh(company)

    logger.info(f"Company subscribed: company_id={company.id}, plan={plan.name!r}")
    return company
