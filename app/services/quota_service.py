"""
Quota service: evaluates a company's plan limits against its active resources.

Produces structured decisions (count, limit, allowed, remaining) for the
entitlement gate on the write path and for limit-info queries on the read path.
Quota exhaustion is an ordinary outcome and is returned, never raised.
"""
import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional, Tuple

from sqlalchemy.orm import Session

from app.core.errors import BackingStoreUnavailable, CompanyNotFound
from app.core.plan_limits import UNLIMITED, limit_key_for, resolve_limit
from app.db.models import Company
from app.db.session import STORE_UNAVAILABLE_ERRORS
from app.services.resource_counter import RESOURCE_MODELS, count_active

logger = logging.getLogger(__name__)

# What the read path reports when the store cannot be queried
LIMIT_INFO_FALLBACK: Dict[str, int] = {"count": 0, "limit": UNLIMITED}


@dataclass(frozen=True)
class QuotaDecision:
    """Outcome of evaluating one resource type for one company."""
    resource: str
    limit_key: str
    count: int
    limit: int
    allowed: bool
    remaining: int

    @property
    def unlimited(self) -> bool:
        return self.limit == UNLIMITED

    def to_limit_info(self) -> Dict[str, int]:
        return {"count": self.count, "limit": self.limit}

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["unlimited"] = self.unlimited
        return data


def decide(count: int, limit: int) -> Tuple[bool, int]:
    """
    Apply the quota rule to a count and a resolved limit.

    Returns:
        (allowed, remaining); remaining is -1 when unlimited, never a large
        finite number. A limit of 0 denies like any exhausted quota.
    """
    if limit < UNLIMITED:
        logger.warning(f"Negative limit {limit} reached the evaluator, treating as unlimited")
        limit = UNLIMITED

    if limit == UNLIMITED:
        return True, UNLIMITED

    return count < limit, max(limit - count, 0)


def build_decision(resource_type: str, count: int, limit: int) -> QuotaDecision:
    """Build a QuotaDecision from already-known count and limit."""
    allowed, remaining = decide(count, limit)
    return QuotaDecision(
        resource=resource_type,
        limit_key=limit_key_for(resource_type),
        count=count,
        limit=max(limit, UNLIMITED),
        allowed=allowed,
        remaining=remaining,
    )


def get_company(db: Session, company_id: int) -> Company:
    """Load a company or raise CompanyNotFound."""
    try:
        company = db.query(Company).filter(Company.id == company_id).first()
    except STORE_UNAVAILABLE_ERRORS as e:
        logger.error(f"Company lookup failed: company_id={company_id}: {e}")
        raise BackingStoreUnavailable(f"Could not load company {company_id}") from e

    if not company:
        raise CompanyNotFound(company_id)
    return company


def get_limits_document(company: Company) -> Dict[str, Any]:
    """
    The limits document governing a company.

    Companies without a plan get an empty document, i.e. every key unlimited.
    """
    if company.plan is None:
        logger.warning(f"Company has no subscription plan, limits resolve as unlimited: company_id={company.id}")
        return {}
    return dict(company.plan.limits or {})


def resolve_company_limit(db: Session, company_id: int, resource_type: str) -> int:
    """Resolved limit of one resource type for a company's plan."""
    key = limit_key_for(resource_type)
    company = get_company(db, company_id)
    try:
        limits = get_limits_document(company)
    except STORE_UNAVAILABLE_ERRORS as e:
        raise BackingStoreUnavailable(f"Could not load plan for company {company_id}") from e
    return resolve_limit(limits, key)


def evaluate(db: Session, company_id: int, resource_type: str) -> QuotaDecision:
    """
    Evaluate whether a company may hold one more resource of a type.

    Args:
        db: Database session
        company_id: Company ID
        resource_type: Registered resource type, e.g. "warehouses"

    Returns:
        QuotaDecision with count, limit, allowed and remaining

    Raises:
        UnknownResourceType, CompanyNotFound, BackingStoreUnavailable
    """
    limit = resolve_company_limit(db, company_id, resource_type)
    count = count_active(db, company_id, resource_type)
    decision = build_decision(resource_type, count, limit)

    logger.debug(
        f"Quota evaluated: company_id={company_id}, resource={resource_type}, "
        f"count={decision.count}, limit={decision.limit}, allowed={decision.allowed}"
    )
    return decision


def get_limit_info(db: Session, company_id: int, resource_type: str) -> Dict[str, int]:
    """
    Read-only {count, limit} for client consumption.

    No locking: the answer may be slightly stale under concurrent writes.
    If the store cannot be queried the answer is {count: 0, limit: -1}.
    """
    try:
        return evaluate(db, company_id, resource_type).to_limit_info()
    except BackingStoreUnavailable as e:
        logger.warning(f"Limit info unavailable, reporting unlimited: company_id={company_id}, resource={resource_type}: {e}")
        return dict(LIMIT_INFO_FALLBACK)


def get_user_limit_info(db: Session, company_id: int) -> Dict[str, int]:
    """Users and sellers counts and limits, as shown when assigning users."""
    users = get_limit_info(db, company_id, "users")
    sellers = get_limit_info(db, company_id, "sellers")
    return {
        "total_count": users["count"],
        "total_limit": users["limit"],
        "sellers_count": sellers["count"],
        "sellers_limit": sellers["limit"],
    }


def get_company_limits(db: Session, company_id: int) -> Dict[str, Any]:
    """
    Quota decisions for every resource type, formatted for the limits summary.

    Returns:
        Dictionary with company_id, plan name and per-resource decisions
    """
    company = get_company(db, company_id)
    plan_name: Optional[str] = company.plan.name if company.plan else None

    resources = {
        resource_type: evaluate(db, company_id, resource_type).to_dict()
        for resource_type in RESOURCE_MODELS
    }

    return {
        "company_id": company_id,
        "plan": plan_name,
        "resources": resources,
    }
