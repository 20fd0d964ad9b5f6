"""
Entitlement gate for resource creation.

check_and_reserve() must run inside the same transaction as the insert it
guards:
1. Locks the company row (bumps companies.quota_revision)
2. Recounts active resources and resolves the plan limit
3. Returns the decision; the caller inserts and commits when allowed,
   or rolls back (releasing the lock) when not

Concurrent creations for the same company queue on step 1, so each one
counts the rows committed by the previous one.
"""
import logging
from typing import Iterable, Union

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.core.errors import BackingStoreUnavailable, CompanyNotFound
from app.db.models import Company
from app.db.session import STORE_UNAVAILABLE_ERRORS
from app.services.quota_service import QuotaDecision, evaluate

logger = logging.getLogger(__name__)


def lock_company(db: Session, company_id: int) -> None:
    """
    Take the company row lock for the rest of the transaction.

    An UPDATE rather than SELECT ... FOR UPDATE so SQLite serializes too.
    """
    try:
        updated = (
            db.query(Company)
            .filter(Company.id == company_id)
            .update({Company.quota_revision: Company.quota_revision + 1}, synchronize_session=False)
        )
    except STORE_UNAVAILABLE_ERRORS as e:
        logger.error(f"Could not lock company for quota check: company_id={company_id}: {e}")
        raise BackingStoreUnavailable(f"Could not lock company {company_id}") from e

    if not updated:
        raise CompanyNotFound(company_id)


def check_and_reserve(
    db: Session,
    company_id: int,
    resource_types: Union[str, Iterable[str]],
) -> QuotaDecision:
    """
    Gate one more resource for a company.

    Args:
        db: Session whose transaction will also perform the insert
        company_id: Company ID
        resource_types: One resource type, or several that must all have room
            (a seller membership needs both "users" and "sellers")

    Returns:
        The first rejecting decision, or the last decision when all allow

    Raises:
        CompanyNotFound, UnknownResourceType
        BackingStoreUnavailable: quota could not be verified; creation must not proceed
    """
    if isinstance(resource_types, str):
        resource_types = [resource_types]
    resource_types = list(resource_types)
    if not resource_types:
        raise ValueError("At least one resource type is required")

    lock_company(db, company_id)

    decision = None
    for resource_type in resource_types:
        decision = evaluate(db, company_id, resource_type)
        if not decision.allowed:
            logger.warning(
                f"Quota exceeded: company_id={company_id}, resource={resource_type}, "
                f"limit={decision.limit}, count={decision.count}"
            )
            return decision

    logger.info(
        f"Quota reserved: company_id={company_id}, resources={resource_types}, "
        f"remaining={decision.remaining if not decision.unlimited else 'unlimited'}"
    )
    return decision


def quota_exceeded_detail(decision: QuotaDecision) -> dict:
    """Structured payload for a rejected creation."""
    return {
        "error": "quota_exceeded",
        "resource": decision.resource,
        "limit_key": decision.limit_key,
        "count": decision.count,
        "limit": decision.limit,
        "remaining": 0,
        "message": (
            f"Your plan allows {decision.limit} active {decision.resource.replace('_', ' ')} "
            f"and {decision.count} are in use. Deactivate one or upgrade your plan."
        ),
    }


def quota_exceeded_http_error(decision: QuotaDecision) -> HTTPException:
    """HTTPException (403) carrying the exhausted quota's count and limit."""
    return HTTPException(
        status_code=status.HTTP_403_FORBIDDEN,
        detail=quota_exceeded_detail(decision),
    )
