"""
Active resource counting per company.

Only rows with is_active = true count against a plan's quota; deactivated
rows are soft-deleted and ignored here.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.core.errors import BackingStoreUnavailable, UnknownResourceType
from app.db.models import CompanyUser, Contact, EmissionPoint, Establishment, Warehouse
from app.db.models.user import SELLER_ROLE_MARKERS
from app.db.session import STORE_UNAVAILABLE_ERRORS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CountableResource:
    """A model whose active rows count towards one quota key."""
    model: Any
    criteria: Tuple[Any, ...] = field(default_factory=tuple)


def _seller_role_criterion():
    role = func.lower(CompanyUser.role)
    return or_(*[role.contains(marker) for marker in SELLER_ROLE_MARKERS])


RESOURCE_MODELS: Dict[str, CountableResource] = {
    "establishments": CountableResource(Establishment),
    "emission_points": CountableResource(EmissionPoint),
    "warehouses": CountableResource(Warehouse),
    "contacts": CountableResource(Contact),
    "users": CountableResource(CompanyUser),
    "sellers": CountableResource(CompanyUser, (_seller_role_criterion(),)),
}


def get_countable_resource(resource_type: str) -> CountableResource:
    try:
        return RESOURCE_MODELS[resource_type]
    except KeyError:
        raise UnknownResourceType(resource_type) from None


def count_active(db: Session, company_id: int, resource_type: str) -> int:
    """
    Count active rows of a resource type owned by a company.

    Args:
        db: Database session (the caller's transaction, when gating)
        company_id: Company ID
        resource_type: Registered resource type, e.g. "establishments"

    Returns:
        Number of rows with is_active = true (>= 0)

    Raises:
        UnknownResourceType: resource_type is not registered
        BackingStoreUnavailable: the count query could not run
    """
    resource = get_countable_resource(resource_type)
    model = resource.model

    query = db.query(func.count(model.id)).filter(
        model.company_id == company_id,
        model.is_active.is_(True),
        *resource.criteria,
    )

    try:
        count = query.scalar()
    except STORE_UNAVAILABLE_ERRORS as e:
        logger.error(f"Active count failed: company_id={company_id}, resource={resource_type}: {e}")
        raise BackingStoreUnavailable(f"Could not count {resource_type} for company {company_id}") from e

    return int(count or 0)


def count_active_by_type(db: Session, company_id: int) -> Dict[str, int]:
    """Active counts for every registered resource type."""
    return {
        resource_type: count_active(db, company_id, resource_type)
        for resource_type in RESOURCE_MODELS
    }
