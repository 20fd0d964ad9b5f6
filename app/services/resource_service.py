"""
Countable resource lifecycle: create, deactivate, reactivate, list.

Creation and reactivation pass the entitlement gate first, in the same
transaction as the write. Deactivation is a soft delete and is never gated.
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.errors import BackingStoreUnavailable, EntitlementError, ResourceConflict, ResourceNotFound
from app.core.quota_guard import check_and_reserve
from app.db.models import CompanyUser, Contact, EmissionPoint, Establishment, User, Warehouse
from app.db.models.user import is_seller_role
from app.db.session import STORE_UNAVAILABLE_ERRORS
from app.services.quota_service import QuotaDecision
from app.services.resource_counter import get_countable_resource

logger = logging.getLogger(__name__)


@dataclass
class ResourceResult:
    """Outcome of a gated write: the resource, or the decision that rejected it."""
    decision: Optional[QuotaDecision]
    resource: Any = None

    @property
    def rejected(self) -> bool:
        return self.decision is not None and not self.decision.allowed


def gate_types_for(resource_type: str, resource: Any = None) -> List[str]:
    """Resource types a row must have room in (seller memberships need two)."""
    if resource_type == "users" and resource is not None and is_seller_role(resource.role):
        return ["users", "sellers"]
    return [resource_type]


def _gated_write(
    db: Session,
    company_id: int,
    resource_types: Sequence[str],
    write: Callable[[], Any],
) -> ResourceResult:
    """
    Run check_and_reserve, then `write` and commit, all in one transaction.

    On rejection the transaction is rolled back and nothing is written.
    """
    try:
        decision = check_and_reserve(db, company_id, resource_types)
        if not decision.allowed:
            db.rollback()
            return ResourceResult(decision=decision)

        resource = write()
        db.commit()
        db.refresh(resource)
        return ResourceResult(decision=decision, resource=resource)

    except STORE_UNAVAILABLE_ERRORS as e:
        db.rollback()
        logger.error(f"Gated write failed: company_id={company_id}, resources={list(resource_types)}: {e}")
        raise BackingStoreUnavailable(f"Could not write {resource_types[0]} for company {company_id}") from e
    except IntegrityError as e:
        db.rollback()
        raise ResourceConflict(f"{resource_types[0]} already exists for company {company_id}") from e
    except EntitlementError:
        db.rollback()
        raise
    except Exception:
        db.rollback()
        logger.error(f"Gated write failed: company_id={company_id}, resources={list(resource_types)}", exc_info=True)
        raise


def _create(db: Session, company_id: int, resource_type: str, resource: Any) -> ResourceResult:
    def write():
        db.add(resource)
        db.flush()
        return resource

    result = _gated_write(db, company_id, gate_types_for(resource_type, resource), write)
    if not result.rejected:
        logger.info(f"Created {resource_type}: id={result.resource.id}, company_id={company_id}")
    return result


def _get_establishment(db: Session, establishment_id: int) -> Establishment:
    establishment = db.query(Establishment).filter(Establishment.id == establishment_id).first()
    if not establishment:
        raise ResourceNotFound("establishments", establishment_id)
    return establishment


def create_establishment(db: Session, company_id: int, data) -> ResourceResult:
    establishment = Establishment(
        company_id=company_id,
        code=data.code,
        name=data.name,
        address=data.address,
        is_active=True,
    )
    return _create(db, company_id, "establishments", establishment)


def create_emission_point(db: Session, establishment_id: int, data) -> ResourceResult:
    establishment = _get_establishment(db, establishment_id)
    emission_point = EmissionPoint(
        company_id=establishment.company_id,
        establishment_id=establishment.id,
        code=data.code,
        description=data.description,
        is_active=True,
    )
    return _create(db, establishment.company_id, "emission_points", emission_point)


def create_warehouse(db: Session, establishment_id: int, data) -> ResourceResult:
    establishment = _get_establishment(db, establishment_id)
    warehouse = Warehouse(
        company_id=establishment.company_id,
        establishment_id=establishment.id,
        name=data.name,
        description=data.description,
        is_active=True,
    )
    return _create(db, establishment.company_id, "warehouses", warehouse)


def create_contact(db: Session, company_id: int, data) -> ResourceResult:
    contact = Contact(
        company_id=company_id,
        name=data.name,
        tax_id=data.tax_id,
        contact_type=data.contact_type,
        is_active=True,
    )
    return _create(db, company_id, "contacts", contact)


def assign_user_to_company(db: Session, company_id: int, data) -> ResourceResult:
    """Assign an existing user to a company (gated on users, and sellers for seller roles)."""
    if not db.query(User).filter(User.id == data.user_id).first():
        raise ResourceNotFound("user", data.user_id)

    membership = CompanyUser(
        company_id=company_id,
        user_id=data.user_id,
        role=data.role,
        is_active=True,
    )
    return _create(db, company_id, "users", membership)


def get_resource(db: Session, resource_type: str, resource_id: int) -> Any:
    model = get_countable_resource(resource_type).model
    resource = db.query(model).filter(model.id == resource_id).first()
    if not resource:
        raise ResourceNotFound(resource_type, resource_id)
    return resource


def list_resources(db: Session, company_id: int, resource_type: str, include_inactive: bool = True) -> List[Any]:
    model = get_countable_resource(resource_type).model
    query = db.query(model).filter(model.company_id == company_id)
    if not include_inactive:
        query = query.filter(model.is_active.is_(True))
    return query.order_by(model.id.asc()).all()


def list_establishment_resources(db: Session, establishment_id: int, resource_type: str) -> List[Any]:
    """Emission points or warehouses of one establishment."""
    _get_establishment(db, establishment_id)
    model = get_countable_resource(resource_type).model
    return db.query(model).filter(model.establishment_id == establishment_id).order_by(model.id.asc()).all()


def deactivate_resource(db: Session, resource_type: str, resource_id: int) -> Any:
    """Soft delete: the row stays, it just stops counting."""
    resource = get_resource(db, resource_type, resource_id)
    if resource.is_active:
        resource.is_active = False
        db.commit()
        db.refresh(resource)
        logger.info(f"Deactivated {resource_type}: id={resource_id}, company_id={resource.company_id}")
    return resource


def activate_resource(db: Session, resource_type: str, resource_id: int) -> ResourceResult:
    """
    Reactivate a soft-deleted resource.

    Goes through the entitlement gate exactly like creation. Already active
    resources are returned as-is without a decision.
    """
    resource = get_resource(db, resource_type, resource_id)
    if resource.is_active:
        return ResourceResult(decision=None, resource=resource)

    def write():
        resource.is_active = True
        return resource

    result = _gated_write(db, resource.company_id, gate_types_for(resource_type, resource), write)
    if not result.rejected:
        logger.info(f"Reactivated {resource_type}: id={resource_id}, company_id={resource.company_id}")
    return result
