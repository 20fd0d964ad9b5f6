"""
Establishment endpoints.

Creation and reactivation are gated by the company's max_establishments quota.
"""
from typing import List
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.core.quota_guard import quota_exceeded_http_error
from app.schemas.limits import LimitInfo
from app.schemas.resources import EstablishmentCreate, EstablishmentResponse
from app.services import resource_service
from app.services.quota_service import get_limit_info

router = APIRouter(prefix="/establishments", tags=["Establishments"])

RESOURCE_TYPE = "establishments"


@router.post("/company/{company_id}", status_code=status.HTTP_201_CREATED, response_model=EstablishmentResponse)
def create_establishment(company_id: int, data: EstablishmentCreate, db: Session = Depends(get_db)):
    """
    Create an establishment for a company.

    Responds 403 with the current count and limit when the plan's quota is exhausted.
    """
    result = resource_service.create_establishment(db, company_id, data)
    if result.rejected:
        raise quota_exceeded_http_error(result.decision)
    return EstablishmentResponse.model_validate(result.resource)


@router.get("/company/{company_id}", response_model=List[EstablishmentResponse])
def list_establishments(
    company_id: int,
    include_inactive: bool = Query(True, description="Include deactivated establishments"),
    db: Session = Depends(get_db)
):
    establishments = resource_service.list_resources(db, company_id, RESOURCE_TYPE, include_inactive)
    return [EstablishmentResponse.model_validate(e) for e in establishments]


@router.get("/company/{company_id}/limit-info", response_model=LimitInfo)
def establishment_limit_info(company_id: int, db: Session = Depends(get_db)):
    """Active establishments and the plan limit (-1 for unlimited)."""
    return get_limit_info(db, company_id, RESOURCE_TYPE)


@router.patch("/{establishment_id}/deactivate", response_model=EstablishmentResponse)
def deactivate_establishment(establishment_id: int, db: Session = Depends(get_db)):
    establishment = resource_service.deactivate_resource(db, RESOURCE_TYPE, establishment_id)
    return EstablishmentResponse.model_validate(establishment)


@router.patch("/{establishment_id}/activate", response_model=EstablishmentResponse)
def activate_establishment(establishment_id: int, db: Session = Depends(get_db)):
    result = resource_service.activate_resource(db, RESOURCE_TYPE, establishment_id)
    if result.rejected:
        raise quota_exceeded_http_error(result.decision)
    return EstablishmentResponse.model_validate(result.resource)
