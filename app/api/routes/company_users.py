"""
Company user endpoints.

A membership counts against max_total_users; seller memberships also count
against max_sellers, and both must have room.
"""
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.core.quota_guard import quota_exceeded_http_error
from app.schemas.limits import UserLimitInfo
from app.schemas.resources import CompanyUserCreate, CompanyUserResponse
from app.services import resource_service
from app.services.quota_service import get_user_limit_info

router = APIRouter(prefix="/company-users", tags=["Company Users"])

RESOURCE_TYPE = "users"


@router.post("/company/{company_id}", status_code=status.HTTP_201_CREATED, response_model=CompanyUserResponse)
def assign_user(company_id: int, data: CompanyUserCreate, db: Session = Depends(get_db)):
    """Assign an existing user to a company with a role."""
    result = resource_service.assign_user_to_company(db, company_id, data)
    if result.rejected:
        raise quota_exceeded_http_error(result.decision)
    return CompanyUserResponse.model_validate(result.resource)


@router.get("/company/{company_id}", response_model=List[CompanyUserResponse])
def list_company_users(company_id: int, db: Session = Depends(get_db)):
    memberships = resource_service.list_resources(db, company_id, RESOURCE_TYPE)
    return [CompanyUserResponse.model_validate(m) for m in memberships]


@router.get("/company/{company_id}/limit-info", response_model=UserLimitInfo)
def company_user_limit_info(company_id: int, db: Session = Depends(get_db)):
    """Users and sellers counts and limits (-1 for unlimited)."""
    return get_user_limit_info(db, company_id)


@router.patch("/{membership_id}/deactivate", response_model=CompanyUserResponse)
def deactivate_company_user(membership_id: int, db: Session = Depends(get_db)):
    return CompanyUserResponse.model_validate(resource_service.deactivate_resource(db, RESOURCE_TYPE, membership_id))


@router.patch("/{membership_id}/activate", response_model=CompanyUserResponse)
def activate_company_user(membership_id: int, db: Session = Depends(get_db)):
    result = resource_service.activate_resource(db, RESOURCE_TYPE, membership_id)
    if result.rejected:
        raise quota_exceeded_http_error(result.decision)
    return CompanyUserResponse.model_validate(result.resource)
