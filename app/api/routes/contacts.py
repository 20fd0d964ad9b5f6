"""
Contact endpoints (clients, providers, employees).
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.core.quota_guard import quota_exceeded_http_error
from app.schemas.limits import LimitInfo
from app.schemas.resources import ContactCreate, ContactResponse
from app.services import resource_service
from app.services.quota_service import get_limit_info

router = APIRouter(prefix="/contacts", tags=["Contacts"])

RESOURCE_TYPE = "contacts"


@router.post("/company/{company_id}", status_code=status.HTTP_201_CREATED, response_model=ContactResponse)
def create_contact(company_id: int, data: ContactCreate, db: Session = Depends(get_db)):
    result = resource_service.create_contact(db, company_id, data)
    if result.rejected:
        raise quota_exceeded_http_error(result.decision)
    return ContactResponse.model_validate(result.resource)


@router.get("/company/{company_id}", response_model=List[ContactResponse])
def list_contacts(
    company_id: int,
    contact_type: Optional[str] = Query(None, description="Filter by client, provider or employee"),
    include_inactive: bool = Query(True),
    db: Session = Depends(get_db)
):
    contacts = resource_service.list_resources(db, company_id, RESOURCE_TYPE, include_inactive)
    if contact_type:
        contacts = [c for c in contacts if c.contact_type == contact_type]
    return [ContactResponse.model_validate(c) for c in contacts]


@router.get("/company/{company_id}/limit-info", response_model=LimitInfo)
def contact_limit_info(company_id: int, db: Session = Depends(get_db)):
    return get_limit_info(db, company_id, RESOURCE_TYPE)


@router.patch("/{contact_id}/deactivate", response_model=ContactResponse)
def deactivate_contact(contact_id: int, db: Session = Depends(get_db)):
    return ContactResponse.model_validate(resource_service.deactivate_resource(db, RESOURCE_TYPE, contact_id))


@router.patch("/{contact_id}/activate", response_model=ContactResponse)
def activate_contact(contact_id: int, db: Session = Depends(get_db)):
    result = resource_service.activate_resource(db, RESOURCE_TYPE, contact_id)
    if result.rejected:
        raise quota_exceeded_http_error(result.decision)
    return ContactResponse.model_validate(result.resource)
