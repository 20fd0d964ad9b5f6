"""
Emission point endpoints.

Emission points hang off an establishment but count against the owning
company's max_emission_points quota.
"""
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.core.quota_guard import quota_exceeded_http_error
from app.schemas.limits import LimitInfo
from app.schemas.resources import EmissionPointCreate, EmissionPointResponse
from app.services import resource_service
from app.services.quota_service import get_limit_info

router = APIRouter(prefix="/emission-points", tags=["Emission Points"])

RESOURCE_TYPE = "emission_points"


@router.post("/establishment/{establishment_id}", status_code=status.HTTP_201_CREATED, response_model=EmissionPointResponse)
def create_emission_point(establishment_id: int, data: EmissionPointCreate, db: Session = Depends(get_db)):
    result = resource_service.create_emission_point(db, establishment_id, data)
    if result.rejected:
        raise quota_exceeded_http_error(result.decision)
    return EmissionPointResponse.model_validate(result.resource)


@router.get("/establishment/{establishment_id}", response_model=List[EmissionPointResponse])
def list_emission_points(establishment_id: int, db: Session = Depends(get_db)):
    points = resource_service.list_establishment_resources(db, establishment_id, RESOURCE_TYPE)
    return [EmissionPointResponse.model_validate(p) for p in points]


@router.get("/company/{company_id}/limit-info", response_model=LimitInfo)
def emission_point_limit_info(company_id: int, db: Session = Depends(get_db)):
    return get_limit_info(db, company_id, RESOURCE_TYPE)


@router.patch("/{emission_point_id}/deactivate", response_model=EmissionPointResponse)
def deactivate_emission_point(emission_point_id: int, db: Session = Depends(get_db)):
    point = resource_service.deactivate_resource(db, RESOURCE_TYPE, emission_point_id)
    return EmissionPointResponse.model_validate(point)


@router.patch("/{emission_point_id}/activate", response_model=EmissionPointResponse)
def activate_emission_point(emission_point_id: int, db: Session = Depends(get_db)):
    result = resource_service.activate_resource(db, RESOURCE_TYPE, emission_point_id)
    if result.rejected:
        raise quota_exceeded_http_error(result.decision)
    return EmissionPointResponse.model_validate(result.resource)
