"""
Warehouse endpoints.

Warehouses hang off an establishment but count against the owning
company's max_warehouses quota.
"""
from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from app.db.session import get_db
from app.core.quota_guard import quota_exceeded_http_error
from app.schemas.limits import LimitInfo
from app.schemas.resources import WarehouseCreate, WarehouseResponse
from app.services import resource_service
from app.services.quota_service import get_limit_info

router = APIRouter(prefix="/warehouses", tags=["Warehouses"])

RESOURCE_TYPE = "warehouses"


@router.post("/establishment/{establishment_id}", status_code=status.HTTP_201_CREATED, response_model=WarehouseResponse)
def create_warehouse(establishment_id: int, data: WarehouseCreate, db: Session = Depends(get_db)):
    result = resource_service.create_warehouse(db, establishment_id, data)
    if result.rejected:
        raise quota_exceeded_http_error(result.decision)
    return WarehouseResponse.model_validate(result.resource)


@router.get("/establishment/{establishment_id}", response_model=List[WarehouseResponse])
def list_warehouses(establishment_id: int, db: Session = Depends(get_db)):
    warehouses = resource_service.list_establishment_resources(db, establishment_id, RESOURCE_TYPE)
    return [WarehouseResponse.model_validate(w) for w in warehouses]


@router.get("/company/{company_id}/limit-info", response_model=LimitInfo)
def warehouse_limit_info(company_id: int, db: Session = Depends(get_db)):
    return get_limit_info(db, company_id, RESOURCE_TYPE)


@router.patch("/{warehouse_id}/deactivate", response_model=WarehouseResponse)
def deactivate_warehouse(warehouse_id: int, db: Session = Depends(get_db)):
    warehouse = resource_service.deactivate_resource(db, RESOURCE_TYPE, warehouse_id)
    return WarehouseResponse.model_validate(warehouse)


@router.patch("/{warehouse_id}/activate", response_model=WarehouseResponse)
def activate_warehouse(warehouse_id: int, db: Session = Depends(get_db)):
    result = resource_service.activate_resource(db, RESOURCE_TYPE, warehouse_id)
    if result.rejected:
        raise quota_exceeded_http_error(result.decision)
    return WarehouseResponse.model_validate(result.resource)
