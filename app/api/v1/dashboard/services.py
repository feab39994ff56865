# app/api/v1/dashboard/services.py
"""
Service Management API Endpoints
Handles CRUD operations for salon services
"""
from fastapi import APIRouter, Depends, Query, Path
from sqlalchemy.orm import Session
from typing import Optional, List
from pydantic import BaseModel, Field
from uuid import UUID

from app.config.database import get_db
from app.models.service import Service
from app.services.salon.catalog_service import ServiceCatalogService

router = APIRouter(tags=["dashboard-services"])


# ============================================================================
# Request/Response Models
# ============================================================================

class ServiceCreate(BaseModel):
    """Request model for creating a service"""
    title: str = Field(..., min_length=1, max_length=200)
    duration_min: int = Field(..., description="Duration in minutes")
    price_cents: int
    active: bool = True


class ServiceUpdate(BaseModel):
    """Request model for updating a service"""
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    duration_min: Optional[int] = None
    price_cents: Optional[int] = None
    active: Optional[bool] = None


class ServiceResponse(BaseModel):
    """Response model for service data"""
    id: str
    salon_id: str
    title: str
    duration_min: int
    formatted_duration: str
    price_cents: int
    formatted_price: str
    active: bool


class ServiceListResponse(BaseModel):
    total: int
    services: List[ServiceResponse]


def _service_to_response(service: Service) -> ServiceResponse:
    """Convert Service model to ServiceResponse with computed fields"""
    data = service.to_dict()
    data["formatted_price"] = service.formatted_price
    data["formatted_duration"] = service.formatted_duration
    return ServiceResponse(**data)


# ============================================================================
# Endpoints
# ============================================================================

@router.get("/salons/{salon_id}/services", response_model=ServiceListResponse)
async def list_services(
        salon_id: UUID = Path(..., description="The salon ID"),
        include_inactive: bool = Query(False, description="Include deactivated services"),
        db: Session = Depends(get_db)
):
    services = ServiceCatalogService.list_services(db, salon_id, include_inactive=include_inactive)
    return ServiceListResponse(
        total=len(services),
        services=[_service_to_response(s) for s in services]
    )


@router.post("/salons/{salon_id}/services", response_model=ServiceResponse, status_code=201)
async def create_service(
        service_data: ServiceCreate,
        salon_id: UUID = Path(..., description="The salon ID"),
        db: Session = Depends(get_db)
):
    service = ServiceCatalogService.create_service(db, salon_id, service_data.model_dump())
    return _service_to_response(service)


@router.get("/services/{service_id}", response_model=ServiceResponse)
async def get_service(
        service_id: UUID = Path(..., description="The service ID"),
        salon_id: UUID = Query(..., description="Salon the service belongs to"),
        db: Session = Depends(get_db)
):
    return _service_to_response(ServiceCatalogService.get_service(db, service_id, salon_id))


@router.patch("/services/{service_id}", response_model=ServiceResponse)
async def update_service(
        service_data: ServiceUpdate,
        service_id: UUID = Path(..., description="The service ID"),
        salon_id: UUID = Query(..., description="Salon the service belongs to"),
        db: Session = Depends(get_db)
):
    service = ServiceCatalogService.update_service(
        db, service_id, salon_id, service_data.model_dump(exclude_unset=True)
    )
    return _service_to_response(service)


@router.delete("/services/{service_id}", response_model=ServiceResponse)
async def deactivate_service(
        service_id: UUID = Path(..., description="The service ID"),
        salon_id: UUID = Query(..., description="Salon the service belongs to"),
        db: Session = Depends(get_db)
):
    """Services stay referenced by past bookings, so deletion only deactivates them"""
    return _service_to_response(ServiceCatalogService.deactivate_service(db, service_id, salon_id))
