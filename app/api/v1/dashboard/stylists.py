# app/api/v1/dashboard/stylists.py
from fastapi import APIRouter, Depends, Query, Path
from sqlalchemy.orm import Session
from typing import Optional
from pydantic import BaseModel, Field
from uuid import UUID

from app.config.database import get_db
from app.services.salon.catalog_service import StylistService

router = APIRouter(tags=["dashboard-stylists"])


class StylistCreate(BaseModel):
    display_name: str = Field(..., min_length=1, max_length=120)
    user_id: Optional[UUID] = None
    avatar_url: Optional[str] = Field(None, max_length=500)
    active: bool = True
    is_apprentice: bool = False


class StylistUpdate(BaseModel):
    display_name: Optional[str] = Field(None, min_length=1, max_length=120)
    user_id: Optional[UUID] = None
    avatar_url: Optional[str] = Field(None, max_length=500)
    active: Optional[bool] = None
    is_apprentice: Optional[bool] = None


@router.get("/salons/{salon_id}/stylists")
async def list_stylists(
        salon_id: UUID = Path(..., description="The salon ID"),
        include_inactive: bool = Query(False),
        db: Session = Depends(get_db)
):
    stylists = StylistService.list_stylists(db, salon_id, include_inactive=include_inactive)
    return {
        "total": len(stylists),
        "stylists": [s.to_dict() for s in stylists]
    }


@router.post("/salons/{salon_id}/stylists", status_code=201)
async def create_stylist(
        stylist_data: StylistCreate,
        salon_id: UUID = Path(..., description="The salon ID"),
        db: Session = Depends(get_db)
):
    return StylistService.create_stylist(db, salon_id, stylist_data.model_dump()).to_dict()


@router.get("/stylists/{stylist_id}")
async def get_stylist(
        stylist_id: UUID = Path(..., description="The stylist ID"),
        salon_id: UUID = Query(...),
        db: Session = Depends(get_db)
):
    return StylistService.get_stylist(db, stylist_id, salon_id).to_dict()


@router.patch("/stylists/{stylist_id}")
async def update_stylist(
        stylist_data: StylistUpdate,
        stylist_id: UUID = Path(..., description="The stylist ID"),
        salon_id: UUID = Query(...),
        db: Session = Depends(get_db)
):
    stylist = StylistService.update_stylist(
        db, stylist_id, salon_id, stylist_data.model_dump(exclude_unset=True)
    )
    return stylist.to_dict()


@router.delete("/stylists/{stylist_id}")
async def deactivate_stylist(
        stylist_id: UUID = Path(..., description="The stylist ID"),
        salon_id: UUID = Query(...),
        db: Session = Depends(get_db)
):
    return StylistService.deactivate_stylist(db, stylist_id, salon_id).to_dict()
