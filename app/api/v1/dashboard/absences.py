# app/api/v1/dashboard/absences.py
from fastapi import APIRouter, Depends, Query, Path, Response
from sqlalchemy.orm import Session
from typing import Optional
from pydantic import BaseModel, Field
from uuid import UUID

from app.config.database import get_db
from app.services.salon.catalog_service import AbsenceService

router = APIRouter(tags=["dashboard-absences"])


class AbsenceCreate(BaseModel):
    starts_at: str = Field(..., description="ISO-8601 instant")
    ends_at: str = Field(..., description="ISO-8601 instant")
    reason: Optional[str] = None


@router.get("/salons/{salon_id}/stylists/{stylist_id}/absences")
async def list_absences(
        salon_id: UUID = Path(...),
        stylist_id: UUID = Path(...),
        db: Session = Depends(get_db)
):
    absences = AbsenceService.list_absences(db, salon_id, stylist_id)
    return {"total": len(absences), "absences": [a.to_dict() for a in absences]}


@router.post("/salons/{salon_id}/stylists/{stylist_id}/absences", status_code=201)
async def create_absence(
        absence_data: AbsenceCreate,
        salon_id: UUID = Path(...),
        stylist_id: UUID = Path(...),
        db: Session = Depends(get_db)
):
    absence = AbsenceService.create_absence(
        db,
        salon_id,
        stylist_id,
        absence_data.starts_at,
        absence_data.ends_at,
        reason=absence_data.reason
    )
    return absence.to_dict()


@router.delete("/absences/{absence_id}", status_code=204)
async def delete_absence(
        absence_id: UUID = Path(...),
        salon_id: UUID = Query(...),
        db: Session = Depends(get_db)
):
    AbsenceService.delete_absence(db, absence_id, salon_id)
    return Response(status_code=204)
