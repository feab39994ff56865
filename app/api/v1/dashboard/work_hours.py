# app/api/v1/dashboard/work_hours.py
"""Weekly work-hour rules of a stylist"""
from fastapi import APIRouter, Depends, Query, Path, Response
from sqlalchemy.orm import Session
from typing import Optional
from pydantic import BaseModel, Field
from uuid import UUID

from app.config.database import get_db
from app.services.salon.catalog_service import WorkHourService

router = APIRouter(tags=["dashboard-work-hours"])


class WorkHourCreate(BaseModel):
    weekday: int = Field(..., description="0=Sunday ... 6=Saturday")
    start: str = Field(..., description="Salon-local HH:MM")
    end: str = Field(..., description="Salon-local HH:MM")


class WorkHourUpdate(BaseModel):
    weekday: Optional[int] = None
    start: Optional[str] = None
    end: Optional[str] = None


@router.get("/salons/{salon_id}/stylists/{stylist_id}/work-hours")
async def list_work_hours(
        salon_id: UUID = Path(...),
        stylist_id: UUID = Path(...),
        db: Session = Depends(get_db)
):
    rules = WorkHourService.list_rules(db, salon_id, stylist_id)
    return {"total": len(rules), "work_hours": [r.to_dict() for r in rules]}


@router.post("/salons/{salon_id}/stylists/{stylist_id}/work-hours", status_code=201)
async def create_work_hours(
        rule_data: WorkHourCreate,
        salon_id: UUID = Path(...),
        stylist_id: UUID = Path(...),
        db: Session = Depends(get_db)
):
    """Rejects rules overlapping an existing rule of the same stylist and weekday"""
    rule = WorkHourService.create_rule(
        db, salon_id, stylist_id, rule_data.weekday, rule_data.start, rule_data.end
    )
    return rule.to_dict()


@router.patch("/work-hours/{rule_id}")
async def update_work_hours(
        rule_data: WorkHourUpdate,
        rule_id: UUID = Path(...),
        salon_id: UUID = Query(...),
        db: Session = Depends(get_db)
):
    rule = WorkHourService.update_rule(db, rule_id, salon_id, rule_data.model_dump(exclude_unset=True))
    return rule.to_dict()


@router.delete("/work-hours/{rule_id}", status_code=204)
async def delete_work_hours(
        rule_id: UUID = Path(...),
        salon_id: UUID = Query(...),
        db: Session = Depends(get_db)
):
    WorkHourService.delete_rule(db, rule_id, salon_id)
    return Response(status_code=204)
