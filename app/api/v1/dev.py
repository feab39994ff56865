# app/api/v1/dev.py
"""Development-only endpoints"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.config.database import get_db
from app.config.settings import Settings, get_settings
from app.services.salon.seed_service import SeedService

router = APIRouter(prefix="/dev", tags=["dev"])


@router.post("/seed")
async def seed_demo_data(
        settings: Settings = Depends(get_settings),
        db: Session = Depends(get_db)
):
    """Replace all data with the demo salons. Hidden unless ENABLE_DEV_SEED is set."""
    if not settings.ENABLE_DEV_SEED:
        raise HTTPException(status_code=404, detail="Not found")

    result = SeedService.seed_demo(db)
    return {"ok": True, **result}
