"""
API v1 router setup
Organized into: public (customers), bookings, dashboard (salon staff) and dev routes
"""
from fastapi import APIRouter

from app.api.v1 import bookings, dev
from app.api.v1.dashboard import absences, services, stylists, work_hours
from app.api.v1.public import salons

api_v1_router = APIRouter()

# ============================================================================
# PUBLIC ROUTES (salon browsing, slots, booking requests)
# ============================================================================
api_v1_router.include_router(salons.router)

# ============================================================================
# BOOKING ROUTES (listings and status workflow)
# ============================================================================
api_v1_router.include_router(bookings.router)

# ============================================================================
# DASHBOARD ROUTES (salon catalog management)
# ============================================================================
api_v1_router.include_router(services.router)
api_v1_router.include_router(stylists.router)
api_v1_router.include_router(work_hours.router)
api_v1_router.include_router(absences.router)

# ============================================================================
# DEV ROUTES (disabled unless ENABLE_DEV_SEED)
# ============================================================================
api_v1_router.include_router(dev.router)


# ============================================================================
# ROOT ENDPOINT - API Info
# ============================================================================
@api_v1_router.get("/", tags=["Info"])
async def api_info():
    """
    API information and available endpoints.
    """
    return {
        "version": "1.0",
        "groups": {
            "public": "/salons, /salons/{salon_id}/slots, /salons/{salon_id}/bookings",
            "bookings": "/bookings",
            "dashboard": "/services, /stylists, /work-hours, /absences",
        }
    }
