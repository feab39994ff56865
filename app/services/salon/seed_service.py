# ===== app/services/salon/seed_service.py =====
"""
Demo data for local development.

Wipes all salon data and recreates three Freiberg salons with identical
service menus, a handful of stylists and Mon-Sat work hours.
"""
from datetime import time
from typing import Dict
import logging

from sqlalchemy.orm import Session

from app.models.availability import Absence, WorkHourRule
from app.models.booking import Booking
from app.models.salon import Salon
from app.models.service import Service
from app.models.stylist import Stylist
from app.models.user import User, UserRole

logger = logging.getLogger(__name__)

DEMO_SALONS = [
    {"name": "BARBERS Freiberg", "slug": "barbers-freiberg", "lat": 50.9159, "lng": 13.3422,
     "email": "barbers@salonbook.app", "phone": "+49 3521 123456"},
    {"name": "Haarschneiderei Freiberg", "slug": "haarschneiderei-freiberg", "lat": 50.913, "lng": 13.3405,
     "email": "haarschneiderei@salonbook.app", "phone": "+49 3521 234567"},
    {"name": "KLIER Freiberg", "slug": "klier-freiberg", "lat": 50.9172, "lng": 13.3387,
     "email": "klier@salonbook.app", "phone": "+49 3521 345678"},
]

DEMO_SERVICES = [
    {"title": "Herrenhaarschnitt", "duration_min": 60, "price_cents": 6000},
    {"title": "Damenschnitt", "duration_min": 60, "price_cents": 6000},
    {"title": "Färben", "duration_min": 60, "price_cents": 6000},
]

# (salon slug, first name, last name, display name, apprentice)
DEMO_STYLISTS = [
    ("barbers-freiberg", "Martin", "Pieske", "Martin Pieske", False),
    ("barbers-freiberg", "Rita", "", "Rita", False),
    ("barbers-freiberg", "Susi", "", "Susi", False),
    ("barbers-freiberg", "Rebekka", "", "Rebekka", False),
    ("barbers-freiberg", "Josie", "", "Josie (Azubi)", True),
    ("haarschneiderei-freiberg", "Tina", "Kurz", "Tina Kurz", False),
    ("haarschneiderei-freiberg", "Marco", "Lang", "Marco Lang", False),
    ("klier-freiberg", "Anna", "Weber", "Anna Weber", False),
    ("klier-freiberg", "Lukas", "Braun", "Lukas Braun", False),
]

# weekday 0=Sunday
DEMO_WORK_HOURS = [
    (1, time(9, 0), time(18, 0)),
    (2, time(9, 0), time(18, 0)),
    (3, time(9, 0), time(18, 0)),
    (4, time(9, 0), time(18, 0)),
    (5, time(9, 0), time(18, 0)),
    (6, time(10, 0), time(14, 0)),
]


def _email_for(first_name: str, last_name: str) -> str:
    local = ".".join(part.lower() for part in (first_name, last_name) if part)
    return f"{local}@salonbook.app"


class SeedService:

    @staticmethod
    def clear(db: Session) -> None:
        """Delete in reverse dependency order"""
        for model in (Booking, Absence, WorkHourRule, Stylist, Service, Salon, User):
            db.query(model).delete()

    @staticmethod
    def seed_demo(db: Session) -> Dict[str, int]:
        try:
            SeedService.clear(db)

            salons = {}
            for data in DEMO_SALONS:
                salon = Salon(address="09599 Freiberg, DE", **data)
                db.add(salon)
                salons[salon.slug] = salon

                for svc in DEMO_SERVICES:
                    salon.services.append(Service(active=True, **svc))

            users = [User(
                email="kunde.demo@salonbook.app",
                first_name="Kunde",
                last_name="Demo",
                role=UserRole.CUSTOMER,
            )]

            stylist_count = 0
            for slug, first_name, last_name, display_name, apprentice in DEMO_STYLISTS:
                user = User(
                    email=_email_for(first_name, last_name),
                    first_name=first_name,
                    last_name=last_name or None,
                    role=UserRole.STYLIST,
                )
                users.append(user)
                db.add(user)
                db.flush()

                salon = salons[slug]
                stylist = Stylist(
                    user_id=user.id,
                    display_name=display_name,
                    active=True,
                    is_apprentice=apprentice,
                )
                salon.stylists.append(stylist)
                db.flush()

                for weekday, start, end in DEMO_WORK_HOURS:
                    db.add(WorkHourRule(
                        salon_id=salon.id,
                        stylist_id=stylist.id,
                        weekday=weekday,
                        start_time=start,
                        end_time=end,
                    ))
                stylist_count += 1

            db.add(users[0])
            db.commit()

        except Exception as e:
            db.rollback()
            logger.error(f"[seed] failed: {e}", exc_info=True)
            raise

        logger.info(f"[seed] created {len(salons)} salons, {stylist_count} stylists")
        return {"salons": len(salons), "users": len(users), "stylists": stylist_count}
