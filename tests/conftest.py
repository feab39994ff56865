"""Shared test fixtures and helpers."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("EMAIL_ENABLED", "false")
os.environ.setdefault("ENABLE_DEV_SEED", "false")

from datetime import datetime, time, timedelta
from typing import List, Optional

import pytest
import pytz
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api.dependencies import get_notifier
from app.config.database import get_db
from app.models import Absence, Base, Booking, BookingStatus, Salon, Service, Stylist, User, WorkHourRule
from app.services.notification.notifier import Notifier
from app.utils.time_window import time_of_day_to_instant

TIMEZONE = "Europe/Berlin"

# A Tuesday (weekday 2 with 0=Sunday) in summer time, far enough ahead to stay in the future
DAY = "2030-06-04"
WEEKDAY = 2
NOW = datetime(2030, 6, 1, 12, 0, tzinfo=pytz.UTC)


def at(hhmm: str, day: str = DAY) -> datetime:
    """Salon-local clock time on the test day as a UTC instant"""
    return time_of_day_to_instant(day, hhmm, TIMEZONE)


class RecordingNotifier(Notifier):
    """Collects booking events instead of delivering them"""

    def __init__(self, deliver: bool = True, fail: bool = False):
        self.deliver = deliver
        self.fail = fail
        self.events: List[tuple] = []

    def _record(self, *event):
        if self.fail:
            raise RuntimeError("mail server down")
        self.events.append(event)

    def booking_created(self, booking):
        self._record("created", booking.id)

    def booking_status_changed(self, booking, previous_status):
        self._record("status_changed", booking.id, previous_status, booking.status)

    def booking_reminder(self, booking):
        self._record("reminder", booking.id)
        return self.deliver


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def client(db, notifier):
    from app.main import app

    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_notifier] = lambda: notifier
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

def make_salon(db, name: str = "BARBERS Freiberg", slug: Optional[str] = None, **kwargs) -> Salon:
    salon = Salon(
        name=name,
        slug=slug or name.lower().replace(" ", "-"),
        address="09599 Freiberg, DE",
        timezone=TIMEZONE,
        **kwargs
    )
    db.add(salon)
    db.commit()
    return salon


def make_service(db, salon: Salon, title: str = "Herrenhaarschnitt", duration_min: int = 60,
                 price_cents: int = 6000, active: bool = True) -> Service:
    service = Service(
        salon_id=salon.id,
        title=title,
        duration_min=duration_min,
        price_cents=price_cents,
        active=active,
    )
    db.add(service)
    db.commit()
    return service


def make_stylist(db, salon: Salon, display_name: str = "Martin", active: bool = True) -> Stylist:
    stylist = Stylist(salon_id=salon.id, display_name=display_name, active=active)
    db.add(stylist)
    db.commit()
    return stylist


def make_rule(db, stylist: Stylist, start: str = "09:00", end: str = "18:00",
              weekday: int = WEEKDAY) -> WorkHourRule:
    start_h, start_m = (int(p) for p in start.split(":"))
    end_h, end_m = (int(p) for p in end.split(":"))
    rule = WorkHourRule(
        salon_id=stylist.salon_id,
        stylist_id=stylist.id,
        weekday=weekday,
        start_time=time(start_h, start_m),
        end_time=time(end_h, end_m),
    )
    db.add(rule)
    db.commit()
    return rule


def make_absence(db, stylist: Stylist, starts_at: datetime, ends_at: datetime,
                 reason: str = "Urlaub") -> Absence:
    absence = Absence(
        salon_id=stylist.salon_id,
        stylist_id=stylist.id,
        starts_at=starts_at,
        ends_at=ends_at,
        reason=reason,
    )
    db.add(absence)
    db.commit()
    return absence


def make_booking(db, service: Service, stylist: Stylist, starts_at: datetime,
                 status: BookingStatus = BookingStatus.CONFIRMED, minutes: int = 65,
                 customer: Optional[User] = None) -> Booking:
    booking = Booking(
        salon_id=service.salon_id,
        service_id=service.id,
        stylist_id=stylist.id,
        customer_id=customer.id if customer else None,
        starts_at=starts_at,
        ends_at=starts_at + timedelta(minutes=minutes),
        status=status.value,
        reminder_sent=False,
    )
    db.add(booking)
    db.commit()
    return booking


def make_customer(db, email: str = "kunde.demo@salonbook.app") -> User:
    user = User(email=email, first_name="Kunde", last_name="Demo")
    db.add(user)
    db.commit()
    return user


@pytest.fixture
def salon(db):
    return make_salon(db)


@pytest.fixture
def service(db, salon):
    return make_service(db, salon)


@pytest.fixture
def stylist(db, salon):
    stylist = make_stylist(db, salon, "Martin")
    make_rule(db, stylist)
    return stylist
