"""Tests for salon catalog management."""

import pytest

from app.core.errors import FormatError, NotFoundError, ValidationError
from app.models import Salon, Stylist, WorkHourRule
from app.services.salon.catalog_service import (
    AbsenceService,
    SalonService,
    ServiceCatalogService,
    StylistService,
    WorkHourService,
)
from app.services.salon.seed_service import SeedService
from tests.conftest import WEEKDAY, make_salon, make_stylist


class TestServiceCatalog:

    def test_create_and_update(self, db, salon):
        service = ServiceCatalogService.create_service(
            db, salon.id, {"title": " Damenschnitt ", "duration_min": 45, "price_cents": 4500}
        )
        assert service.title == "Damenschnitt"
        assert service.formatted_price == "45,00 €"

        updated = ServiceCatalogService.update_service(db, service.id, salon.id, {"price_cents": 5000})
        assert updated.price_cents == 5000
        assert updated.duration_min == 45

    @pytest.mark.parametrize("data, field", [
        ({"title": "Kurz", "duration_min": 5, "price_cents": 100}, "duration_min"),
        ({"title": "Lang", "duration_min": 300, "price_cents": 100}, "duration_min"),
        ({"title": "Teuer", "duration_min": 60, "price_cents": 2_000_000}, "price_cents"),
        ({"title": "   ", "duration_min": 60, "price_cents": 100}, "title"),
        ({"title": "Ohne Preis", "duration_min": 60}, "price_cents"),
    ])
    def test_rejects_invalid_services(self, db, salon, data, field):
        with pytest.raises(ValidationError) as exc:
            ServiceCatalogService.create_service(db, salon.id, data)
        assert exc.value.field == field

    def test_deactivate_hides_from_default_listing(self, db, salon, service):
        ServiceCatalogService.deactivate_service(db, service.id, salon.id)
        assert ServiceCatalogService.list_services(db, salon.id) == []
        assert len(ServiceCatalogService.list_services(db, salon.id, include_inactive=True)) == 1

    def test_service_of_other_salon(self, db, service):
        other = make_salon(db, "KLIER Freiberg")
        with pytest.raises(NotFoundError):
            ServiceCatalogService.get_service(db, service.id, other.id)


class TestStylists:

    def test_create_and_deactivate(self, db, salon):
        stylist = StylistService.create_stylist(db, salon.id, {"display_name": "Josie (Azubi)", "is_apprentice": True})
        assert stylist.is_apprentice is True

        StylistService.deactivate_stylist(db, stylist.id, salon.id)
        assert StylistService.list_stylists(db, salon.id) == []

    def test_blank_name(self, db, salon):
        with pytest.raises(ValidationError):
            StylistService.create_stylist(db, salon.id, {"display_name": " "})


class TestWorkHours:

    def test_rejects_overlapping_rule(self, db, salon):
        stylist = make_stylist(db, salon, "Rita")
        WorkHourService.create_rule(db, salon.id, stylist.id, WEEKDAY, "09:00", "13:00")

        with pytest.raises(ValidationError) as exc:
            WorkHourService.create_rule(db, salon.id, stylist.id, WEEKDAY, "12:00", "18:00")
        assert exc.value.field == "start"
        assert db.query(WorkHourRule).count() == 1

    def test_adjacent_rules_and_other_weekdays_are_fine(self, db, salon):
        stylist = make_stylist(db, salon, "Rita")
        WorkHourService.create_rule(db, salon.id, stylist.id, WEEKDAY, "09:00", "13:00")
        WorkHourService.create_rule(db, salon.id, stylist.id, WEEKDAY, "13:00", "18:00")
        WorkHourService.create_rule(db, salon.id, stylist.id, WEEKDAY + 1, "10:00", "14:00")

        assert len(WorkHourService.list_rules(db, salon.id, stylist.id)) == 3

    def test_other_stylists_may_overlap(self, db, salon):
        rita = make_stylist(db, salon, "Rita")
        susi = make_stylist(db, salon, "Susi")
        WorkHourService.create_rule(db, salon.id, rita.id, WEEKDAY, "09:00", "18:00")
        WorkHourService.create_rule(db, salon.id, susi.id, WEEKDAY, "09:00", "18:00")

    def test_update_into_overlap(self, db, salon):
        stylist = make_stylist(db, salon, "Rita")
        WorkHourService.create_rule(db, salon.id, stylist.id, WEEKDAY, "09:00", "12:00")
        afternoon = WorkHourService.create_rule(db, salon.id, stylist.id, WEEKDAY, "14:00", "18:00")

        with pytest.raises(ValidationError):
            WorkHourService.update_rule(db, afternoon.id, salon.id, {"start": "11:00"})

        moved = WorkHourService.update_rule(db, afternoon.id, salon.id, {"start": "13:00"})
        assert moved.start_time.strftime("%H:%M") == "13:00"

    @pytest.mark.parametrize("weekday, start, end, error", [
        (7, "09:00", "18:00", ValidationError),
        (2, "18:00", "09:00", ValidationError),
        (2, "09:00", "09:00", ValidationError),
        (2, "9 Uhr", "18:00", FormatError),
    ])
    def test_rejects_invalid_rules(self, db, salon, weekday, start, end, error):
        stylist = make_stylist(db, salon, "Rita")
        with pytest.raises(error):
            WorkHourService.create_rule(db, salon.id, stylist.id, weekday, start, end)

    def test_delete(self, db, salon):
        stylist = make_stylist(db, salon, "Rita")
        rule = WorkHourService.create_rule(db, salon.id, stylist.id, WEEKDAY, "09:00", "18:00")
        WorkHourService.delete_rule(db, rule.id, salon.id)
        assert WorkHourService.list_rules(db, salon.id, stylist.id) == []


class TestAbsences:

    def test_create_and_delete(self, db, salon):
        stylist = make_stylist(db, salon, "Rita")
        absence = AbsenceService.create_absence(
            db, salon.id, stylist.id, "2030-06-04T00:00:00", "2030-06-05T00:00:00", reason="Urlaub"
        )
        assert absence.to_dict()["starts_at"].startswith("2030-06-03T22:00:00")

        AbsenceService.delete_absence(db, absence.id, salon.id)
        assert AbsenceService.list_absences(db, salon.id, stylist.id) == []

    def test_end_before_start(self, db, salon):
        stylist = make_stylist(db, salon, "Rita")
        with pytest.raises(ValidationError) as exc:
            AbsenceService.create_absence(db, salon.id, stylist.id, "2030-06-05T00:00:00Z", "2030-06-04T00:00:00Z")
        assert exc.value.field == "ends_at"


class TestSeed:

    def test_seed_creates_demo_salons(self, db):
        result = SeedService.seed_demo(db)

        assert result == {"salons": 3, "users": 10, "stylists": 9}
        barbers = SalonService.get_salon_by_slug(db, "barbers-freiberg")
        assert len(barbers.services) == 3
        assert db.query(Stylist).filter(Stylist.salon_id == barbers.id).count() == 5
        assert db.query(WorkHourRule).count() == 9 * 6

    def test_seed_is_repeatable(self, db):
        SeedService.seed_demo(db)
        SeedService.seed_demo(db)
        assert db.query(Salon).count() == 3
