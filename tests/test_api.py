"""HTTP layer tests: routing, status codes and error bodies."""

import uuid

import pytest

from app.config.settings import Settings, get_settings
from app.models import BookingStatus
from tests.conftest import DAY, WEEKDAY, at, make_booking, make_customer


@pytest.fixture
def customer(db):
    return make_customer(db)


class TestHealth:

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"

    def test_correlation_id_is_echoed(self, client):
        response = client.get("/api/v1/salons", headers={"X-Correlation-ID": "abc-123"})
        assert response.headers["X-Correlation-ID"] == "abc-123"


class TestSalonRoutes:

    def test_list_and_detail(self, client, salon, service):
        listing = client.get("/api/v1/salons").json()
        assert listing["total"] == 1
        assert listing["salons"][0]["services"][0]["title"] == "Herrenhaarschnitt"

        detail = client.get(f"/api/v1/salons/by-slug/{salon.slug}")
        assert detail.status_code == 200
        assert detail.json()["id"] == str(salon.id)

    def test_unknown_salon(self, client):
        response = client.get(f"/api/v1/salons/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json()["errors"] == {"salon_id": ["salon not found"]}


class TestSlotRoutes:

    def test_slots(self, client, salon, service, stylist):
        response = client.get(f"/api/v1/salons/{salon.id}/slots",
                              params={"service_id": str(service.id), "date": DAY})
        assert response.status_code == 200
        slots = response.json()
        assert len(slots) == 32
        assert slots[0] == {
            "start": at("09:00").isoformat(),
            "end": at("10:05").isoformat(),
            "stylist_id": str(stylist.id),
        }

    def test_unknown_service_is_empty(self, client, salon, stylist):
        response = client.get(f"/api/v1/salons/{salon.id}/slots",
                              params={"service_id": str(uuid.uuid4()), "date": DAY})
        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.parametrize("params, field", [
        ({"date": DAY}, "service_id"),
        ({"service_id": "not-a-uuid", "date": DAY}, "service_id"),
        ({"date": "2030-13-01"}, "date"),
        ({"date": "04.06.2030"}, "date"),
    ])
    def test_bad_parameters(self, client, salon, service, params, field):
        if field == "date":
            params = {**params, "service_id": str(service.id)}
        response = client.get(f"/api/v1/salons/{salon.id}/slots", params=params)
        assert response.status_code == 400
        assert field in response.json()["errors"]


class TestBookingRoutes:

    def test_create_booking(self, client, salon, service, stylist, customer, notifier):
        response = client.post(
            f"/api/v1/salons/{salon.id}/bookings",
            json={"service_id": str(service.id), "starts_at": "2030-06-04T10:00:00+02:00", "note": "Hallo"},
            headers={"X-Customer-Id": str(customer.id)},
        )
        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "requested"
        assert body["stylist_id"] == str(stylist.id)
        assert body["customer_id"] == str(customer.id)
        assert body["ends_at"] == at("11:05").isoformat()
        assert notifier.events[0][0] == "created"

    def test_conflict_body(self, client, salon, service, stylist):
        payload = {"service_id": str(service.id), "stylist_id": str(stylist.id),
                   "starts_at": "2030-06-04T10:00:00+02:00"}
        assert client.post(f"/api/v1/salons/{salon.id}/bookings", json=payload).status_code == 201

        payload["starts_at"] = "2030-06-04T10:30:00+02:00"
        response = client.post(f"/api/v1/salons/{salon.id}/bookings", json=payload)
        assert response.status_code == 422
        assert response.json() == {
            "message": "Validation failed",
            "errors": {"starts_at": ["overlaps existing booking"]},
        }

    def test_unknown_stylist_is_a_field_error(self, client, salon, service, stylist):
        response = client.post(f"/api/v1/salons/{salon.id}/bookings", json={
            "service_id": str(service.id),
            "stylist_id": str(uuid.uuid4()),
            "starts_at": "2030-06-04T10:00:00+02:00",
        })
        assert response.status_code == 422
        assert response.json()["errors"] == {"stylist_id": ["stylist not found"]}

    def test_unknown_customer_header(self, client, salon, service, stylist):
        response = client.post(
            f"/api/v1/salons/{salon.id}/bookings",
            json={"service_id": str(service.id), "starts_at": "2030-06-04T10:00:00+02:00"},
            headers={"X-Customer-Id": str(uuid.uuid4())},
        )
        assert response.status_code == 422
        assert response.json()["errors"] == {"customer_id": ["customer not found"]}

    def test_malformed_body(self, client, salon, service):
        response = client.post(f"/api/v1/salons/{salon.id}/bookings", json={"service_id": str(service.id)})
        assert response.status_code == 422
        assert "starts_at" in response.json()["errors"]

    def test_list_bookings(self, client, db, salon, service, stylist, customer):
        make_booking(db, service, stylist, at("14:00"), customer=customer)
        make_booking(db, service, stylist, at("10:00"))

        response = client.get("/api/v1/bookings", params={"scope": "salon", "salon_id": str(salon.id)})
        assert response.status_code == 200
        body = response.json()
        assert body["total"] == 2
        assert body["bookings"][0]["starts_at"] == at("10:00").isoformat()

        mine = client.get("/api/v1/bookings", headers={"X-Customer-Id": str(customer.id)}).json()
        assert mine["total"] == 1

    @pytest.mark.parametrize("params, headers", [
        ({"scope": "me"}, {}),
        ({"scope": "everyone"}, {}),
        ({"scope": "salon", "salon_id": "nope"}, {}),
        ({"scope": "salon", "from": "yesterday"}, {}),
        ({"scope": "me", "status": "archived"}, {"X-Customer-Id": str(uuid.uuid4())}),
        ({"scope": "me"}, {"X-Customer-Id": "not-a-uuid"}),
    ])
    def test_bad_listing_queries(self, client, salon, params, headers):
        if params.get("scope") == "salon" and "salon_id" not in params:
            params = {**params, "salon_id": str(salon.id)}
        response = client.get("/api/v1/bookings", params=params, headers=headers)
        assert response.status_code == 400

    def test_status_workflow(self, client, db, salon, service, stylist, notifier):
        booking = make_booking(db, service, stylist, at("10:00"), status=BookingStatus.REQUESTED)
        url = f"/api/v1/bookings/{booking.id}"

        confirmed = client.patch(url, params={"salon_id": str(salon.id)}, json={"status": "confirmed"})
        assert confirmed.status_code == 200
        assert confirmed.json()["status"] == "confirmed"

        declined = client.patch(url, params={"salon_id": str(salon.id)}, json={"status": "declined"})
        assert declined.status_code == 409
        assert declined.json()["errors"] == {"status": ["cannot change from confirmed to declined"]}

        invalid = client.patch(url, params={"salon_id": str(salon.id)}, json={"status": "done"})
        assert invalid.status_code == 400

        detail = client.get(url, params={"salon_id": str(salon.id)}).json()
        assert detail["status"] == "confirmed"
        assert detail["service"]["title"] == "Herrenhaarschnitt"

    def test_unknown_booking(self, client, salon):
        response = client.patch(f"/api/v1/bookings/{uuid.uuid4()}",
                                params={"salon_id": str(salon.id)}, json={"status": "confirmed"})
        assert response.status_code == 404


class TestDashboardRoutes:

    def test_service_crud(self, client, salon):
        created = client.post(f"/api/v1/salons/{salon.id}/services",
                              json={"title": "Färben", "duration_min": 90, "price_cents": 8000})
        assert created.status_code == 201
        assert created.json()["formatted_duration"] == "1h 30m"

        service_id = created.json()["id"]
        updated = client.patch(f"/api/v1/services/{service_id}", params={"salon_id": str(salon.id)},
                               json={"active": False})
        assert updated.json()["active"] is False

        too_long = client.post(f"/api/v1/salons/{salon.id}/services",
                               json={"title": "Marathon", "duration_min": 500, "price_cents": 8000})
        assert too_long.status_code == 422
        assert "duration_min" in too_long.json()["errors"]

    def test_work_hours_overlap_rejected(self, client, salon, stylist):
        url = f"/api/v1/salons/{salon.id}/stylists/{stylist.id}/work-hours"
        response = client.post(url, json={"weekday": WEEKDAY, "start": "17:00", "end": "19:00"})
        assert response.status_code == 422
        assert "start" in response.json()["errors"]

        response = client.post(url, json={"weekday": WEEKDAY, "start": "18:00", "end": "20:00"})
        assert response.status_code == 201
        assert client.get(url).json()["total"] == 2

    def test_absence_blocks_slots(self, client, salon, service, stylist):
        response = client.post(f"/api/v1/salons/{salon.id}/stylists/{stylist.id}/absences",
                               json={"starts_at": f"{DAY}T00:00:00", "ends_at": f"{DAY}T23:59:00"})
        assert response.status_code == 201

        slots = client.get(f"/api/v1/salons/{salon.id}/slots",
                           params={"service_id": str(service.id), "date": DAY}).json()
        assert slots == []


class TestDevSeed:

    def test_hidden_by_default(self, client):
        assert client.post("/api/v1/dev/seed").status_code == 404

    def test_seed_when_enabled(self, client):
        client.app.dependency_overrides[get_settings] = lambda: Settings(ENABLE_DEV_SEED=True)
        response = client.post("/api/v1/dev/seed")
        assert response.status_code == 200
        assert response.json()["salons"] == 3
        assert len(client.get("/api/v1/salons").json()["salons"]) == 3
