"""Tests for booking notifications."""

import pytest

from app.config.settings import Settings
from app.services.email.email_service import EmailService
from app.services.notification.notifier import (
    EmailNotifier,
    LoggingNotifier,
    build_notifier,
    notify_safely,
)
from tests.conftest import at, make_booking, make_customer


class FakeEmailService:

    def __init__(self):
        self.sent = []

    def send_email(self, to_email, subject, html_content, plain_text=None, cc=None):
        self.sent.append({"to": to_email, "subject": subject, "text": plain_text})
        return True


def email_notifier():
    outbox = FakeEmailService()
    return EmailNotifier(outbox, Settings(APP_PUBLIC_URL="https://salonbook.app")), outbox


class TestEmailNotifier:

    def test_new_booking_goes_to_salon(self, db, salon, service, stylist):
        salon.email = "barbers@salonbook.app"
        db.commit()
        booking = make_booking(db, service, stylist, at("10:00"))
        notifier, outbox = email_notifier()

        notifier.booking_created(booking)

        assert outbox.sent[0]["to"] == "barbers@salonbook.app"
        assert "04.06.2030" in outbox.sent[0]["subject"]
        assert "10:00" in outbox.sent[0]["subject"]

    def test_salon_without_email_is_skipped(self, db, service, stylist):
        booking = make_booking(db, service, stylist, at("10:00"))
        notifier, outbox = email_notifier()
        notifier.booking_created(booking)
        assert outbox.sent == []

    def test_status_change_goes_to_customer(self, db, service, stylist):
        customer = make_customer(db)
        booking = make_booking(db, service, stylist, at("10:00"), customer=customer)
        notifier, outbox = email_notifier()

        notifier.booking_status_changed(booking, "requested")

        assert outbox.sent[0]["to"] == customer.email

    def test_reminder_without_customer_email(self, db, service, stylist):
        booking = make_booking(db, service, stylist, at("10:00"))
        notifier, outbox = email_notifier()
        assert notifier.booking_reminder(booking) is False
        assert outbox.sent == []


class TestNotifierWiring:

    def test_logging_notifier_when_email_disabled(self):
        assert isinstance(build_notifier(Settings(EMAIL_ENABLED=False)), LoggingNotifier)

    def test_email_notifier_when_enabled(self):
        assert isinstance(build_notifier(Settings(EMAIL_ENABLED=True)), EmailNotifier)

    def test_notify_safely_swallows_delivery_errors(self, caplog):
        def broken(*args):
            raise RuntimeError("smtp timeout")

        notify_safely(broken, "booking")
        assert "smtp timeout" in caplog.text


class FailingSmtpServer:

    def __init__(self):
        self.closed = False

    def sendmail(self, from_addr, to_addrs, msg):
        raise OSError("connection reset")

    def quit(self):
        self.closed = True


class TestEmailService:

    def test_disabled_email_is_not_sent(self):
        service = EmailService(Settings(EMAIL_ENABLED=False))
        assert service.send_email("kunde.demo@salonbook.app", "Hallo", "<p>Hallo</p>") is False

    def test_connection_closed_when_send_fails(self, monkeypatch):
        service = EmailService(Settings(EMAIL_ENABLED=True))
        server = FailingSmtpServer()
        monkeypatch.setattr(service, "_get_smtp_connection", lambda: server)

        with pytest.raises(OSError):
            service.send_email("kunde.demo@salonbook.app", "Hallo", "<p>Hallo</p>")
        assert server.closed is True
