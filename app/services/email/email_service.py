# ===== app/services/email/email_service.py =====
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import List, Optional
import logging

from app.config.settings import Settings

logger = logging.getLogger(__name__)

BRAND_GOLD = "#FFD700"
BRAND_BLACK = "#000000"


class EmailService:
    """Sends emails via SMTP. Constructed explicitly and handed to whoever needs it."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def _get_smtp_connection(self):
        """Create and return SMTP connection"""
        try:
            if self.settings.EMAIL_USE_TLS:
                server = smtplib.SMTP(self.settings.EMAIL_HOST, self.settings.EMAIL_PORT)
                server.starttls()
            else:
                server = smtplib.SMTP_SSL(self.settings.EMAIL_HOST, self.settings.EMAIL_PORT)

            if self.settings.EMAIL_USERNAME and self.settings.EMAIL_PASSWORD:
                server.login(self.settings.EMAIL_USERNAME, self.settings.EMAIL_PASSWORD)

            return server
        except Exception as e:
            logger.error(f"Failed to connect to SMTP server: {e}")
            raise

    def send_email(
            self,
            to_email: str,
            subject: str,
            html_content: str,
            plain_text: Optional[str] = None,
            cc: Optional[List[str]] = None
    ) -> bool:
        """
        Send an email using SMTP

        Args:
            to_email: Recipient email address
            subject: Email subject
            html_content: HTML content of the email
            plain_text: Plain text version (fallback for non-HTML clients)
            cc: List of CC email addresses

        Returns:
            bool: True if email sent successfully
        """
        if not self.settings.EMAIL_ENABLED:
            logger.info(f"Email disabled, not sending '{subject}' to {to_email}")
            return False

        try:
            msg = MIMEMultipart('alternative')
            msg['Subject'] = subject
            msg['From'] = f"{self.settings.EMAIL_FROM_NAME} <{self.settings.MAIL_FROM}>"
            msg['To'] = to_email

            if cc:
                msg['Cc'] = ', '.join(cc)

            if plain_text:
                msg.attach(MIMEText(plain_text, 'plain'))
            msg.attach(MIMEText(html_content, 'html'))

            recipients = [to_email] + (cc or [])

            server = self._get_smtp_connection()
            try:
                server.sendmail(self.settings.MAIL_FROM, recipients, msg.as_string())
            finally:
                server.quit()

            logger.info(f"Email sent successfully to {to_email}")
            return True

        except Exception as e:
            logger.error(f"Failed to send email to {to_email}: {e}")
            raise


# ============================================================================
# Templates
# ============================================================================

def _layout_html(title: str, body: str) -> str:
    return f"""
    <!DOCTYPE html>
    <html>
    <head><meta charset="UTF-8"></head>
    <body style="font-family: Arial, sans-serif; background: #0b0b0b; color: #eee; padding: 24px;">
        <div style="max-width: 640px; margin: 0 auto; background: #111; border: 1px solid #222; border-radius: 12px; overflow: hidden;">
            <div style="background: {BRAND_BLACK}; color: {BRAND_GOLD}; padding: 16px 20px; font-weight: 600;">SalonBook</div>
            <div style="padding: 20px;">
                <h1 style="font-size: 20px; margin: 0 0 12px 0; color: {BRAND_GOLD};">{title}</h1>
                <div style="line-height: 1.6; color: #ddd;">{body}</div>
            </div>
            <div style="padding: 14px 20px; border-top: 1px solid #222; color: #888; font-size: 12px;">
                This message was sent automatically. Please do not reply.
            </div>
        </div>
    </body>
    </html>
    """


def _kv(label: str, value: str) -> str:
    return f'<div style="margin: 4px 0;"><span style="color: #aaa;">{label}:</span> <strong style="color: #fff;">{value}</strong></div>'


def new_booking_to_salon(
        salon_name: str,
        service_title: str,
        price: str,
        date: str,
        time: str,
        stylist: Optional[str] = None,
        note: Optional[str] = None,
        manage_url: Optional[str] = None
) -> tuple:
    """(html, text) for the salon's new-booking notification"""
    rows = [
        _kv("Service", f"{service_title} ({price})"),
        _kv("Date", date),
        _kv("Time", time),
    ]
    if stylist:
        rows.append(_kv("Stylist", stylist))
    if note:
        rows.append(_kv("Note", note))

    button = ""
    if manage_url:
        button = (
            f'<div style="margin-top: 12px;"><a href="{manage_url}" '
            f'style="background: {BRAND_GOLD}; color: {BRAND_BLACK}; text-decoration: none; '
            f'padding: 10px 14px; border-radius: 8px; display: inline-block; font-weight: 600;">'
            f'Open today board</a></div>'
        )

    html = _layout_html(
        f"New booking · {salon_name}",
        "<p>A <strong>new booking request</strong> has arrived.</p>" + "".join(rows) + button
    )

    text_lines = [
        f"New booking · {salon_name}",
        f"Service: {service_title} ({price})",
        f"Date: {date}",
        f"Time: {time}",
    ]
    if stylist:
        text_lines.append(f"Stylist: {stylist}")
    if note:
        text_lines.append(f"Note: {note}")
    if manage_url:
        text_lines.append(f"Manage: {manage_url}")

    return html, "\n".join(text_lines)


STATUS_TITLES = {
    "confirmed": "Appointment confirmed",
    "declined": "Appointment declined",
    "cancelled": "Appointment cancelled",
}


def booking_status_to_customer(
        status: str,
        service_title: str,
        date: str,
        time: str,
        salon_name: str
) -> tuple:
    """(html, text) telling the customer about a status change"""
    title = STATUS_TITLES.get(status, f"Appointment {status}")
    html = _layout_html(
        f"{title} · {salon_name}",
        _kv("Status", title)
        + _kv("Service", service_title)
        + _kv("Date", date)
        + _kv("Time", time)
        + '<p style="margin-top: 12px;">Thank you!</p>'
    )
    text = (
        f"{title} · {salon_name}\n"
        f"Service: {service_title}\n"
        f"Date: {date}\n"
        f"Time: {time}"
    )
    return html, text
