"""
Email Service using Resend
Booking confirmations are written in MJML and compiled to HTML before sending
"""

import logging
from typing import Optional, Union

import resend
from mjml import mjml_to_html

from .config import EMAIL_FROM_ADDRESS, RESEND_API_KEY
from .domain.bookings.summaries import format_day, session_slot_labels
from .email_templates import (
    equipment_booking_confirmation_template,
    facility_booking_confirmation_template,
    session_booking_confirmation_template,
)
from .models import EquipmentBooking, FacilityBooking, SessionBooking

logger = logging.getLogger(__name__)

resend.api_key = RESEND_API_KEY


class EmailDeliveryError(Exception):
    """Raised when an email could not be compiled or handed to Resend"""


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    try:
        result = mjml_to_html(mjml_content)
    except Exception as e:
        logger.error(f"MJML compilation error: {e}")
        raise EmailDeliveryError(f"Failed to compile MJML template: {e}") from e

    # Newer mjml releases return an object with .html / .errors, older a dict
    errors = getattr(result, "errors", None)
    html = getattr(result, "html", None)
    if isinstance(result, dict):
        errors = result.get("errors")
        html = result.get("html", "")
    if errors:
        logger.warning(f"MJML compilation warnings: {errors}")
    return html if html is not None else str(result)


async def send_email(
    to: Union[str, list[str]],
    subject: str,
    mjml_content: str,
    from_address: Optional[str] = None,
) -> dict:
    """
    Send an email through Resend.

    Args:
        to: Recipient email(s)
        subject: Email subject line
        mjml_content: MJML template content (will be compiled to HTML)
        from_address: Optional custom from address

    Returns:
        Send response dict
    """
    html_content = compile_mjml_to_html(mjml_content)
    recipients = [to] if isinstance(to, str) else to

    if not RESEND_API_KEY:
        logger.error("❌ No email service configured - RESEND_API_KEY missing")
        raise EmailDeliveryError("Email service not configured")

    try:
        logger.info(f"📧 Sending email via Resend to: {recipients}")
        response = resend.Emails.send(
            {
                "from": from_address or EMAIL_FROM_ADDRESS,
                "to": recipients,
                "subject": subject,
                "html": html_content,
            }
        )
        logger.info(f"✅ Email sent successfully via Resend: {response}")
        return response
    except Exception as e:
        logger.error(f"❌ Email send error to {recipients}: {e}")
        raise EmailDeliveryError(f"Failed to send email: {e}") from e


class BookingMailer:
    """Confirmation emails for the three booking kinds"""

    async def send_facility_confirmation(self, booking: FacilityBooking) -> dict:
        mjml_content = facility_booking_confirmation_template(
            user_name=booking.user_name,
            booking_id=booking.id,
            sport_name=booking.sport_name,
            court_number=booking.court_number,
            booking_date=format_day(booking.date),
            time_slots=list(booking.time_slots),
            total_hours=booking.total_hours,
            total_price=booking.total_price,
            qr_url=booking.qr_code,
            receipt_url=booking.receipt,
        )
        return await send_email(
            to=booking.user_email,
            subject=f"Court Booking Confirmed - {booking.sport_name} {booking.court_number}",
            mjml_content=mjml_content,
        )

    async def send_equipment_confirmation(self, booking: EquipmentBooking) -> dict:
        mjml_content = equipment_booking_confirmation_template(
            user_name=booking.user_name,
            booking_id=booking.id,
            sport_name=booking.sport_name,
            equipment_name=booking.equipment_name,
            quantity=booking.quantity,
            unit_price=booking.equipment_price,
            total_price=booking.total_price,
            booking_date=format_day(booking.date_time),
            qr_url=booking.qr_code,
            receipt_url=booking.receipt,
        )
        return await send_email(
            to=booking.user_email,
            subject=f"Equipment Booking Confirmed - {booking.equipment_name}",
            mjml_content=mjml_content,
        )

    async def send_session_confirmation(self, booking: SessionBooking) -> dict:
        mjml_content = session_booking_confirmation_template(
            user_name=booking.user_name,
            booking_id=booking.id,
            sport_name=booking.sport_name,
            session_type=booking.session_type,
            coach_name=booking.coach_name,
            session_fee=booking.session_fee,
            booked_slots=session_slot_labels(booking.booked_time_slots),
            court_no=booking.court_no,
            qr_url=booking.qr_code_url,
        )
        return await send_email(
            to=booking.user_email,
            subject=f"Session Booking Confirmed - {booking.coach_name}",
            mjml_content=mjml_content,
        )


def get_booking_mailer() -> BookingMailer:
    """Dependency injection for BookingMailer"""
    return BookingMailer()
