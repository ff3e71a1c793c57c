"""Human-readable booking summaries shared by the QR code, email and WhatsApp steps"""

from datetime import date, datetime


def format_day(value) -> str:
    if isinstance(value, datetime):
        value = value.date()
    if isinstance(value, date):
        return value.strftime("%d %b %Y")
    return str(value)


def format_money(amount) -> str:
    return f"Rs.{float(amount):.2f}/="


def session_slot_labels(pairs: list[dict]) -> list[str]:
    return [f"{pair['date']} {pair['timeSlot']}" for pair in pairs]


def facility_qr_text(booking) -> str:
    return "\n".join(
        [
            "Booking Confirmation:",
            "",
            f"Name: {booking.user_name}",
            f"Sport: {booking.sport_name}",
            f"Court Number: {booking.court_number}",
            f"Date: {format_day(booking.date)}",
            f"Time Slots: {', '.join(booking.time_slots)}",
            f"Total Hours: {booking.total_hours} hour(s)",
            f"Total Price: {format_money(booking.total_price)}",
            f"Booking ID: {booking.id}",
        ]
    )


def facility_whatsapp_text(booking) -> str:
    return "\n".join(
        [
            f"Your booking for the {booking.sport_name} court is confirmed!",
            f"Name: {booking.user_name}",
            f"Court: {booking.court_number}",
            f"Date: {format_day(booking.date)}",
            f"Time: {', '.join(booking.time_slots)}",
            f"Total Hours: {booking.total_hours}",
            f"Total Price: {format_money(booking.total_price)}",
            f"Booking ID: {booking.id}",
            f"QR Code: {booking.qr_code}",
        ]
    )


def equipment_qr_text(booking) -> str:
    return "\n".join(
        [
            "Equipment Booking Confirmation:",
            "",
            f"Name: {booking.user_name}",
            f"Sport: {booking.sport_name}",
            f"Equipment: {booking.equipment_name}",
            f"Quantity: {booking.quantity}",
            f"Price Per Unit: {format_money(booking.equipment_price)}",
            f"Total Price: {format_money(booking.total_price)}",
            f"Booking Date: {format_day(booking.date_time)}",
            f"Booking ID: {booking.id}",
        ]
    )


def equipment_whatsapp_text(booking) -> str:
    return "\n".join(
        [
            "Your equipment booking is confirmed!",
            f"Name: {booking.user_name}",
            f"Sport: {booking.sport_name}",
            f"Equipment: {booking.equipment_name}",
            f"Quantity: {booking.quantity}",
            f"Price Per Unit: {format_money(booking.equipment_price)}",
            f"Total Price: {format_money(booking.total_price)}",
            f"Booking Date: {format_day(booking.date_time)}",
            f"Booking ID: {booking.id}",
            f"QR Code: {booking.qr_code}",
        ]
    )


def session_qr_text(booking) -> str:
    lines = [
        f"Booking ID: {booking.id}",
        f"User: {booking.user_name}",
        f"Sport: {booking.sport_name}",
        f"Session Type: {booking.session_type}",
        f"Coach: {booking.coach_name}",
        f"Fee: {format_money(booking.session_fee)}",
        f"Date & Time: {', '.join(session_slot_labels(booking.booked_time_slots))}",
    ]
    if booking.court_no:
        lines.append(f"Court: {booking.court_no}")
    return "\n".join(lines)
