"""Shared validation utilities"""

import re
from datetime import date, datetime
from typing import Optional

from .. import config


def validate_email(email: Optional[str]) -> Optional[str]:
    """
    Validate email format.

    Args:
        email: Email address string

    Returns:
        Lowercase email address

    Raises:
        ValueError: If email format is invalid
    """
    if not email:
        return email

    email = email.strip().lower()

    email_pattern = r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$"

    if not re.match(email_pattern, email):
        raise ValueError("Invalid email format")

    return email


def normalize_whatsapp_phone(phone: str, country_code: Optional[str] = None) -> str:
    """
    Turn a local phone number into the international form WhatsApp expects.

    A local number ("0771234567") loses its leading digit and gains the
    country code ("+94771234567"). Numbers that already start with "+" are
    kept as they are. This is a narrow rule, not general E.164 handling.
    """
    if not phone or not phone.strip():
        raise ValueError("Phone number is required")

    phone = re.sub(r"[\s\-()]", "", phone)
    if phone.startswith("+"):
        return phone

    code = country_code or config.WHATSAPP_COUNTRY_CODE
    if not code.startswith("+"):
        code = f"+{code}"
    return f"{code}{phone[1:]}"


def parse_date(value) -> date:
    """Parse a calendar day from a date, datetime or ISO string (time-of-day ignored)"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not value:
        raise ValueError("Date is required")

    text = str(value).strip()
    try:
        return date.fromisoformat(text[:10])
    except ValueError as e:
        raise ValueError(f"Invalid date: {value}") from e
