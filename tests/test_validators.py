from datetime import date, datetime

import pytest

from courtside.shared.validators import normalize_whatsapp_phone, parse_date, validate_email


def test_local_number_gets_country_code():
    assert normalize_whatsapp_phone("0771234567") == "+94771234567"


def test_formatting_characters_are_stripped():
    assert normalize_whatsapp_phone("077 123-4567") == "+94771234567"


def test_international_number_is_kept():
    assert normalize_whatsapp_phone("+447700900123") == "+447700900123"


def test_custom_country_code():
    assert normalize_whatsapp_phone("0412345678", country_code="+61") == "+61412345678"


def test_empty_phone_raises():
    with pytest.raises(ValueError):
        normalize_whatsapp_phone("  ")


def test_validate_email_lowercases():
    assert validate_email("  Nimal@Example.COM ") == "nimal@example.com"


def test_validate_email_rejects_garbage():
    with pytest.raises(ValueError):
        validate_email("not-an-email")


def test_parse_date_accepts_strings_and_dates():
    assert parse_date("2025-06-10") == date(2025, 6, 10)
    assert parse_date(date(2025, 6, 10)) == date(2025, 6, 10)
    assert parse_date(datetime(2025, 6, 10, 9, 30)) == date(2025, 6, 10)
