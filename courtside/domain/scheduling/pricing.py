"""Booking price calculator"""

from typing import Optional

from ...shared.exceptions import NotFoundException, ValidationException

INDIVIDUAL_SESSION = "Individual Session"
GROUP_SESSION = "Group Session"
SESSION_TYPES = (INDIVIDUAL_SESSION, GROUP_SESSION)

_SESSION_PRICE_KEYS = {
    INDIVIDUAL_SESSION: "individualSessionPrice",
    GROUP_SESSION: "groupSessionPrice",
}


def _require_positive_price(unit_price) -> float:
    try:
        price = float(unit_price)
    except (TypeError, ValueError):
        price = 0.0
    if price <= 0:
        raise ValidationException("Price must be greater than zero", code="InvalidPrice")
    return price


def facility_totals(unit_price, slots) -> tuple[int, float]:
    """Return (total_hours, total_price) for a court booking"""
    price = _require_positive_price(unit_price)
    total_hours = len(slots)
    return total_hours, price * total_hours


def equipment_total(unit_price, quantity) -> float:
    # bool is an int subclass; True is not a quantity
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise ValidationException(
            "Quantity must be a positive whole number",
            code="InvalidQuantity",
            details={"quantity": quantity},
        )
    return _require_positive_price(unit_price) * quantity


def session_fee(coach_price: Optional[dict], session_type: str) -> float:
    """Pick the individual or group fee from a coach's price schedule.

    ``coach_price`` is None when the coach profile could not be found.
    """
    if coach_price is None:
        raise NotFoundException("Coach profile not found", code="CoachProfileNotFound")

    key = _SESSION_PRICE_KEYS.get(session_type)
    if key is None:
        raise ValidationException(
            "Invalid session type",
            code="InvalidSessionType",
            details={"allowed": list(SESSION_TYPES)},
        )
    return _require_positive_price(coach_price.get(key))
