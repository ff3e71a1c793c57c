"""
Availability checker for courts and coaches.

The checker only reads. Double booking between the check and the insert is
caught by the reservation tables' unique constraints, which the booking
services translate into the same ``Conflict`` error raised here.
"""

import logging
from collections.abc import Callable, Iterable, Sequence
from datetime import date
from typing import Optional

from ...shared.exceptions import ConflictException, ValidationException
from .slots import DEFAULT_SLOT_CATALOG, SlotCatalog

logger = logging.getLogger(__name__)

# (resource, day, sport) -> slot labels already reserved
BookedSlotLookup = Callable[[str, date, Optional[str]], Iterable[str]]


class AvailabilityChecker:
    def __init__(
        self,
        lookup: BookedSlotLookup,
        catalog: SlotCatalog = DEFAULT_SLOT_CATALOG,
        today: Callable[[], date] = date.today,
    ):
        self.lookup = lookup
        self.catalog = catalog
        self.today = today

    def booked_slots(self, resource: str, day: date, sport: Optional[str] = None) -> set[str]:
        return set(self.lookup(resource, day, sport))

    def available_slots(self, resource: str, day: date, sport: Optional[str] = None) -> list[str]:
        return self.catalog.subtract(self.booked_slots(resource, day, sport))

    def validate_slots(self, requested: Sequence[str]) -> None:
        """Shape checks only; never touches persistence"""
        if not requested:
            raise ValidationException(
                "At least one time slot is required", code="InvalidSlots", details={"invalidSlots": []}
            )

        unknown = self.catalog.unknown(requested)
        if unknown:
            raise ValidationException(
                "Invalid time slots", code="InvalidSlots", details={"invalidSlots": unknown}
            )

        repeated = self.catalog.duplicates(requested)
        if repeated:
            raise ValidationException(
                "Duplicate time slots", code="InvalidSlots", details={"duplicateSlots": repeated}
            )

    def validate_date(self, day: date) -> None:
        if day < self.today():
            raise ValidationException(
                "Booking date cannot be in the past", code="PastDate", details={"date": day.isoformat()}
            )

    def validate_request(
        self, requested: Sequence[str], resource: str, day: date, sport: Optional[str] = None
    ) -> None:
        """
        Raise unless every requested slot can be reserved.

        Order matters: slot shape, then date, then overlap with what is
        already booked. Only the last step queries persistence.
        """
        self.validate_slots(requested)
        self.validate_date(day)
        self.check_overlap(requested, resource, day, sport)

    def check_overlap(
        self, requested: Sequence[str], resource: str, day: date, sport: Optional[str] = None
    ) -> None:
        overlapping = self.catalog.ordered(self.booked_slots(resource, day, sport) & set(requested))
        if overlapping:
            logger.info(f"⚠️ Slot conflict on {resource} {day}: {overlapping}")
            raise conflict(overlapping)


def conflict(slots: Sequence[str]) -> ConflictException:
    return ConflictException(
        "Some time slots are already booked",
        code="Conflict",
        details={"unavailableSlots": list(slots)},
    )
