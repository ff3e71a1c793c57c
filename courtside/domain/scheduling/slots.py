"""Slot catalog - the fixed one-hour windows a court or coach can be booked for"""

from collections.abc import Iterable
from dataclasses import dataclass


def _hour_labels(start_hour: int, end_hour: int) -> tuple[str, ...]:
    return tuple(f"{hour:02d}:00 - {hour + 1:02d}:00" for hour in range(start_hour, end_hour))


@dataclass(frozen=True)
class SlotCatalog:
    """
    Immutable ordered catalog of slot labels.

    Every set operation returns slots in catalog order so responses are
    stable regardless of the order callers send them in.
    """

    slots: tuple[str, ...]

    @classmethod
    def hourly(cls, start_hour: int = 8, end_hour: int = 18) -> "SlotCatalog":
        return cls(_hour_labels(start_hour, end_hour))

    def all_slots(self) -> tuple[str, ...]:
        return self.slots

    def __contains__(self, slot: object) -> bool:
        return slot in self.slots

    def __len__(self) -> int:
        return len(self.slots)

    def unknown(self, requested: Iterable[str]) -> list[str]:
        """Requested labels that are not in the catalog"""
        return [slot for slot in requested if slot not in self.slots]

    def duplicates(self, requested: Iterable[str]) -> list[str]:
        seen: set[str] = set()
        repeated: list[str] = []
        for slot in requested:
            if slot in seen and slot not in repeated:
                repeated.append(slot)
            seen.add(slot)
        return repeated

    def ordered(self, slots: Iterable[str]) -> list[str]:
        """Filter to catalog members, in catalog order"""
        wanted = set(slots)
        return [slot for slot in self.slots if slot in wanted]

    def subtract(self, booked: Iterable[str]) -> list[str]:
        """catalog - booked, in catalog order"""
        taken = set(booked)
        return [slot for slot in self.slots if slot not in taken]


# 08:00 - 09:00 ... 17:00 - 18:00
DEFAULT_SLOT_CATALOG = SlotCatalog.hourly()
