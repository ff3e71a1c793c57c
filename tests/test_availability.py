from datetime import date, timedelta

import pytest

from courtside.domain.scheduling.availability import AvailabilityChecker
from courtside.shared.exceptions import ConflictException, ValidationException

TODAY = date(2025, 6, 10)


def make_checker(booked=None):
    """booked: {(resource, day): [slots]}"""
    booked = booked or {}
    calls = []

    def lookup(resource, day, sport):
        calls.append((resource, day, sport))
        return booked.get((resource, day), [])

    checker = AvailabilityChecker(lookup, today=lambda: TODAY)
    return checker, calls


def test_available_slots_subtracts_booked():
    checker, _ = make_checker({("C1", TODAY): ["09:00 - 10:00"]})
    available = checker.available_slots("C1", TODAY, "Tennis")
    assert "09:00 - 10:00" not in available
    assert len(available) == 9


def test_validate_request_reports_overlap_in_catalog_order():
    day = TODAY + timedelta(days=1)
    checker, _ = make_checker({("C1", day): ["11:00 - 12:00", "09:00 - 10:00"]})

    with pytest.raises(ConflictException) as exc:
        checker.validate_request(["11:00 - 12:00", "09:00 - 10:00", "10:00 - 11:00"], "C1", day, "Tennis")

    assert exc.value.code == "Conflict"
    assert exc.value.details == {"unavailableSlots": ["09:00 - 10:00", "11:00 - 12:00"]}


def test_shape_errors_never_query_bookings():
    checker, calls = make_checker()

    with pytest.raises(ValidationException) as exc:
        checker.validate_request(["07:00 - 08:00"], "C1", TODAY)

    assert exc.value.code == "InvalidSlots"
    assert exc.value.details == {"invalidSlots": ["07:00 - 08:00"]}
    assert calls == []


@pytest.mark.parametrize(
    "slots,detail_key",
    [
        ([], "invalidSlots"),
        (["08:00 - 09:00", "08:00 - 09:00"], "duplicateSlots"),
    ],
)
def test_empty_or_duplicate_slots_are_invalid(slots, detail_key):
    checker, _ = make_checker()
    with pytest.raises(ValidationException) as exc:
        checker.validate_slots(slots)
    assert exc.value.code == "InvalidSlots"
    assert detail_key in exc.value.details


def test_past_date_is_rejected_before_lookup():
    checker, calls = make_checker()
    with pytest.raises(ValidationException) as exc:
        checker.validate_request(["08:00 - 09:00"], "C1", TODAY - timedelta(days=1))
    assert exc.value.code == "PastDate"
    assert calls == []


def test_today_is_bookable():
    checker, calls = make_checker()
    checker.validate_request(["08:00 - 09:00"], "C1", TODAY, "Tennis")
    assert calls == [("C1", TODAY, "Tennis")]


def test_check_overlap_ignores_the_date():
    yesterday = TODAY - timedelta(days=1)
    checker, calls = make_checker({("7", yesterday): ["08:00 - 09:00"]})

    checker.check_overlap(["09:00 - 10:00"], "7", yesterday)
    with pytest.raises(ConflictException) as exc:
        checker.check_overlap(["08:00 - 09:00"], "7", yesterday)

    assert exc.value.details == {"unavailableSlots": ["08:00 - 09:00"]}
    assert calls == [("7", yesterday, None), ("7", yesterday, None)]
