"""Facility booking service - court reservations and their confirmations"""

import json
import logging
from collections.abc import Callable
from datetime import date
from typing import Union

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ...models import FacilityBooking, User
from ...services.storage import ObjectStorage
from ...shared.exceptions import DependencyException, NotFoundException, ValidationException
from ..bookings.pipeline import ConfirmationKind, ConfirmationPipeline
from ..scheduling.availability import AvailabilityChecker, conflict
from ..scheduling.pricing import facility_totals
from ..scheduling.slots import DEFAULT_SLOT_CATALOG, SlotCatalog
from .repository import FacilityBookingRepository
from .schemas import FacilityBookingCreate

logger = logging.getLogger(__name__)


def parse_time_slots(raw: Union[str, list, None]) -> list[str]:
    """Accept a JSON-encoded list (multipart forms) or a list"""
    slots = raw
    if isinstance(raw, str):
        try:
            slots = json.loads(raw)
        except ValueError:
            slots = [part.strip() for part in raw.split(",") if part.strip()]
    if not isinstance(slots, list) or not all(isinstance(s, str) for s in slots):
        raise ValidationException(
            "Invalid timeSlots format. Must be an array.", code="InvalidSlots", details={"invalidSlots": []}
        )
    return slots


class FacilityBookingService:
    """Service layer for court bookings"""

    def __init__(
        self,
        db: Session,
        storage: ObjectStorage,
        pipeline: ConfirmationPipeline,
        catalog: SlotCatalog = DEFAULT_SLOT_CATALOG,
        today: Callable[[], date] = date.today,
    ):
        self.db = db
        self.storage = storage
        self.pipeline = pipeline
        self.today = today
        self.repo = FacilityBookingRepository()
        self.checker = AvailabilityChecker(
            lambda court, day, sport: self.repo.booked_slots(self.db, court, day, sport),
            catalog=catalog,
            today=today,
        )

    def available_slots(self, court_number: str, sport_name: str, day: date) -> tuple[list[str], list[str]]:
        """Return (available, booked), both in catalog order"""
        booked = self.checker.booked_slots(court_number, day, sport_name)
        return self.checker.catalog.subtract(booked), self.checker.catalog.ordered(booked)

    async def create_booking(
        self, user: User, data: FacilityBookingCreate, receipt: tuple[bytes, str, str]
    ) -> FacilityBooking:
        logger.info(f"📥 Court booking request from user {user.id}: {data.sportName} {data.courtNumber} {data.date}")

        self.checker.validate_request(data.timeSlots, data.courtNumber, data.date, data.sportName)
        slots = self.checker.catalog.ordered(data.timeSlots)
        total_hours, total_price = facility_totals(data.courtPrice, slots)

        contents, filename, content_type = receipt
        receipt_url = self.storage.store(contents, "facility_receipts", filename, content_type)

        booking = FacilityBooking(
            user_id=user.id,
            user_name=data.userName,
            user_email=data.userEmail,
            user_phone_number=data.userPhoneNumber,
            sport_name=data.sportName,
            court_number=data.courtNumber,
            court_price=data.courtPrice,
            date=data.date,
            time_slots=slots,
            total_hours=total_hours,
            total_price=total_price,
            receipt=receipt_url,
        )
        try:
            self.repo.add_with_reservations(self.db, booking)
        except IntegrityError as e:
            # Lost the race to a concurrent booking for the same slot
            taken = self.checker.booked_slots(data.courtNumber, data.date, data.sportName)
            overlapping = self.checker.catalog.ordered(taken & set(slots)) or slots
            logger.warning(f"⚠️ Reservation constraint hit for {data.courtNumber} {data.date}: {overlapping}")
            try:
                self.storage.delete(receipt_url)
            except DependencyException:
                logger.warning(f"⚠️ Could not delete receipt of rejected booking: {receipt_url}")
            raise conflict(overlapping) from e

        logger.info(f"✅ Court booking {booking.id} saved, running confirmations")
        return await self.pipeline.run(booking, ConfirmationKind.FACILITY)

    async def retry_confirmations(self, booking_id: int) -> FacilityBooking:
        booking = self.get_booking(booking_id)
        return await self.pipeline.run(booking, ConfirmationKind.FACILITY)

    def list_bookings(self) -> list[FacilityBooking]:
        return self.repo.get_all(self.db)

    def get_booking(self, booking_id: int) -> FacilityBooking:
        booking = self.repo.get_by_id(self.db, booking_id)
        if not booking:
            raise NotFoundException("Booking not found", code="BookingNotFound")
        return booking

    def list_user_bookings(self, user_id: int) -> list[FacilityBooking]:
        return self.repo.get_by_user(self.db, user_id)

    def list_future_bookings(self, user_id: int) -> list[FacilityBooking]:
        return self.repo.get_future_by_user(self.db, user_id, self.today())

    def delete_future_bookings(self, user_id: int) -> dict:
        deleted = self.repo.delete_many(self.db, self.list_future_bookings(user_id))
        logger.info(f"🗑️ Deleted {deleted} future court bookings for user {user_id}")
        return {"message": f"{deleted} future bookings deleted successfully.", "deletedCount": deleted}

    def qr_code_url(self, booking_id: int) -> str:
        booking = self.get_booking(booking_id)
        if not booking.qr_code:
            raise NotFoundException("QR code not found", code="QRCodeNotFound", details={"bookingId": booking_id})
        return booking.qr_code
