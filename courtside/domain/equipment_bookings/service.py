"""Equipment booking service"""

import logging
from collections.abc import Callable
from datetime import datetime

from sqlalchemy.orm import Session

from ...models import EquipmentBooking, User
from ...services.storage import ObjectStorage
from ...shared.exceptions import NotFoundException, ValidationException
from ..bookings.pipeline import ConfirmationKind, ConfirmationPipeline
from ..scheduling.pricing import equipment_total
from .repository import EquipmentBookingRepository
from .schemas import EquipmentBookingCreate

logger = logging.getLogger(__name__)


def parse_quantity(raw) -> int:
    """Form values arrive as text; anything but a whole number is InvalidQuantity"""
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError):
        raise ValidationException(
            "Quantity must be a positive whole number", code="InvalidQuantity", details={"quantity": raw}
        )


class EquipmentBookingService:
    def __init__(
        self,
        db: Session,
        storage: ObjectStorage,
        pipeline: ConfirmationPipeline,
        now: Callable[[], datetime] = datetime.now,
    ):
        self.db = db
        self.storage = storage
        self.pipeline = pipeline
        self.now = now
        self.repo = EquipmentBookingRepository()

    def _start_of_today(self) -> datetime:
        return self.now().replace(hour=0, minute=0, second=0, microsecond=0)

    async def create_booking(
        self, user: User, data: EquipmentBookingCreate, receipt: tuple[bytes, str, str]
    ) -> EquipmentBooking:
        logger.info(f"📥 Equipment booking request from user {user.id}: {data.quantity} x {data.equipmentName}")

        if data.dateTime < self._start_of_today():
            raise ValidationException(
                "Booking date and time cannot be in the past",
                code="PastDate",
                details={"dateTime": data.dateTime.isoformat()},
            )
        total_price = equipment_total(data.equipmentPrice, data.quantity)

        contents, filename, content_type = receipt
        receipt_url = self.storage.store(contents, "equipment_receipts", filename, content_type)

        booking = self.repo.create(
            self.db,
            EquipmentBooking(
                user_id=user.id,
                user_name=data.userName,
                user_email=data.userEmail,
                user_phone_number=data.userPhoneNumber,
                date_time=data.dateTime,
                equipment_name=data.equipmentName,
                sport_name=data.sportName,
                equipment_price=data.equipmentPrice,
                quantity=data.quantity,
                total_price=total_price,
                receipt=receipt_url,
            ),
        )
        logger.info(f"✅ Equipment booking {booking.id} saved, running confirmations")
        return await self.pipeline.run(booking, ConfirmationKind.EQUIPMENT)

    async def retry_confirmations(self, booking_id: int) -> EquipmentBooking:
        return await self.pipeline.run(self.get_booking(booking_id), ConfirmationKind.EQUIPMENT)

    def list_bookings(self) -> list[EquipmentBooking]:
        return self.repo.get_all(self.db)

    def get_booking(self, booking_id: int) -> EquipmentBooking:
        booking = self.repo.get_by_id(self.db, booking_id)
        if not booking:
            raise NotFoundException("Booking not found", code="BookingNotFound")
        return booking

    def list_user_bookings(self, user_id: int) -> list[EquipmentBooking]:
        return self.repo.get_by_user(self.db, user_id)

    def list_future_bookings(self, user_id: int) -> list[EquipmentBooking]:
        return self.repo.get_future_by_user(self.db, user_id, self.now())

    def delete_future_bookings(self, user_id: int) -> dict:
        deleted = self.repo.delete_many(self.db, self.list_future_bookings(user_id))
        logger.info(f"🗑️ Deleted {deleted} future equipment bookings for user {user_id}")
        return {"message": f"{deleted} future bookings deleted successfully.", "deletedCount": deleted}

    def qr_code_url(self, booking_id: int) -> str:
        booking = self.get_booking(booking_id)
        if not booking.qr_code:
            raise NotFoundException("QR code not found", code="QRCodeNotFound", details={"bookingId": booking_id})
        return booking.qr_code
