"""Equipment booking repository"""

from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from ...models import EquipmentBooking


class EquipmentBookingRepository:
    @staticmethod
    def create(db: Session, booking: EquipmentBooking) -> EquipmentBooking:
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    @staticmethod
    def get_all(db: Session) -> list[EquipmentBooking]:
        return db.query(EquipmentBooking).order_by(EquipmentBooking.date_time.desc()).all()

    @staticmethod
    def get_by_id(db: Session, booking_id: int) -> Optional[EquipmentBooking]:
        return db.query(EquipmentBooking).filter(EquipmentBooking.id == booking_id).first()

    @staticmethod
    def get_by_user(db: Session, user_id: int) -> list[EquipmentBooking]:
        return (
            db.query(EquipmentBooking)
            .filter(EquipmentBooking.user_id == user_id)
            .order_by(EquipmentBooking.date_time.desc())
            .all()
        )

    @staticmethod
    def get_future_by_user(db: Session, user_id: int, now: datetime) -> list[EquipmentBooking]:
        return (
            db.query(EquipmentBooking)
            .filter(EquipmentBooking.user_id == user_id, EquipmentBooking.date_time > now)
            .order_by(EquipmentBooking.date_time)
            .all()
        )

    @staticmethod
    def delete_many(db: Session, bookings: list[EquipmentBooking]) -> int:
        for booking in bookings:
            db.delete(booking)
        db.commit()
        return len(bookings)
