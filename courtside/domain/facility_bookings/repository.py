"""Facility booking repository"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...models import FacilityBooking, FacilityBookingSlot


class FacilityBookingRepository:
    """Repository for court booking database operations"""

    @staticmethod
    def booked_slots(db: Session, court_number: str, day: date, sport_name: Optional[str]) -> list[str]:
        query = db.query(FacilityBookingSlot.time_slot).filter(
            FacilityBookingSlot.court_number == court_number,
            FacilityBookingSlot.date == day,
        )
        if sport_name:
            query = query.filter(FacilityBookingSlot.sport_name == sport_name)
        return [row[0] for row in query.all()]

    @staticmethod
    def add_with_reservations(db: Session, booking: FacilityBooking) -> FacilityBooking:
        """
        Insert the booking and one reservation row per slot in a single commit.

        Raises IntegrityError (after rollback) when another booking took one
        of the slots first.
        """
        for slot in booking.time_slots:
            booking.reservations.append(
                FacilityBookingSlot(
                    court_number=booking.court_number,
                    sport_name=booking.sport_name,
                    date=booking.date,
                    time_slot=slot,
                )
            )
        db.add(booking)
        try:
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(booking)
        return booking

    @staticmethod
    def get_all(db: Session) -> list[FacilityBooking]:
        return db.query(FacilityBooking).order_by(FacilityBooking.date.desc(), FacilityBooking.id.desc()).all()

    @staticmethod
    def get_by_id(db: Session, booking_id: int) -> Optional[FacilityBooking]:
        return db.query(FacilityBooking).filter(FacilityBooking.id == booking_id).first()

    @staticmethod
    def get_by_user(db: Session, user_id: int) -> list[FacilityBooking]:
        return (
            db.query(FacilityBooking)
            .filter(FacilityBooking.user_id == user_id)
            .order_by(FacilityBooking.date.desc(), FacilityBooking.id.desc())
            .all()
        )

    @staticmethod
    def get_future_by_user(db: Session, user_id: int, today: date) -> list[FacilityBooking]:
        return (
            db.query(FacilityBooking)
            .filter(FacilityBooking.user_id == user_id, FacilityBooking.date > today)
            .order_by(FacilityBooking.date, FacilityBooking.id)
            .all()
        )

    @staticmethod
    def delete_many(db: Session, bookings: list[FacilityBooking]) -> int:
        # ORM deletes so reservation rows cascade
        for booking in bookings:
            db.delete(booking)
        db.commit()
        return len(bookings)
