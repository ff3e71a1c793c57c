"""Session request / booking repository"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...models import SessionBooking, SessionBookingSlot, SessionRequest


class SessionRepository:
    # Requests
    @staticmethod
    def create_request(db: Session, **request_data) -> SessionRequest:
        request = SessionRequest(**request_data)
        db.add(request)
        db.commit()
        db.refresh(request)
        return request

    @staticmethod
    def get_request(db: Session, request_id: int) -> Optional[SessionRequest]:
        return db.query(SessionRequest).filter(SessionRequest.id == request_id).first()

    @staticmethod
    def get_requests_by_user(db: Session, user_id: int) -> list[SessionRequest]:
        return (
            db.query(SessionRequest)
            .filter(SessionRequest.user_id == user_id)
            .order_by(SessionRequest.created_at.desc(), SessionRequest.id.desc())
            .all()
        )

    @staticmethod
    def get_requests_by_coach(db: Session, coach_id: int) -> list[SessionRequest]:
        return (
            db.query(SessionRequest)
            .filter(SessionRequest.coach_id == coach_id)
            .order_by(SessionRequest.created_at.desc(), SessionRequest.id.desc())
            .all()
        )

    # Bookings
    @staticmethod
    def booked_slots(db: Session, coach_id: int, day: date) -> list[str]:
        rows = (
            db.query(SessionBookingSlot.time_slot)
            .filter(SessionBookingSlot.coach_id == coach_id, SessionBookingSlot.date == day)
            .all()
        )
        return [row[0] for row in rows]

    @staticmethod
    def add_booking_with_reservations(
        db: Session, booking: SessionBooking, pairs: list[tuple[date, str]]
    ) -> SessionBooking:
        """Insert booking + reservation rows in one commit; IntegrityError on a taken slot"""
        for day, slot in pairs:
            booking.reservations.append(SessionBookingSlot(coach_id=booking.coach_id, date=day, time_slot=slot))
        db.add(booking)
        try:
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(booking)
        return booking

    @staticmethod
    def get_booking(db: Session, booking_id: int) -> Optional[SessionBooking]:
        return db.query(SessionBooking).filter(SessionBooking.id == booking_id).first()

    @staticmethod
    def get_all_bookings(db: Session) -> list[SessionBooking]:
        return db.query(SessionBooking).order_by(SessionBooking.id.desc()).all()

    @staticmethod
    def get_bookings_by_user(db: Session, user_id: int) -> list[SessionBooking]:
        return (
            db.query(SessionBooking)
            .filter(SessionBooking.user_id == user_id)
            .order_by(SessionBooking.id.desc())
            .all()
        )

    @staticmethod
    def get_bookings_by_coach(db: Session, coach_id: int) -> list[SessionBooking]:
        return (
            db.query(SessionBooking)
            .filter(SessionBooking.coach_id == coach_id)
            .order_by(SessionBooking.id.desc())
            .all()
        )

    @staticmethod
    def delete_bookings(db: Session, bookings: list[SessionBooking]) -> int:
        for booking in bookings:
            db.delete(booking)
        db.commit()
        return len(bookings)
