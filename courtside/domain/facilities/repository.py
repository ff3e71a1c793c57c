"""Facility repository - Database operations for courts"""

from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Facility, FacilityBookingSlot


class FacilityRepository:
    """Repository for facility database operations"""

    @staticmethod
    def get_all(db: Session) -> list[Facility]:
        return db.query(Facility).order_by(Facility.sport_name, Facility.court_number).all()

    @staticmethod
    def get_by_id(db: Session, facility_id: int) -> Optional[Facility]:
        return db.query(Facility).filter(Facility.id == facility_id).first()

    @staticmethod
    def get_active_for_sport(db: Session, sport_name: str, exclude_courts: set[str]) -> list[Facility]:
        query = db.query(Facility).filter(Facility.sport_name == sport_name, Facility.is_active.is_(True))
        if exclude_courts:
            query = query.filter(Facility.court_number.notin_(sorted(exclude_courts)))
        return query.order_by(Facility.court_number).all()

    @staticmethod
    def booked_courts(db: Session, sport_name: str, day: date, time_slot: str) -> set[str]:
        """Court numbers already reserved for one slot"""
        rows = (
            db.query(FacilityBookingSlot.court_number)
            .filter(
                FacilityBookingSlot.sport_name == sport_name,
                FacilityBookingSlot.date == day,
                FacilityBookingSlot.time_slot == time_slot,
            )
            .all()
        )
        return {row[0] for row in rows}

    @staticmethod
    def create(db: Session, **facility_data) -> Facility:
        facility = Facility(**facility_data)
        db.add(facility)
        db.commit()
        db.refresh(facility)
        return facility

    @staticmethod
    def update(db: Session, facility: Facility, **updates) -> Facility:
        """Update a facility with provided fields"""
        for key, value in updates.items():
            if value is not None and hasattr(facility, key):
                setattr(facility, key, value)

        db.commit()
        db.refresh(facility)
        return facility

    @staticmethod
    def delete(db: Session, facility: Facility) -> None:
        db.delete(facility)
        db.commit()
