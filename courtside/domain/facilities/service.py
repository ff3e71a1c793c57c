"""Facility service - Court management and free-court lookup"""

import logging
from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Facility
from ...services.storage import ObjectStorage
from ...shared.exceptions import NotFoundException, ValidationException
from ..scheduling.slots import DEFAULT_SLOT_CATALOG, SlotCatalog
from .repository import FacilityRepository

logger = logging.getLogger(__name__)


def _check_price(price: Optional[float]) -> None:
    if price is not None and price <= 0:
        raise ValidationException("Court price must be greater than zero", code="InvalidPrice")


class FacilityService:
    """Service layer for facility business logic"""

    def __init__(self, db: Session, storage: ObjectStorage, catalog: SlotCatalog = DEFAULT_SLOT_CATALOG):
        self.db = db
        self.storage = storage
        self.catalog = catalog
        self.repo = FacilityRepository()

    def list_facilities(self) -> list[Facility]:
        return self.repo.get_all(self.db)

    def get_facility(self, facility_id: int) -> Facility:
        facility = self.repo.get_by_id(self.db, facility_id)
        if not facility:
            raise NotFoundException("Facility not found", code="FacilityNotFound")
        return facility

    def available_facilities(self, sport_name: str, day: date, time_slot: str) -> list[Facility]:
        """Active courts for ``sport_name`` with ``time_slot`` still free on ``day``"""
        if time_slot not in self.catalog:
            raise ValidationException(
                "Invalid time slot", code="InvalidSlots", details={"invalidSlots": [time_slot]}
            )
        booked = self.repo.booked_courts(self.db, sport_name, day, time_slot)
        return self.repo.get_active_for_sport(self.db, sport_name, booked)

    def create_facility(
        self,
        court_number: str,
        sport_name: str,
        sport_category: str,
        court_price: float,
        image: tuple[bytes, str, str],
    ) -> Facility:
        _check_price(court_price)
        contents, filename, content_type = image
        image_url = self.storage.store(contents, "facility_images", filename, content_type)

        facility = self.repo.create(
            self.db,
            court_number=court_number,
            sport_name=sport_name,
            sport_category=sport_category,
            court_price=court_price,
            image=image_url,
        )
        logger.info(f"✅ Created facility {facility.id}: {sport_name} court {court_number}")
        return facility

    def update_facility(
        self,
        facility_id: int,
        court_number: Optional[str] = None,
        sport_name: Optional[str] = None,
        sport_category: Optional[str] = None,
        court_price: Optional[float] = None,
        image: Optional[tuple[bytes, str, str]] = None,
    ) -> Facility:
        facility = self.get_facility(facility_id)
        _check_price(court_price)

        image_url = None
        if image:
            contents, filename, content_type = image
            image_url = self.storage.store(contents, "facility_images", filename, content_type)

        return self.repo.update(
            self.db,
            facility,
            court_number=court_number or None,
            sport_name=sport_name or None,
            sport_category=sport_category or None,
            court_price=court_price,
            image=image_url,
        )

    def delete_facility(self, facility_id: int) -> dict:
        facility = self.get_facility(facility_id)
        self.repo.delete(self.db, facility)
        logger.info(f"🗑️ Deleted facility {facility_id}")
        return {"message": "Facility removed successfully"}

    def toggle_facility(self, facility_id: int, deactivation_reason: Optional[str]) -> Facility:
        """Deactivate with a reason, or reactivate and clear it"""
        facility = self.get_facility(facility_id)
        if facility.is_active:
            facility.is_active = False
            facility.deactivation_reason = deactivation_reason
        else:
            facility.is_active = True
            facility.deactivation_reason = None
        self.db.commit()
        self.db.refresh(facility)
        return facility
