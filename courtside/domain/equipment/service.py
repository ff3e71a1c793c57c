"""Equipment service - rentable gear catalog"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...models import Equipment
from ...services.storage import ObjectStorage
from ...shared.exceptions import NotFoundException, ValidationException
from .repository import EquipmentRepository

logger = logging.getLogger(__name__)


class EquipmentService:
    def __init__(self, db: Session, storage: ObjectStorage):
        self.db = db
        self.storage = storage
        self.repo = EquipmentRepository()

    def list_equipment(self, active_only: bool = False) -> list[Equipment]:
        return self.repo.get_all(self.db, active_only=active_only)

    def get_equipment(self, equipment_id: int) -> Equipment:
        equipment = self.repo.get_by_id(self.db, equipment_id)
        if not equipment:
            raise NotFoundException("Equipment not found", code="EquipmentNotFound")
        return equipment

    def create_equipment(
        self, equipment_name: str, sport_name: str, rent_price: float, image: tuple[bytes, str, str]
    ) -> Equipment:
        if rent_price <= 0:
            raise ValidationException("Rent price must be greater than zero", code="InvalidPrice")

        contents, filename, content_type = image
        image_url = self.storage.store(contents, "equipment_images", filename, content_type)
        equipment = self.repo.create(
            self.db,
            equipment_name=equipment_name,
            sport_name=sport_name,
            rent_price=rent_price,
            image=image_url,
        )
        logger.info(f"✅ Created equipment {equipment.id}: {equipment_name}")
        return equipment

    def update_equipment(
        self,
        equipment_id: int,
        equipment_name: Optional[str] = None,
        sport_name: Optional[str] = None,
        rent_price: Optional[float] = None,
        image: Optional[tuple[bytes, str, str]] = None,
    ) -> Equipment:
        equipment = self.get_equipment(equipment_id)
        if rent_price is not None and rent_price <= 0:
            raise ValidationException("Rent price must be greater than zero", code="InvalidPrice")

        image_url = None
        if image:
            contents, filename, content_type = image
            image_url = self.storage.store(contents, "equipment_images", filename, content_type)

        return self.repo.update(
            self.db,
            equipment,
            equipment_name=equipment_name or None,
            sport_name=sport_name or None,
            rent_price=rent_price,
            image=image_url,
        )

    def delete_equipment(self, equipment_id: int) -> dict:
        self.repo.delete(self.db, self.get_equipment(equipment_id))
        return {"message": "Equipment removed successfully"}

    def toggle_equipment(self, equipment_id: int, deactivation_reason: Optional[str]) -> Equipment:
        equipment = self.get_equipment(equipment_id)
        if equipment.is_active:
            equipment.is_active = False
            equipment.deactivation_reason = deactivation_reason
        else:
            equipment.is_active = True
            equipment.deactivation_reason = None
        self.db.commit()
        self.db.refresh(equipment)
        return equipment
