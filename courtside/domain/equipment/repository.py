"""Equipment repository"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import Equipment


class EquipmentRepository:
    @staticmethod
    def get_all(db: Session, active_only: bool = False) -> list[Equipment]:
        query = db.query(Equipment)
        if active_only:
            query = query.filter(Equipment.is_active.is_(True))
        return query.order_by(Equipment.sport_name, Equipment.equipment_name).all()

    @staticmethod
    def get_by_id(db: Session, equipment_id: int) -> Optional[Equipment]:
        return db.query(Equipment).filter(Equipment.id == equipment_id).first()

    @staticmethod
    def create(db: Session, **equipment_data) -> Equipment:
        equipment = Equipment(**equipment_data)
        db.add(equipment)
        db.commit()
        db.refresh(equipment)
        return equipment

    @staticmethod
    def update(db: Session, equipment: Equipment, **updates) -> Equipment:
        for key, value in updates.items():
            if value is not None and hasattr(equipment, key):
                setattr(equipment, key, value)
        db.commit()
        db.refresh(equipment)
        return equipment

    @staticmethod
    def delete(db: Session, equipment: Equipment) -> None:
        db.delete(equipment)
        db.commit()
