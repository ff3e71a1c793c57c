"""Equipment domain schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class EquipmentToggleRequest(BaseModel):
    deactivationReason: Optional[str] = None


class EquipmentResponse(BaseModel):
    id: int
    equipmentName: str
    sportName: str
    rentPrice: float
    image: str
    isActive: bool
    deactivationReason: Optional[str] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    class Config:
        from_attributes = True
