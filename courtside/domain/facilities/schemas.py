"""Facility domain schemas"""

from datetime import date as date_type
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class FacilityToggleRequest(BaseModel):
    deactivationReason: Optional[str] = None


class FacilityResponse(BaseModel):
    id: int
    courtNumber: str
    sportName: str
    sportCategory: str
    courtPrice: float
    image: str
    isActive: bool
    deactivationReason: Optional[str] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    class Config:
        from_attributes = True


class AvailableFacilitiesResponse(BaseModel):
    sportName: str
    date: date_type
    timeSlot: str
    availableFacilities: list[FacilityResponse]
