"""Coach profile schemas"""

from datetime import date as date_type
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class CoachPrice(BaseModel):
    individualSessionPrice: float = Field(..., gt=0)
    groupSessionPrice: float = Field(..., gt=0)


class TimeSlotPair(BaseModel):
    """One advertised (date, slot) pair, e.g. {"date": "2025-06-10", "timeSlot": "08:00 - 09:00"}"""

    date: date_type
    timeSlot: str


class CoachProfileCreate(BaseModel):
    coachName: str
    coachLevel: str
    coachingSport: str
    coachPrice: CoachPrice
    availableTimeSlots: list[TimeSlotPair] = []
    experience: Optional[str] = None
    offerSessions: list[str] = []
    sessionDescription: Optional[str] = None


class CoachProfileUpdate(BaseModel):
    coachName: Optional[str] = None
    coachLevel: Optional[str] = None
    coachingSport: Optional[str] = None
    coachPrice: Optional[CoachPrice] = None
    availableTimeSlots: Optional[list[TimeSlotPair]] = None
    experience: Optional[str] = None
    offerSessions: Optional[list[str]] = None
    sessionDescription: Optional[str] = None


class CoachProfileResponse(BaseModel):
    coachProfileId: int
    userId: int
    coachName: str
    coachLevel: str
    coachingSport: str
    coachPrice: dict
    availableTimeSlots: list[dict]
    experience: Optional[str] = None
    offerSessions: Optional[list[str]] = None
    sessionDescription: Optional[str] = None
    isActive: bool
    image: Optional[str] = None
    avgRating: Optional[float] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    class Config:
        from_attributes = True
