"""Facility booking schemas"""

from datetime import date as date_type
from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class FacilityBookingResponse(BaseModel):
    bookingId: int
    userId: int
    userName: str
    userEmail: str
    userPhoneNumber: str
    sportName: str
    courtNumber: str
    courtPrice: float
    date: date_type
    timeSlots: list[str]
    totalHours: int
    totalPrice: float
    receipt: Optional[str] = None
    qrCode: Optional[str] = None
    qrGenerated: bool = False
    emailSent: bool = False
    messageSent: bool = False
    lastError: Optional[str] = None
    createdAt: Optional[datetime] = None

    class Config:
        from_attributes = True


class AvailableSlotsResponse(BaseModel):
    courtNumber: str
    sportName: str
    date: date_type
    availableSlots: list[str]
    bookedSlots: list[str]


class FacilityBookingCreate(BaseModel):
    userName: str
    userEmail: str
    userPhoneNumber: str
    sportName: str
    courtNumber: str
    courtPrice: float
    date: date_type
    timeSlots: list[str]
