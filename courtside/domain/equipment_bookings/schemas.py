"""Equipment booking schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class EquipmentBookingCreate(BaseModel):
    userName: str
    userEmail: str
    userPhoneNumber: str
    equipmentName: str
    sportName: str
    equipmentPrice: float
    quantity: int
    dateTime: datetime


class EquipmentBookingResponse(BaseModel):
    bookingId: int
    userId: int
    userName: str
    userEmail: str
    userPhoneNumber: str
    equipmentName: str
    sportName: str
    equipmentPrice: float
    quantity: int
    dateTime: datetime
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
