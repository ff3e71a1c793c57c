"""Session request / booking schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel

from ..coaches.schemas import TimeSlotPair


class SessionRequestCreate(BaseModel):
    coachProfileId: int
    sportName: str
    sessionType: str  # "Individual Session" or "Group Session"
    requestedTimeSlots: list[TimeSlotPair]
    userPhone: str
    userName: Optional[str] = None
    userEmail: Optional[str] = None


class SessionRespondRequest(BaseModel):
    status: str  # Accepted or Rejected
    courtNo: Optional[str] = None


class SessionRequestResponse(BaseModel):
    id: int
    userId: int
    userName: str
    userEmail: str
    userPhone: str
    sportName: str
    sessionType: str
    sessionFee: float
    coachProfileId: int
    coachId: int
    coachName: str
    coachEmail: str
    coachLevel: str
    coachImage: Optional[str] = None
    requestedTimeSlots: list[dict]
    status: str
    courtNo: Optional[str] = None
    receipt: Optional[str] = None
    avgRating: Optional[float] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    class Config:
        from_attributes = True


class SessionBookingResponse(BaseModel):
    id: int
    sessionRequestId: int
    userId: int
    userName: str
    userEmail: str
    userPhone: str
    sportName: str
    sessionType: str
    bookedTimeSlots: list[dict]
    coachId: int
    coachName: str
    coachEmail: str
    coachLevel: str
    sessionFee: float
    courtNo: Optional[str] = None
    receipt: str
    qrCodeUrl: Optional[str] = None
    qrGenerated: bool = False
    emailSent: bool = False
    lastError: Optional[str] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    class Config:
        from_attributes = True


class QRCodeResponse(BaseModel):
    qrCodeUrl: str
