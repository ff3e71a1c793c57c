"""Facility booking router"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from ...auth import ensure_self_or_admin, get_current_user, require_roles
from ...database import get_db
from ...models import ROLE_ADMIN, FacilityBooking, User
from ...services.storage import RECEIPT_TYPES, ObjectStorage, get_object_storage, read_upload
from ..bookings.pipeline import ConfirmationPipeline, get_confirmation_pipeline
from .schemas import AvailableSlotsResponse, FacilityBookingCreate, FacilityBookingResponse
from .service import FacilityBookingService, parse_time_slots

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/facility-bookings", tags=["Facility Bookings"])


def get_facility_booking_service(
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_object_storage),
    pipeline: ConfirmationPipeline = Depends(get_confirmation_pipeline),
) -> FacilityBookingService:
    """Dependency injection for FacilityBookingService"""
    return FacilityBookingService(db, storage, pipeline)


def to_response(b: FacilityBooking) -> FacilityBookingResponse:
    return FacilityBookingResponse(
        bookingId=b.id,
        userId=b.user_id,
        userName=b.user_name,
        userEmail=b.user_email,
        userPhoneNumber=b.user_phone_number,
        sportName=b.sport_name,
        courtNumber=b.court_number,
        courtPrice=b.court_price,
        date=b.date,
        timeSlots=b.time_slots,
        totalHours=b.total_hours,
        totalPrice=b.total_price,
        receipt=b.receipt,
        qrCode=b.qr_code,
        qrGenerated=b.qr_generated,
        emailSent=b.email_sent,
        messageSent=b.message_sent,
        lastError=b.last_error,
        createdAt=b.created_at,
    )


@router.post("", response_model=FacilityBookingResponse, status_code=201)
async def create_facility_booking(
    sportName: str = Form(...),
    courtNumber: str = Form(...),
    courtPrice: float = Form(...),
    day: date = Form(..., alias="date"),
    timeSlots: str = Form(...),
    userPhoneNumber: str = Form(...),
    userName: Optional[str] = Form(None),
    userEmail: Optional[str] = Form(None),
    receipt: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    service: FacilityBookingService = Depends(get_facility_booking_service),
):
    """Book one or more slots on a court. ``timeSlots`` is a JSON array of slot labels."""
    upload = await read_upload(
        receipt, RECEIPT_TYPES, missing_code="MissingReceipt", missing_message="Receipt is required for booking"
    )
    data = FacilityBookingCreate(
        userName=userName or current_user.name,
        userEmail=userEmail or current_user.email,
        userPhoneNumber=userPhoneNumber,
        sportName=sportName,
        courtNumber=courtNumber,
        courtPrice=courtPrice,
        date=day,
        timeSlots=parse_time_slots(timeSlots),
    )
    booking = await service.create_booking(current_user, data, upload)
    return to_response(booking)


@router.get("/available-slots", response_model=AvailableSlotsResponse)
async def get_available_time_slots(
    courtNumber: str = Query(...),
    sportName: str = Query(...),
    day: date = Query(..., alias="date"),
    _user: User = Depends(get_current_user),
    service: FacilityBookingService = Depends(get_facility_booking_service),
):
    available, booked = service.available_slots(courtNumber, sportName, day)
    return AvailableSlotsResponse(
        courtNumber=courtNumber, sportName=sportName, date=day, availableSlots=available, bookedSlots=booked
    )


@router.get("", response_model=list[FacilityBookingResponse])
async def list_facility_bookings(
    _admin: User = Depends(require_roles(ROLE_ADMIN)),
    service: FacilityBookingService = Depends(get_facility_booking_service),
):
    """All court bookings (Admin only)"""
    return [to_response(b) for b in service.list_bookings()]


@router.get("/user/{user_id}", response_model=list[FacilityBookingResponse])
async def list_user_facility_bookings(
    user_id: int,
    current_user: User = Depends(get_current_user),
    service: FacilityBookingService = Depends(get_facility_booking_service),
):
    ensure_self_or_admin(current_user, user_id)
    return [to_response(b) for b in service.list_user_bookings(user_id)]


@router.get("/user/{user_id}/future", response_model=list[FacilityBookingResponse])
async def list_future_facility_bookings(
    user_id: int,
    current_user: User = Depends(get_current_user),
    service: FacilityBookingService = Depends(get_facility_booking_service),
):
    """Bookings dated after today"""
    ensure_self_or_admin(current_user, user_id)
    return [to_response(b) for b in service.list_future_bookings(user_id)]


@router.delete("/user/{user_id}/future")
async def delete_future_facility_bookings(
    user_id: int,
    current_user: User = Depends(get_current_user),
    service: FacilityBookingService = Depends(get_facility_booking_service),
):
    ensure_self_or_admin(current_user, user_id)
    return service.delete_future_bookings(user_id)


@router.get("/{booking_id}", response_model=FacilityBookingResponse)
async def get_facility_booking(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    service: FacilityBookingService = Depends(get_facility_booking_service),
):
    booking = service.get_booking(booking_id)
    ensure_self_or_admin(current_user, booking.user_id)
    return to_response(booking)


@router.get("/{booking_id}/qr")
async def get_facility_booking_qr(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    service: FacilityBookingService = Depends(get_facility_booking_service),
):
    """Redirect to the stored QR code image"""
    ensure_self_or_admin(current_user, service.get_booking(booking_id).user_id)
    return RedirectResponse(service.qr_code_url(booking_id), status_code=307)


@router.post("/{booking_id}/confirmations/retry", response_model=FacilityBookingResponse)
async def retry_facility_booking_confirmations(
    booking_id: int,
    _admin: User = Depends(require_roles(ROLE_ADMIN)),
    service: FacilityBookingService = Depends(get_facility_booking_service),
):
    """Re-run pending QR/email/WhatsApp steps (Admin only)"""
    return to_response(await service.retry_confirmations(booking_id))
