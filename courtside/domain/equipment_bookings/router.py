"""Equipment booking router"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from ...auth import ensure_self_or_admin, get_current_user, require_roles
from ...database import get_db
from ...models import ROLE_ADMIN, EquipmentBooking, User
from ...services.storage import RECEIPT_TYPES, ObjectStorage, get_object_storage, read_upload
from ..bookings.pipeline import ConfirmationPipeline, get_confirmation_pipeline
from .schemas import EquipmentBookingCreate, EquipmentBookingResponse
from .service import EquipmentBookingService, parse_quantity

router = APIRouter(prefix="/equipment-bookings", tags=["Equipment Bookings"])


def get_equipment_booking_service(
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_object_storage),
    pipeline: ConfirmationPipeline = Depends(get_confirmation_pipeline),
) -> EquipmentBookingService:
    """Dependency injection for EquipmentBookingService"""
    return EquipmentBookingService(db, storage, pipeline)


def to_response(b: EquipmentBooking) -> EquipmentBookingResponse:
    return EquipmentBookingResponse(
        bookingId=b.id,
        userId=b.user_id,
        userName=b.user_name,
        userEmail=b.user_email,
        userPhoneNumber=b.user_phone_number,
        equipmentName=b.equipment_name,
        sportName=b.sport_name,
        equipmentPrice=b.equipment_price,
        quantity=b.quantity,
        dateTime=b.date_time,
        totalPrice=b.total_price,
        receipt=b.receipt,
        qrCode=b.qr_code,
        qrGenerated=b.qr_generated,
        emailSent=b.email_sent,
        messageSent=b.message_sent,
        lastError=b.last_error,
        createdAt=b.created_at,
    )


@router.post("", response_model=EquipmentBookingResponse, status_code=201)
async def create_equipment_booking(
    equipmentName: str = Form(...),
    sportName: str = Form(...),
    equipmentPrice: float = Form(...),
    quantity: str = Form(...),
    dateTime: datetime = Form(...),
    userPhoneNumber: str = Form(...),
    userName: Optional[str] = Form(None),
    userEmail: Optional[str] = Form(None),
    receipt: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    service: EquipmentBookingService = Depends(get_equipment_booking_service),
):
    upload = await read_upload(
        receipt, RECEIPT_TYPES, missing_code="MissingReceipt", missing_message="Receipt is required for booking"
    )
    data = EquipmentBookingCreate(
        userName=userName or current_user.name,
        userEmail=userEmail or current_user.email,
        userPhoneNumber=userPhoneNumber,
        equipmentName=equipmentName,
        sportName=sportName,
        equipmentPrice=equipmentPrice,
        quantity=parse_quantity(quantity),
        # Stored as naive local time
        dateTime=dateTime.replace(tzinfo=None),
    )
    return to_response(await service.create_booking(current_user, data, upload))


@router.get("", response_model=list[EquipmentBookingResponse])
async def list_equipment_bookings(
    _admin: User = Depends(require_roles(ROLE_ADMIN)),
    service: EquipmentBookingService = Depends(get_equipment_booking_service),
):
    return [to_response(b) for b in service.list_bookings()]


@router.get("/user/{user_id}", response_model=list[EquipmentBookingResponse])
async def list_user_equipment_bookings(
    user_id: int,
    current_user: User = Depends(get_current_user),
    service: EquipmentBookingService = Depends(get_equipment_booking_service),
):
    ensure_self_or_admin(current_user, user_id)
    return [to_response(b) for b in service.list_user_bookings(user_id)]


@router.get("/user/{user_id}/future", response_model=list[EquipmentBookingResponse])
async def list_future_equipment_bookings(
    user_id: int,
    current_user: User = Depends(get_current_user),
    service: EquipmentBookingService = Depends(get_equipment_booking_service),
):
    ensure_self_or_admin(current_user, user_id)
    return [to_response(b) for b in service.list_future_bookings(user_id)]


@router.delete("/user/{user_id}/future")
async def delete_future_equipment_bookings(
    user_id: int,
    current_user: User = Depends(get_current_user),
    service: EquipmentBookingService = Depends(get_equipment_booking_service),
):
    ensure_self_or_admin(current_user, user_id)
    return service.delete_future_bookings(user_id)


@router.get("/{booking_id}", response_model=EquipmentBookingResponse)
async def get_equipment_booking(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    service: EquipmentBookingService = Depends(get_equipment_booking_service),
):
    booking = service.get_booking(booking_id)
    ensure_self_or_admin(current_user, booking.user_id)
    return to_response(booking)


@router.get("/{booking_id}/qr")
async def get_equipment_booking_qr(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    service: EquipmentBookingService = Depends(get_equipment_booking_service),
):
    ensure_self_or_admin(current_user, service.get_booking(booking_id).user_id)
    return RedirectResponse(service.qr_code_url(booking_id), status_code=307)


@router.post("/{booking_id}/confirmations/retry", response_model=EquipmentBookingResponse)
async def retry_equipment_booking_confirmations(
    booking_id: int,
    _admin: User = Depends(require_roles(ROLE_ADMIN)),
    service: EquipmentBookingService = Depends(get_equipment_booking_service),
):
    return to_response(await service.retry_confirmations(booking_id))
