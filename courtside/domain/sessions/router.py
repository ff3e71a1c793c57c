"""Coaching session request / booking router"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from ...auth import ensure_self_or_admin, get_current_user, require_roles
from ...database import get_db
from ...models import ROLE_ADMIN, ROLE_COACH, SessionBooking, SessionRequest, User
from ...services.storage import RECEIPT_TYPES, ObjectStorage, get_object_storage, read_upload
from ..bookings.pipeline import ConfirmationPipeline, get_confirmation_pipeline
from .schemas import (
    QRCodeResponse,
    SessionBookingResponse,
    SessionRequestCreate,
    SessionRequestResponse,
    SessionRespondRequest,
)
from .service import SessionService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessions", tags=["Sessions"])


def get_session_service(
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_object_storage),
    pipeline: ConfirmationPipeline = Depends(get_confirmation_pipeline),
) -> SessionService:
    """Dependency injection for SessionService"""
    return SessionService(db, storage, pipeline)


def to_request_response(r: SessionRequest, avg_rating: Optional[float] = None) -> SessionRequestResponse:
    return SessionRequestResponse(
        id=r.id,
        userId=r.user_id,
        userName=r.user_name,
        userEmail=r.user_email,
        userPhone=r.user_phone,
        sportName=r.sport_name,
        sessionType=r.session_type,
        sessionFee=r.session_fee,
        coachProfileId=r.coach_profile_id,
        coachId=r.coach_id,
        coachName=r.coach_name,
        coachEmail=r.coach_email,
        coachLevel=r.coach_level,
        coachImage=r.image,
        requestedTimeSlots=r.requested_time_slots,
        status=r.status,
        courtNo=r.court_no,
        receipt=r.receipt,
        avgRating=avg_rating,
        createdAt=r.created_at,
        updatedAt=r.updated_at,
    )


def to_booking_response(b: SessionBooking) -> SessionBookingResponse:
    return SessionBookingResponse(
        id=b.id,
        sessionRequestId=b.session_request_id,
        userId=b.user_id,
        userName=b.user_name,
        userEmail=b.user_email,
        userPhone=b.user_phone,
        sportName=b.sport_name,
        sessionType=b.session_type,
        bookedTimeSlots=b.booked_time_slots,
        coachId=b.coach_id,
        coachName=b.coach_name,
        coachEmail=b.coach_email,
        coachLevel=b.coach_level,
        sessionFee=b.session_fee,
        courtNo=b.court_no,
        receipt=b.receipt,
        qrCodeUrl=b.qr_code_url,
        qrGenerated=b.qr_generated,
        emailSent=b.email_sent,
        lastError=b.last_error,
        createdAt=b.created_at,
        updatedAt=b.updated_at,
    )


# ============================================================================
# Requests
# ============================================================================


@router.post("/requests", response_model=SessionRequestResponse, status_code=201)
async def create_session_request(
    data: SessionRequestCreate,
    current_user: User = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    """Ask a coach for one or more of their advertised (date, slot) pairs"""
    return to_request_response(service.create_request(current_user, data))


@router.put("/requests/{request_id}/respond", response_model=SessionRequestResponse)
async def respond_to_session_request(
    request_id: int,
    data: SessionRespondRequest,
    coach: User = Depends(require_roles(ROLE_COACH, ROLE_ADMIN)),
    service: SessionService = Depends(get_session_service),
):
    """Accept or reject a request addressed to the calling coach"""
    return to_request_response(service.respond(request_id, coach, data.status, data.courtNo))


@router.get("/requests/user/{user_id}", response_model=list[SessionRequestResponse])
async def list_user_session_requests(
    user_id: int,
    current_user: User = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    """A user's requests, each with the coach's current average rating"""
    ensure_self_or_admin(current_user, user_id)
    return [to_request_response(r, avg) for r, avg in service.list_user_requests(user_id)]


@router.get("/requests/coach", response_model=list[SessionRequestResponse])
async def list_coach_session_requests(
    coach: User = Depends(require_roles(ROLE_COACH)),
    service: SessionService = Depends(get_session_service),
):
    return [to_request_response(r) for r in service.list_coach_requests(coach.id)]


@router.get("/requests/{request_id}", response_model=SessionRequestResponse)
async def get_session_request(
    request_id: int,
    current_user: User = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    return to_request_response(service.get_visible_request(request_id, current_user))


@router.post("/requests/{request_id}/receipt", response_model=SessionRequestResponse)
async def upload_session_receipt(
    request_id: int,
    receipt: Optional[UploadFile] = File(None),
    current_user: User = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    upload = await read_upload(
        receipt, RECEIPT_TYPES, missing_code="MissingReceipt", missing_message="Receipt file is required"
    )
    return to_request_response(service.attach_receipt(request_id, current_user, upload))


@router.post("/requests/{request_id}/book", response_model=SessionBookingResponse, status_code=201)
async def book_session(
    request_id: int,
    current_user: User = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    """Turn an accepted, paid request into a confirmed session booking"""
    return to_booking_response(await service.book(request_id, current_user))


# ============================================================================
# Bookings
# ============================================================================


@router.get("/bookings", response_model=list[SessionBookingResponse])
async def list_session_bookings(
    _admin: User = Depends(require_roles(ROLE_ADMIN)),
    service: SessionService = Depends(get_session_service),
):
    return [to_booking_response(b) for b in service.list_bookings()]


@router.get("/bookings/user/{user_id}", response_model=list[SessionBookingResponse])
async def list_user_session_bookings(
    user_id: int,
    current_user: User = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    ensure_self_or_admin(current_user, user_id)
    return [to_booking_response(b) for b in service.list_user_bookings(user_id)]


@router.get("/bookings/user/{user_id}/future", response_model=list[SessionBookingResponse])
async def list_future_session_bookings(
    user_id: int,
    current_user: User = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    """Bookings whose earliest session date is after today"""
    ensure_self_or_admin(current_user, user_id)
    return [to_booking_response(b) for b in service.list_future_bookings(user_id)]


@router.delete("/bookings/user/{user_id}/future")
async def delete_future_session_bookings(
    user_id: int,
    current_user: User = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    ensure_self_or_admin(current_user, user_id)
    return service.delete_future_bookings(user_id)


@router.get("/bookings/coach/{coach_id}", response_model=list[SessionBookingResponse])
async def list_coach_session_bookings(
    coach_id: int,
    current_user: User = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    ensure_self_or_admin(current_user, coach_id)
    return [to_booking_response(b) for b in service.list_coach_bookings(coach_id)]


@router.get("/bookings/{booking_id}", response_model=SessionBookingResponse)
async def get_session_booking(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    booking = service.get_booking(booking_id)
    if current_user.id != booking.coach_id:
        ensure_self_or_admin(current_user, booking.user_id)
    return to_booking_response(booking)


@router.get("/bookings/{booking_id}/qr", response_model=QRCodeResponse)
async def get_session_booking_qr(
    booking_id: int,
    current_user: User = Depends(get_current_user),
    service: SessionService = Depends(get_session_service),
):
    booking = service.get_booking(booking_id)
    if current_user.id != booking.coach_id:
        ensure_self_or_admin(current_user, booking.user_id)
    return QRCodeResponse(qrCodeUrl=service.qr_code_url(booking_id))


@router.post("/bookings/{booking_id}/confirmations/retry", response_model=SessionBookingResponse)
async def retry_session_booking_confirmations(
    booking_id: int,
    _admin: User = Depends(require_roles(ROLE_ADMIN)),
    service: SessionService = Depends(get_session_service),
):
    """Re-run pending QR/email steps (Admin only)"""
    return to_booking_response(await service.retry_confirmations(booking_id))
