"""
Session workflow service.

A session request moves Pending -> Accepted | Rejected when the coach
responds. Booking needs an Accepted request with a receipt attached; it
creates an independent SessionBooking and leaves the request's status
as it is.
"""

import logging
from collections import defaultdict
from collections.abc import Callable
from datetime import date
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ... import config
from ...models import ROLE_ADMIN, CoachProfile, SessionBooking, SessionRequest, User
from ...services.storage import ObjectStorage
from ...shared.exceptions import (
    ConflictException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from ...shared.validators import parse_date
from ..bookings.pipeline import ConfirmationKind, ConfirmationPipeline
from ..coaches.schemas import TimeSlotPair
from ..coaches.service import serialize_pairs
from ..reviews.repository import ReviewRepository
from ..scheduling.availability import AvailabilityChecker, conflict
from ..scheduling.pricing import session_fee
from ..scheduling.slots import DEFAULT_SLOT_CATALOG, SlotCatalog
from .repository import SessionRepository
from .schemas import SessionRequestCreate

logger = logging.getLogger(__name__)

PENDING = "Pending"
ACCEPTED = "Accepted"
REJECTED = "Rejected"
BOOKED = "Booked"
RESPONSE_STATUSES = (ACCEPTED, REJECTED)


def pair_key(pair: dict) -> tuple[date, str]:
    return parse_date(pair["date"]), pair["timeSlot"]


class SessionService:
    def __init__(
        self,
        db: Session,
        storage: ObjectStorage,
        pipeline: ConfirmationPipeline,
        catalog: SlotCatalog = DEFAULT_SLOT_CATALOG,
        today: Callable[[], date] = date.today,
        allow_rerespond: Optional[bool] = None,
    ):
        self.db = db
        self.storage = storage
        self.pipeline = pipeline
        self.catalog = catalog
        self.today = today
        self.allow_rerespond = config.SESSION_ALLOW_RERESPOND if allow_rerespond is None else allow_rerespond
        self.repo = SessionRepository()
        self.reviews = ReviewRepository()
        self.checker = AvailabilityChecker(
            lambda coach_id, day, _sport: self.repo.booked_slots(self.db, int(coach_id), day),
            catalog=catalog,
            today=today,
        )

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    def create_request(self, user: User, data: SessionRequestCreate) -> SessionRequest:
        profile = self.db.query(CoachProfile).filter(CoachProfile.id == data.coachProfileId).first()
        fee = session_fee(profile.coach_price if profile else None, data.sessionType)

        requested = [(pair.date, pair.timeSlot) for pair in data.requestedTimeSlots]
        if not requested:
            raise ValidationException("At least one time slot is required", code="InvalidSlots")
        if len(set(requested)) != len(requested):
            raise ValidationException("Duplicate requested time slots", code="InvalidSlots")

        # Exact match on calendar day and slot label
        offered = {pair_key(pair) for pair in (profile.available_time_slots or [])}
        not_offered = [p for p in data.requestedTimeSlots if (p.date, p.timeSlot) not in offered]
        if not_offered:
            raise ValidationException(
                "Requested time slots are not available.",
                code="SlotNotOffered",
                details={"slots": [{"date": p.date.isoformat(), "timeSlot": p.timeSlot} for p in not_offered]},
            )

        coach_user = profile.user
        request = self.repo.create_request(
            self.db,
            user_id=user.id,
            user_name=data.userName or user.name,
            user_email=data.userEmail or user.email,
            user_phone=data.userPhone,
            sport_name=data.sportName,
            session_type=data.sessionType,
            session_fee=fee,
            coach_profile_id=profile.id,
            coach_id=profile.user_id,
            coach_name=profile.coach_name,
            coach_email=coach_user.email,
            coach_level=profile.coach_level,
            image=profile.image,
            requested_time_slots=serialize_pairs(sorted(data.requestedTimeSlots, key=self._pair_order)),
            status=PENDING,
        )
        logger.info(f"📥 Session request {request.id}: user {user.id} -> coach {profile.user_id}")
        return request

    def _pair_order(self, pair: TimeSlotPair) -> tuple[date, int]:
        return pair.date, self.catalog.slots.index(pair.timeSlot)

    def get_request(self, request_id: int) -> SessionRequest:
        request = self.repo.get_request(self.db, request_id)
        if not request:
            raise NotFoundException("Session request not found", code="SessionRequestNotFound")
        return request

    def get_visible_request(self, request_id: int, user: User) -> SessionRequest:
        """Only the requester, the coach, or an admin may read a request"""
        request = self.get_request(request_id)
        if user.role != ROLE_ADMIN and user.id not in (request.user_id, request.coach_id):
            raise ForbiddenException(
                "Access denied. You can only view your own session requests.", code="Forbidden"
            )
        return request

    def respond(self, request_id: int, coach: User, status: str, court_no: Optional[str] = None) -> SessionRequest:
        if status not in RESPONSE_STATUSES:
            raise ValidationException(
                "Status must be Accepted or Rejected", code="InvalidStatus", details={"status": status}
            )

        request = self.get_request(request_id)
        if request.coach_id != coach.id and coach.role != ROLE_ADMIN:
            raise ForbiddenException("Only the requested coach can respond", code="Forbidden")

        if request.status == BOOKED or (request.status != PENDING and not self.allow_rerespond):
            raise ConflictException(
                f"Session request is already {request.status}",
                code="InvalidTransition",
                details={"from": request.status, "to": status},
            )

        previous = request.status
        request.status = status
        if status == ACCEPTED:
            if court_no:
                request.court_no = court_no
        else:
            request.court_no = None
        self.db.commit()
        self.db.refresh(request)
        logger.info(f"🔁 Session request {request.id}: {previous} -> {status}")
        return request

    def attach_receipt(self, request_id: int, user: User, receipt: tuple[bytes, str, str]) -> SessionRequest:
        """Allowed in any state"""
        request = self.get_request(request_id)
        if user.id != request.user_id and user.role != ROLE_ADMIN:
            raise ForbiddenException("Only the requester can upload a receipt", code="Forbidden")

        contents, filename, content_type = receipt
        request.receipt = self.storage.store(contents, "session_receipts", filename, content_type)
        self.db.commit()
        self.db.refresh(request)
        return request

    def list_user_requests(self, user_id: int) -> list[tuple[SessionRequest, Optional[float]]]:
        requests = self.repo.get_requests_by_user(self.db, user_id)
        ratings = self.reviews.average_ratings(self.db, list({r.coach_profile_id for r in requests}))
        return [(r, ratings.get(r.coach_profile_id)) for r in requests]

    def list_coach_requests(self, coach_id: int) -> list[SessionRequest]:
        return self.repo.get_requests_by_coach(self.db, coach_id)

    # ------------------------------------------------------------------
    # Bookings
    # ------------------------------------------------------------------

    async def book(self, request_id: int, user: User) -> SessionBooking:
        request = self.get_request(request_id)
        if user.id != request.user_id and user.role != ROLE_ADMIN:
            raise ForbiddenException("Only the requester can book this session", code="Forbidden")

        if request.status != ACCEPTED:
            raise ValidationException(
                "Session request has not been accepted yet", code="NotAccepted", details={"status": request.status}
            )
        if not request.receipt:
            raise ValidationException("Receipt is required before booking a session", code="MissingReceipt")

        pairs = [pair_key(pair) for pair in request.requested_time_slots]
        by_day: dict[date, list[str]] = defaultdict(list)
        for day, slot in pairs:
            by_day[day].append(slot)
        # Pairs were checked against the catalog when the request was made
        for day in sorted(by_day):
            self.checker.check_overlap(by_day[day], str(request.coach_id), day)

        booking = SessionBooking(
            session_request_id=request.id,
            user_id=request.user_id,
            user_name=request.user_name,
            user_email=request.user_email,
            user_phone=request.user_phone,
            sport_name=request.sport_name,
            session_type=request.session_type,
            booked_time_slots=list(request.requested_time_slots),
            coach_id=request.coach_id,
            coach_name=request.coach_name,
            coach_email=request.coach_email,
            coach_level=request.coach_level,
            session_fee=request.session_fee,
            court_no=request.court_no,
            receipt=request.receipt,
        )
        try:
            self.repo.add_booking_with_reservations(self.db, booking, pairs)
        except IntegrityError as e:
            taken = [
                slot
                for day in sorted(by_day)
                for slot in self.catalog.ordered(set(self.repo.booked_slots(self.db, request.coach_id, day)) & set(by_day[day]))
            ]
            logger.warning(f"⚠️ Session reservation constraint hit for coach {request.coach_id}: {taken}")
            raise conflict(taken or [slot for _, slot in pairs]) from e

        logger.info(f"✅ Session booking {booking.id} saved from request {request.id}")
        return await self.pipeline.run(booking, ConfirmationKind.SESSION)

    async def retry_confirmations(self, booking_id: int) -> SessionBooking:
        return await self.pipeline.run(self.get_booking(booking_id), ConfirmationKind.SESSION)

    def get_booking(self, booking_id: int) -> SessionBooking:
        booking = self.repo.get_booking(self.db, booking_id)
        if not booking:
            raise NotFoundException("Booking not found", code="BookingNotFound")
        return booking

    def list_bookings(self) -> list[SessionBooking]:
        return self.repo.get_all_bookings(self.db)

    def list_user_bookings(self, user_id: int) -> list[SessionBooking]:
        return self.repo.get_bookings_by_user(self.db, user_id)

    def list_coach_bookings(self, coach_id: int) -> list[SessionBooking]:
        return self.repo.get_bookings_by_coach(self.db, coach_id)

    def list_future_bookings(self, user_id: int) -> list[SessionBooking]:
        """Bookings whose first booked date is after today"""
        today = self.today()
        return [
            booking
            for booking in self.repo.get_bookings_by_user(self.db, user_id)
            if booking.booked_time_slots and min(pair_key(p)[0] for p in booking.booked_time_slots) > today
        ]

    def delete_future_bookings(self, user_id: int) -> dict:
        deleted = self.repo.delete_bookings(self.db, self.list_future_bookings(user_id))
        logger.info(f"🗑️ Deleted {deleted} future session bookings for user {user_id}")
        return {"message": f"{deleted} future session booking(s) deleted successfully.", "deletedCount": deleted}

    def qr_code_url(self, booking_id: int) -> str:
        booking = self.get_booking(booking_id)
        if not booking.qr_code_url:
            raise NotFoundException("QR code not found", code="QRCodeNotFound", details={"bookingId": booking_id})
        return booking.qr_code_url
