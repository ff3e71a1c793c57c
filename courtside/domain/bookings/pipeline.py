"""
Confirmation pipeline: QR code -> email -> WhatsApp.

Runs after a booking row is committed. Each step has a flag on the booking
and is skipped once the flag is set, so the pipeline can be re-run any
number of times (by the admin retry endpoint or the reconciler) without
repeating a step that already succeeded. Steps run in order and stop at
the first failure; the booking row itself is never rolled back.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Union

from fastapi import Depends
from sqlalchemy import or_
from sqlalchemy.orm import Session

from ...database import get_db
from ...email_service import BookingMailer, get_booking_mailer
from ...models import EquipmentBooking, FacilityBooking, SessionBooking
from ...services.qr_service import get_qr_encoder
from ...services.storage import ObjectStorage, get_object_storage
from ...services.twilio_service import WhatsAppMessenger, get_whatsapp_messenger
from ...shared.exceptions import DependencyException
from . import summaries

logger = logging.getLogger(__name__)

Booking = Union[FacilityBooking, EquipmentBooking, SessionBooking]


class ConfirmationKind(str, Enum):
    FACILITY = "facility"
    EQUIPMENT = "equipment"
    SESSION = "session"


MODEL_BY_KIND = {
    ConfirmationKind.FACILITY: FacilityBooking,
    ConfirmationKind.EQUIPMENT: EquipmentBooking,
    ConfirmationKind.SESSION: SessionBooking,
}


# Step name -> completion flag on the booking, in run order
STEP_FLAGS = {"qr": "qr_generated", "email": "email_sent", "whatsapp": "message_sent"}


def step_names(kind: ConfirmationKind) -> list[str]:
    if kind == ConfirmationKind.SESSION:
        return ["qr", "email"]
    return list(STEP_FLAGS)


@dataclass(frozen=True)
class ConfirmationStep:
    name: str
    flag: str
    action: Callable[[Booking], Awaitable[None]]


class ConfirmationPipeline:
    def __init__(
        self,
        db: Session,
        storage: ObjectStorage,
        qr_encoder: Callable[[str], bytes],
        mailer: BookingMailer,
        messenger: WhatsAppMessenger,
    ):
        self.db = db
        self.storage = storage
        self.qr_encoder = qr_encoder
        self.mailer = mailer
        self.messenger = messenger

    def steps(self, kind: ConfirmationKind) -> list[ConfirmationStep]:
        actions = {
            "qr": lambda b: self._generate_qr(b, kind),
            "email": lambda b: self._send_email(b, kind),
            "whatsapp": lambda b: self._send_whatsapp(b, kind),
        }
        return [ConfirmationStep(name, STEP_FLAGS[name], actions[name]) for name in step_names(kind)]

    async def run(self, booking: Booking, kind: ConfirmationKind) -> Booking:
        """Run every pending step; raise SideEffectFailed at the first failure"""
        for step in self.steps(kind):
            if getattr(booking, step.flag):
                continue

            try:
                await step.action(booking)
            except Exception as e:
                logger.error(f"❌ {kind.value} booking {booking.id}: {step.name} step failed: {e}")
                booking.last_error = f"{step.name}: {e}"
                self.db.commit()
                raise DependencyException(
                    "Booking was saved but a confirmation step failed",
                    code="SideEffectFailed",
                    details={"bookingId": booking.id, "step": step.name},
                ) from e

            setattr(booking, step.flag, True)
            self.db.commit()
            logger.info(f"✅ {kind.value} booking {booking.id}: {step.name} done")

        if booking.last_error:
            booking.last_error = None
            self.db.commit()
        self.db.refresh(booking)
        return booking

    async def _generate_qr(self, booking: Booking, kind: ConfirmationKind) -> None:
        if kind == ConfirmationKind.FACILITY:
            text = summaries.facility_qr_text(booking)
        elif kind == ConfirmationKind.EQUIPMENT:
            text = summaries.equipment_qr_text(booking)
        else:
            text = summaries.session_qr_text(booking)

        url = self.storage.store(
            self.qr_encoder(text), f"{kind.value}_qrcodes", f"booking-{booking.id}.png", "image/png"
        )
        if kind == ConfirmationKind.SESSION:
            booking.qr_code_url = url
        else:
            booking.qr_code = url

    async def _send_email(self, booking: Booking, kind: ConfirmationKind) -> None:
        if kind == ConfirmationKind.FACILITY:
            await self.mailer.send_facility_confirmation(booking)
        elif kind == ConfirmationKind.EQUIPMENT:
            await self.mailer.send_equipment_confirmation(booking)
        else:
            await self.mailer.send_session_confirmation(booking)

    async def _send_whatsapp(self, booking: Booking, kind: ConfirmationKind) -> None:
        if kind == ConfirmationKind.FACILITY:
            body = summaries.facility_whatsapp_text(booking)
        else:
            body = summaries.equipment_whatsapp_text(booking)
        await self.messenger.send(self.db, booking.user_phone_number, body, kind.value, booking.id)


def find_incomplete(
    db: Session, kind: ConfirmationKind, min_age_minutes: int = 0, limit: int = 50
) -> list[Booking]:
    """Bookings with at least one confirmation step still pending"""
    model = MODEL_BY_KIND[kind]
    pending = [getattr(model, STEP_FLAGS[name]).is_(False) for name in step_names(kind)]

    query = db.query(model).filter(or_(*pending))
    if min_age_minutes:
        cutoff = datetime.utcnow() - timedelta(minutes=min_age_minutes)
        query = query.filter(model.created_at <= cutoff)
    return query.order_by(model.id).limit(limit).all()


def get_confirmation_pipeline(
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_object_storage),
    qr_encoder=Depends(get_qr_encoder),
    mailer: BookingMailer = Depends(get_booking_mailer),
    messenger: WhatsAppMessenger = Depends(get_whatsapp_messenger),
) -> ConfirmationPipeline:
    """Dependency injection for ConfirmationPipeline"""
    return ConfirmationPipeline(db, storage, qr_encoder, mailer, messenger)
