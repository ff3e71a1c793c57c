"""
WhatsApp confirmations through the Twilio Messages API.

Every attempt, sent or failed, is written to WhatsAppMessageLog.
"""

import logging
from typing import Optional

import httpx
from sqlalchemy.orm import Session

from .. import config
from ..models import WhatsAppMessageLog
from ..shared.validators import normalize_whatsapp_phone

logger = logging.getLogger(__name__)

TWILIO_API_BASE = "https://api.twilio.com/2010-04-01"


class WhatsAppDeliveryError(Exception):
    """Raised when Twilio rejects or cannot be reached for a message"""


class WhatsAppMessenger:
    def __init__(
        self,
        account_sid: Optional[str] = None,
        auth_token: Optional[str] = None,
        from_number: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.account_sid = account_sid or config.TWILIO_ACCOUNT_SID
        self.auth_token = auth_token or config.TWILIO_AUTH_TOKEN
        self.from_number = from_number or config.WHATSAPP_FROM_NUMBER
        self.transport = transport

    def _log(self, db: Session, booking_type: str, booking_id: int, to_phone: str, body: str, **fields):
        db.add(
            WhatsAppMessageLog(
                booking_type=booking_type,
                booking_id=booking_id,
                to_phone=to_phone,
                message_body=body,
                **fields,
            )
        )
        db.commit()

    async def send(
        self, db: Session, to_phone: str, body: str, booking_type: str, booking_id: int
    ) -> str:
        """Send ``body`` to ``to_phone`` over WhatsApp and return the Twilio message SID"""
        if not self.account_sid or not self.auth_token:
            logger.error("❌ Twilio credentials are not configured")
            raise WhatsAppDeliveryError("Messaging service not configured")

        formatted_phone = normalize_whatsapp_phone(to_phone)
        data = {
            "From": f"whatsapp:{self.from_number}",
            "To": f"whatsapp:{formatted_phone}",
            "Body": body,
        }

        try:
            logger.info(f"📱 Sending WhatsApp for {booking_type} booking {booking_id} to {formatted_phone}")
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.post(
                    f"{TWILIO_API_BASE}/Accounts/{self.account_sid}/Messages.json",
                    auth=(self.account_sid, self.auth_token),
                    data=data,
                    timeout=10.0,
                )
        except httpx.HTTPError as e:
            logger.error(f"❌ Twilio connection error: {e}")
            self._log(db, booking_type, booking_id, formatted_phone, body, status="failed", error_message=str(e))
            raise WhatsAppDeliveryError(f"Connection error: {e}") from e

        if response.status_code in (200, 201):
            message_sid = response.json().get("sid")
            self._log(
                db, booking_type, booking_id, formatted_phone, body, status="sent", twilio_message_sid=message_sid
            )
            logger.info(f"✅ WhatsApp sent: {message_sid}")
            return message_sid

        try:
            error_message = response.json().get("message", "Unknown error")
        except ValueError:
            error_message = response.text or "Unknown error"
        self._log(
            db, booking_type, booking_id, formatted_phone, body, status="failed", error_message=error_message
        )
        logger.error(f"❌ Twilio rejected WhatsApp ({response.status_code}): {error_message}")
        raise WhatsAppDeliveryError(error_message)


def get_whatsapp_messenger() -> WhatsAppMessenger:
    """Dependency injection for WhatsAppMessenger"""
    return WhatsAppMessenger()
