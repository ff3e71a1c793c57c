from urllib.parse import parse_qs

import httpx
import pytest

from courtside.models import WhatsAppMessageLog
from courtside.services.twilio_service import WhatsAppDeliveryError, WhatsAppMessenger


def messenger_with(handler) -> WhatsAppMessenger:
    return WhatsAppMessenger(
        account_sid="AC123",
        auth_token="secret",
        from_number="+14155238886",
        transport=httpx.MockTransport(handler),
    )


async def test_send_posts_whatsapp_addresses_and_logs(db):
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["form"] = parse_qs(request.content.decode())
        return httpx.Response(201, json={"sid": "SM0001"})

    sid = await messenger_with(handler).send(db, "0771234567", "Booking confirmed", "facility", 7)

    assert sid == "SM0001"
    assert seen["url"].endswith("/Accounts/AC123/Messages.json")
    assert seen["form"]["From"] == ["whatsapp:+14155238886"]
    assert seen["form"]["To"] == ["whatsapp:+94771234567"]

    log = db.query(WhatsAppMessageLog).one()
    assert log.status == "sent"
    assert log.twilio_message_sid == "SM0001"
    assert log.booking_id == 7


async def test_rejected_message_raises_and_logs_failure(db):
    def handler(request):
        return httpx.Response(400, json={"message": "Invalid 'To' number"})

    with pytest.raises(WhatsAppDeliveryError, match="Invalid 'To' number"):
        await messenger_with(handler).send(db, "0771234567", "hi", "equipment", 3)

    log = db.query(WhatsAppMessageLog).one()
    assert log.status == "failed"
    assert log.error_message == "Invalid 'To' number"


async def test_missing_credentials(db):
    messenger = WhatsAppMessenger()
    messenger.account_sid = None
    with pytest.raises(WhatsAppDeliveryError):
        await messenger.send(db, "0771234567", "hi", "facility", 1)
