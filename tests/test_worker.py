from datetime import datetime, timedelta

import pytest

from courtside import worker
from courtside.domain.bookings.pipeline import ConfirmationPipeline
from courtside.models import EquipmentBooking


@pytest.fixture
def stale_booking(db, user):
    booking = EquipmentBooking(
        user_id=user.id,
        user_name=user.name,
        user_email=user.email,
        user_phone_number="0771234567",
        date_time=datetime.now() + timedelta(days=1),
        equipment_name="Tennis Racket",
        sport_name="Tennis",
        equipment_price=50.0,
        quantity=3,
        total_price=150.0,
        receipt="https://cdn.test/equipment_receipts/r.png",
        qr_generated=True,
        created_at=datetime.utcnow() - timedelta(hours=1),
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)
    return booking


@pytest.fixture
def use_test_db(monkeypatch, session_factory):
    monkeypatch.setattr(worker, "SessionLocal", session_factory)


async def test_reconciler_completes_pending_steps(use_test_db, stale_booking, fakes, db):
    def pipeline_factory(session):
        return ConfirmationPipeline(session, fakes.storage, fakes.qr_encoder, fakes.mailer, fakes.messenger)

    summary = await worker.reconcile_incomplete_bookings_task({}, pipeline_factory=pipeline_factory)

    assert summary["equipment"] == {"checked": 1, "completed": 1, "failed": 0}
    db.expire_all()
    saved = db.get(EquipmentBooking, stale_booking.id)
    assert saved.email_sent and saved.message_sent
    # QR was already done
    assert fakes.s3.keys("equipment_qrcodes/") == []


async def test_reconciler_keeps_going_after_a_failure(use_test_db, stale_booking, fakes, db):
    fakes.messenger.fail = True

    def pipeline_factory(session):
        return ConfirmationPipeline(session, fakes.storage, fakes.qr_encoder, fakes.mailer, fakes.messenger)

    summary = await worker.reconcile_incomplete_bookings_task({}, pipeline_factory=pipeline_factory)

    assert summary["equipment"]["failed"] == 1
    db.expire_all()
    assert db.get(EquipmentBooking, stale_booking.id).last_error.startswith("whatsapp:")


async def test_recent_bookings_are_left_alone(use_test_db, stale_booking, fakes, db):
    stale_booking.created_at = datetime.utcnow()
    db.commit()

    def pipeline_factory(session):
        return ConfirmationPipeline(session, fakes.storage, fakes.qr_encoder, fakes.mailer, fakes.messenger)

    summary = await worker.reconcile_incomplete_bookings_task({}, pipeline_factory=pipeline_factory)

    assert summary["equipment"]["checked"] == 0
    assert fakes.mailer.sent == []


def test_redis_settings_from_url(monkeypatch):
    monkeypatch.setattr(worker.config, "REDIS_URL", "rediss://default:pw@redis.example.com:6380")

    settings = worker.get_redis_settings()

    assert settings.host == "redis.example.com"
    assert settings.port == 6380
    assert settings.password == "pw"
    assert settings.ssl is True
