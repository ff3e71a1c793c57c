import os

# Must be set before courtside.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("DB_LOG_SLOW_QUERIES", "false")

from types import SimpleNamespace  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

import courtside.models  # noqa: F401,E402
from courtside.database import Base, get_db  # noqa: E402
from courtside.email_service import EmailDeliveryError, get_booking_mailer  # noqa: E402
from courtside.main import app  # noqa: E402
from courtside.models import ROLE_ADMIN, ROLE_COACH, ROLE_USER, CoachProfile, User  # noqa: E402
from courtside.security_utils import hash_password_bcrypt  # noqa: E402
from courtside.services.qr_service import get_qr_encoder  # noqa: E402
from courtside.services.storage import ObjectStorage, get_object_storage  # noqa: E402
from courtside.services.twilio_service import WhatsAppDeliveryError, get_whatsapp_messenger  # noqa: E402
from tests.helpers import CDN, days_from_today  # noqa: E402

PASSWORD = "correct-horse-battery"

# Hashing once keeps the suite fast
_PASSWORD_HASH = hash_password_bcrypt(PASSWORD)


class FakeS3Client:
    """Stands in for the boto3 R2 client"""

    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.deleted: list[str] = []
        self.fail_puts = False
        self.fail_deletes = False

    def put_object(self, Bucket, Key, Body, ContentType, **kwargs):
        if self.fail_puts:
            raise RuntimeError("R2 unavailable")
        self.objects[Key] = Body

    def delete_object(self, Bucket, Key):
        if self.fail_deletes:
            raise RuntimeError("R2 unavailable")
        self.deleted.append(Key)
        self.objects.pop(Key, None)

    def keys(self, prefix: str) -> list[str]:
        return [key for key in self.objects if key.startswith(prefix)]


class FakeMailer:
    def __init__(self):
        self.sent: list[tuple[str, int]] = []
        self.fail = False

    async def _send(self, kind: str, booking) -> dict:
        if self.fail:
            raise EmailDeliveryError("Resend rejected the message")
        self.sent.append((kind, booking.id))
        return {"id": f"email-{len(self.sent)}"}

    async def send_facility_confirmation(self, booking):
        return await self._send("facility", booking)

    async def send_equipment_confirmation(self, booking):
        return await self._send("equipment", booking)

    async def send_session_confirmation(self, booking):
        return await self._send("session", booking)


class FakeMessenger:
    def __init__(self):
        self.sent: list[dict] = []
        self.fail = False

    async def send(self, db, to_phone, body, booking_type, booking_id) -> str:
        if self.fail:
            raise WhatsAppDeliveryError("Twilio error 63016")
        self.sent.append({"to": to_phone, "body": body, "type": booking_type, "bookingId": booking_id})
        return f"SM{len(self.sent):032d}"


def fake_qr_encoder(text: str) -> bytes:
    return b"PNG:" + text.encode()


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fakes():
    s3 = FakeS3Client()
    return SimpleNamespace(
        s3=s3,
        storage=ObjectStorage(client=s3, bucket="test-bucket", base_url=CDN),
        mailer=FakeMailer(),
        messenger=FakeMessenger(),
        qr_encoder=fake_qr_encoder,
    )


@pytest.fixture
def client(session_factory, fakes):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_object_storage] = lambda: fakes.storage
    app.dependency_overrides[get_qr_encoder] = lambda: fakes.qr_encoder
    app.dependency_overrides[get_booking_mailer] = lambda: fakes.mailer
    app.dependency_overrides[get_whatsapp_messenger] = lambda: fakes.messenger
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make_user(role: str = ROLE_USER, name: str = None, email: str = None, **fields) -> User:
        counter["n"] += 1
        user = User(
            name=name or f"{role} {counter['n']}",
            email=email or f"{role.lower()}{counter['n']}@example.com",
            password_hash=_PASSWORD_HASH,
            role=role,
            phone_number=fields.pop("phone_number", "0771234567"),
            **fields,
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def user(make_user):
    return make_user(ROLE_USER, name="Nimal Perera", email="nimal@example.com")


@pytest.fixture
def other_user(make_user):
    return make_user(ROLE_USER, name="Kamala Silva", email="kamala@example.com")


@pytest.fixture
def coach_user(make_user):
    return make_user(ROLE_COACH, name="Coach Ruwan", email="ruwan@example.com")


@pytest.fixture
def admin(make_user):
    return make_user(ROLE_ADMIN, name="Admin", email="admin@example.com")


@pytest.fixture
def coach_profile(db, coach_user) -> CoachProfile:
    """A coach advertising two slots tomorrow and one the day after"""
    profile = CoachProfile(
        user_id=coach_user.id,
        coach_name="Ruwan Fernando",
        coach_level="Level 2",
        coaching_sport="Tennis",
        coach_price={"individualSessionPrice": 3000.0, "groupSessionPrice": 1500.0},
        available_time_slots=[
            {"date": days_from_today(1).isoformat(), "timeSlot": "08:00 - 09:00"},
            {"date": days_from_today(1).isoformat(), "timeSlot": "09:00 - 10:00"},
            {"date": days_from_today(2).isoformat(), "timeSlot": "16:00 - 17:00"},
        ],
        experience="10 years",
        offer_sessions=["Individual Session", "Group Session"],
        image=f"{CDN}/coach_profiles/ruwan.png",
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile
