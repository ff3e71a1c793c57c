from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from .database import Base

ROLE_USER = "User"
ROLE_COACH = "Coach"
ROLE_ADMIN = "Admin"
ROLES = (ROLE_USER, ROLE_COACH, ROLE_ADMIN)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), default=ROLE_USER, nullable=False)  # User, Coach, Admin
    phone_number = Column(String(50), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    coach_profile = relationship("CoachProfile", back_populates="user", uselist=False)


class Facility(Base):
    __tablename__ = "facilities"

    id = Column(Integer, primary_key=True, index=True)
    court_number = Column(String(50), nullable=False, index=True)
    sport_name = Column(String(100), nullable=False, index=True)
    sport_category = Column(String(100), nullable=False)
    court_price = Column(Float, nullable=False)
    image = Column(String(500), nullable=False)  # Public URL of the court photo
    is_active = Column(Boolean, default=True, nullable=False)
    deactivation_reason = Column(String(500), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class FacilityBooking(Base):
    __tablename__ = "facility_bookings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    user_name = Column(String(255), nullable=False)
    user_email = Column(String(255), nullable=False)
    user_phone_number = Column(String(50), nullable=False)
    sport_name = Column(String(100), nullable=False)
    court_number = Column(String(50), nullable=False)
    court_price = Column(Float, nullable=False)
    date = Column(Date, nullable=False, index=True)
    time_slots = Column(JSON, nullable=False)  # Ordered list of slot labels
    total_hours = Column(Integer, nullable=False)
    total_price = Column(Float, nullable=False)
    receipt = Column(String(500), nullable=True)
    qr_code = Column(String(500), nullable=True)
    # Confirmation pipeline progress
    qr_generated = Column(Boolean, default=False, nullable=False)
    email_sent = Column(Boolean, default=False, nullable=False)
    message_sent = Column(Boolean, default=False, nullable=False)
    last_error = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    reservations = relationship(
        "FacilityBookingSlot", back_populates="booking", cascade="all, delete-orphan"
    )


class FacilityBookingSlot(Base):
    """One reserved slot of a facility booking; the unique key blocks double booking."""

    __tablename__ = "facility_booking_slots"
    __table_args__ = (
        UniqueConstraint(
            "court_number", "sport_name", "date", "time_slot", name="uq_facility_slot_reservation"
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(
        Integer, ForeignKey("facility_bookings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    court_number = Column(String(50), nullable=False)
    sport_name = Column(String(100), nullable=False)
    date = Column(Date, nullable=False)
    time_slot = Column(String(20), nullable=False)

    booking = relationship("FacilityBooking", back_populates="reservations")


class Equipment(Base):
    __tablename__ = "equipment"

    id = Column(Integer, primary_key=True, index=True)
    equipment_name = Column(String(255), nullable=False)
    sport_name = Column(String(100), nullable=False)
    rent_price = Column(Float, nullable=False)
    image = Column(String(500), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    deactivation_reason = Column(String(500), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class EquipmentBooking(Base):
    __tablename__ = "equipment_bookings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    user_name = Column(String(255), nullable=False)
    user_email = Column(String(255), nullable=False)
    user_phone_number = Column(String(50), nullable=False)
    date_time = Column(DateTime, nullable=False, index=True)
    equipment_name = Column(String(255), nullable=False)
    sport_name = Column(String(100), nullable=False)
    equipment_price = Column(Float, nullable=False)
    quantity = Column(Integer, nullable=False)
    total_price = Column(Float, nullable=False)
    receipt = Column(String(500), nullable=True)
    qr_code = Column(String(500), nullable=True)
    qr_generated = Column(Boolean, default=False, nullable=False)
    email_sent = Column(Boolean, default=False, nullable=False)
    message_sent = Column(Boolean, default=False, nullable=False)
    last_error = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class CoachProfile(Base):
    __tablename__ = "coach_profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)
    coach_name = Column(String(255), nullable=False)
    coach_level = Column(String(100), nullable=False)
    coaching_sport = Column(String(100), nullable=False)
    # {"individualSessionPrice": float, "groupSessionPrice": float}
    coach_price = Column(JSON, nullable=False)
    # [{"date": "YYYY-MM-DD", "timeSlot": "08:00 - 09:00"}, ...]
    available_time_slots = Column(JSON, default=list, nullable=False)
    experience = Column(Text, nullable=True)
    offer_sessions = Column(JSON, default=list, nullable=True)  # Session types offered
    session_description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    image = Column(String(500), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    user = relationship("User", back_populates="coach_profile")
    reviews = relationship("Review", back_populates="coach_profile", cascade="all, delete-orphan")


class SessionRequest(Base):
    __tablename__ = "session_requests"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    user_name = Column(String(255), nullable=False)
    user_email = Column(String(255), nullable=False)
    user_phone = Column(String(50), nullable=False)
    sport_name = Column(String(100), nullable=False)
    session_type = Column(String(50), nullable=False)  # Individual Session, Group Session
    session_fee = Column(Float, nullable=False)
    coach_profile_id = Column(Integer, ForeignKey("coach_profiles.id"), nullable=False, index=True)
    coach_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    # Coach details as they were when the request was made
    coach_name = Column(String(255), nullable=False)
    coach_email = Column(String(255), nullable=False)
    coach_level = Column(String(100), nullable=False)
    image = Column(String(500), nullable=True)
    requested_time_slots = Column(JSON, nullable=False)
    status = Column(String(20), default="Pending", nullable=False)  # Pending, Accepted, Rejected, Booked
    receipt = Column(String(500), nullable=True)
    court_no = Column(String(50), nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class SessionBooking(Base):
    __tablename__ = "session_bookings"

    id = Column(Integer, primary_key=True, index=True)
    session_request_id = Column(Integer, ForeignKey("session_requests.id"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    user_name = Column(String(255), nullable=False)
    user_email = Column(String(255), nullable=False)
    user_phone = Column(String(50), nullable=False)
    sport_name = Column(String(100), nullable=False)
    session_type = Column(String(50), nullable=False)
    booked_time_slots = Column(JSON, nullable=False)
    coach_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    coach_name = Column(String(255), nullable=False)
    coach_email = Column(String(255), nullable=False)
    coach_level = Column(String(100), nullable=False)
    session_fee = Column(Float, nullable=False)
    court_no = Column(String(50), nullable=True)
    receipt = Column(String(500), nullable=False)
    qr_code_url = Column(String(500), nullable=True)
    qr_generated = Column(Boolean, default=False, nullable=False)
    email_sent = Column(Boolean, default=False, nullable=False)
    last_error = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    reservations = relationship(
        "SessionBookingSlot", back_populates="booking", cascade="all, delete-orphan"
    )


class SessionBookingSlot(Base):
    """A coach can only hold one booked session per date and slot."""

    __tablename__ = "session_booking_slots"
    __table_args__ = (
        UniqueConstraint("coach_id", "date", "time_slot", name="uq_session_slot_reservation"),
    )

    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(
        Integer, ForeignKey("session_bookings.id", ondelete="CASCADE"), nullable=False, index=True
    )
    coach_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    date = Column(Date, nullable=False)
    time_slot = Column(String(20), nullable=False)

    booking = relationship("SessionBooking", back_populates="reservations")


class Review(Base):
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    user_name = Column(String(255), nullable=False)
    coach_profile_id = Column(
        Integer, ForeignKey("coach_profiles.id", ondelete="CASCADE"), nullable=False, index=True
    )
    rating = Column(Float, nullable=False)
    comment = Column(Text, nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    coach_profile = relationship("CoachProfile", back_populates="reviews")


class WhatsAppMessageLog(Base):
    """Every outbound WhatsApp attempt, successful or not"""

    __tablename__ = "whatsapp_message_logs"

    id = Column(Integer, primary_key=True, index=True)
    booking_type = Column(String(20), nullable=False)  # facility, equipment
    booking_id = Column(Integer, nullable=False, index=True)
    to_phone = Column(String(50), nullable=False)
    message_body = Column(Text, nullable=False)
    twilio_message_sid = Column(String(100), nullable=True)
    status = Column(String(20), nullable=False)  # sent, failed
    error_message = Column(Text, nullable=True)
    created_at = Column(DateTime, server_default=func.now())
