"""Coach profile service"""

import logging
from collections.abc import Callable
from datetime import date, timedelta
from typing import Optional

from sqlalchemy.orm import Session

from ... import config
from ...models import CoachProfile, User
from ...services.storage import ObjectStorage
from ...shared.exceptions import (
    ConflictException,
    DependencyException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from ..reviews.repository import ReviewRepository
from ..scheduling.slots import DEFAULT_SLOT_CATALOG, SlotCatalog
from .repository import CoachProfileRepository
from .schemas import CoachProfileCreate, CoachProfileUpdate, TimeSlotPair

logger = logging.getLogger(__name__)


def serialize_pairs(pairs: list[TimeSlotPair]) -> list[dict]:
    return [{"date": pair.date.isoformat(), "timeSlot": pair.timeSlot} for pair in pairs]


class CoachProfileService:
    def __init__(
        self,
        db: Session,
        storage: ObjectStorage,
        catalog: SlotCatalog = DEFAULT_SLOT_CATALOG,
        today: Callable[[], date] = date.today,
        window_days: Optional[int] = None,
    ):
        self.db = db
        self.storage = storage
        self.catalog = catalog
        self.today = today
        self.window_days = config.COACH_AVAILABILITY_WINDOW_DAYS if window_days is None else window_days
        self.repo = CoachProfileRepository()
        self.reviews = ReviewRepository()

    def validate_availability(self, pairs: list[TimeSlotPair]) -> list[dict]:
        """
        Advertised slots must use catalog labels, be unique, and fall
        between today and ``window_days`` from now (inclusive).
        """
        unknown = self.catalog.unknown([pair.timeSlot for pair in pairs])
        if unknown:
            raise ValidationException("Invalid time slots", code="InvalidSlots", details={"invalidSlots": unknown})

        keys = [(pair.date, pair.timeSlot) for pair in pairs]
        if len(set(keys)) != len(keys):
            raise ValidationException("Duplicate available time slots", code="InvalidSlots")

        start = self.today()
        end = start + timedelta(days=self.window_days)
        out_of_range = [pair.date.isoformat() for pair in pairs if not start <= pair.date <= end]
        if out_of_range:
            raise ValidationException(
                f"All available time slots must be within the next {self.window_days} days.",
                code="InvalidAvailability",
                details={"dates": out_of_range},
            )
        return serialize_pairs(sorted(pairs, key=lambda p: (p.date, self.catalog.slots.index(p.timeSlot))))

    def average_rating(self, profile: CoachProfile) -> Optional[float]:
        return self.reviews.average_rating(self.db, profile.id)

    def list_profiles(self) -> list[tuple[CoachProfile, Optional[float]]]:
        profiles = self.repo.get_all(self.db)
        ratings = self.reviews.average_ratings(self.db, [p.id for p in profiles])
        return [(p, ratings.get(p.id)) for p in profiles]

    def get_profile(self, coach_profile_id: int) -> CoachProfile:
        profile = self.repo.get_by_id(self.db, coach_profile_id)
        if not profile:
            raise NotFoundException("Coach profile not found", code="CoachProfileNotFound")
        return profile

    def get_profile_by_user(self, user_id: int) -> CoachProfile:
        profile = self.repo.get_by_user_id(self.db, user_id)
        if not profile:
            raise NotFoundException("Coach profile not found", code="CoachProfileNotFound")
        return profile

    def _owned_profile(self, coach_profile_id: int, user: User) -> CoachProfile:
        profile = self.get_profile(coach_profile_id)
        if profile.user_id != user.id:
            raise ForbiddenException("You can only modify your own coach profile", code="Forbidden")
        return profile

    def create_profile(self, user: User, data: CoachProfileCreate) -> CoachProfile:
        if self.repo.get_by_user_id(self.db, user.id):
            raise ConflictException("Coach profile already exists", code="CoachProfileExists")

        profile = self.repo.create(
            self.db,
            user_id=user.id,
            coach_name=data.coachName,
            coach_level=data.coachLevel,
            coaching_sport=data.coachingSport,
            coach_price=data.coachPrice.model_dump(),
            available_time_slots=self.validate_availability(data.availableTimeSlots),
            experience=data.experience,
            offer_sessions=data.offerSessions,
            session_description=data.sessionDescription,
        )
        logger.info(f"✅ Coach profile {profile.id} created for user {user.id}")
        return profile

    def update_profile(self, coach_profile_id: int, user: User, data: CoachProfileUpdate) -> CoachProfile:
        profile = self._owned_profile(coach_profile_id, user)

        updates = {
            "coach_name": data.coachName,
            "coach_level": data.coachLevel,
            "coaching_sport": data.coachingSport,
            "experience": data.experience,
            "offer_sessions": data.offerSessions,
            "session_description": data.sessionDescription,
        }
        if data.coachPrice is not None:
            updates["coach_price"] = data.coachPrice.model_dump()
        if data.availableTimeSlots is not None:
            updates["available_time_slots"] = self.validate_availability(data.availableTimeSlots)

        return self.repo.update(self.db, profile, **updates)

    def upload_image(self, user: User, image: tuple[bytes, str, str]) -> CoachProfile:
        profile = self.get_profile_by_user(user.id)
        contents, filename, content_type = image
        url = self.storage.store(contents, "coach_profiles", filename, content_type)
        return self.repo.update(self.db, profile, image=url)

    def replace_image(self, coach_profile_id: int, user: User, image: tuple[bytes, str, str]) -> CoachProfile:
        profile = self._owned_profile(coach_profile_id, user)
        old_image = profile.image

        contents, filename, content_type = image
        url = self.storage.store(contents, "coach_profiles", filename, content_type)
        profile = self.repo.update(self.db, profile, image=url)

        if old_image:
            try:
                self.storage.delete(old_image)
            except DependencyException:
                # New image is already live; the old object is only orphaned
                logger.warning(f"⚠️ Could not delete old image for coach profile {profile.id}: {old_image}")
        return profile

    def toggle_profile(self, user_id: int) -> CoachProfile:
        profile = self.get_profile_by_user(user_id)
        profile.is_active = not profile.is_active
        self.db.commit()
        self.db.refresh(profile)
        logger.info(f"🔁 Coach profile {profile.id} active={profile.is_active}")
        return profile
