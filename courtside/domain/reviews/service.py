"""Review service"""

import logging
from typing import Optional

from sqlalchemy.orm import Session

from ...models import CoachProfile, Review, User
from ...shared.exceptions import NotFoundException
from .repository import ReviewRepository
from .schemas import ReviewCreate

logger = logging.getLogger(__name__)


class ReviewService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = ReviewRepository()

    def _require_coach_profile(self, coach_profile_id: int) -> CoachProfile:
        profile = self.db.query(CoachProfile).filter(CoachProfile.id == coach_profile_id).first()
        if not profile:
            raise NotFoundException("Coach profile not found", code="CoachProfileNotFound")
        return profile

    def add_review(self, user: User, data: ReviewCreate) -> Review:
        self._require_coach_profile(data.coachProfileId)
        review = self.repo.create(
            self.db,
            user_id=user.id,
            user_name=user.name,
            coach_profile_id=data.coachProfileId,
            rating=data.rating,
            comment=data.comment,
        )
        logger.info(f"⭐ User {user.id} rated coach profile {data.coachProfileId}: {data.rating}")
        return review

    def reviews_for_coach(self, coach_profile_id: int) -> tuple[list[Review], Optional[float]]:
        """Return (reviews, avgRating)"""
        self._require_coach_profile(coach_profile_id)
        return self.repo.get_for_coach(self.db, coach_profile_id), self.repo.average_rating(self.db, coach_profile_id)
