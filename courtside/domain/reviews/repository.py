"""Review repository"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from ...models import Review


class ReviewRepository:
    @staticmethod
    def create(db: Session, **review_data) -> Review:
        review = Review(**review_data)
        db.add(review)
        db.commit()
        db.refresh(review)
        return review

    @staticmethod
    def get_for_coach(db: Session, coach_profile_id: int) -> list[Review]:
        return (
            db.query(Review)
            .filter(Review.coach_profile_id == coach_profile_id)
            .order_by(Review.created_at.desc(), Review.id.desc())
            .all()
        )

    @staticmethod
    def average_rating(db: Session, coach_profile_id: int) -> Optional[float]:
        """Mean rating to two decimals, None when the coach has no reviews"""
        avg = db.query(func.avg(Review.rating)).filter(Review.coach_profile_id == coach_profile_id).scalar()
        return round(float(avg), 2) if avg is not None else None

    @staticmethod
    def average_ratings(db: Session, coach_profile_ids: list[int]) -> dict[int, float]:
        if not coach_profile_ids:
            return {}
        rows = (
            db.query(Review.coach_profile_id, func.avg(Review.rating))
            .filter(Review.coach_profile_id.in_(coach_profile_ids))
            .group_by(Review.coach_profile_id)
            .all()
        )
        return {profile_id: round(float(avg), 2) for profile_id, avg in rows}
