"""Coach profile repository"""

from typing import Optional

from sqlalchemy.orm import Session

from ...models import CoachProfile


class CoachProfileRepository:
    @staticmethod
    def get_all(db: Session) -> list[CoachProfile]:
        return db.query(CoachProfile).order_by(CoachProfile.id).all()

    @staticmethod
    def get_by_id(db: Session, coach_profile_id: int) -> Optional[CoachProfile]:
        return db.query(CoachProfile).filter(CoachProfile.id == coach_profile_id).first()

    @staticmethod
    def get_by_user_id(db: Session, user_id: int) -> Optional[CoachProfile]:
        return db.query(CoachProfile).filter(CoachProfile.user_id == user_id).first()

    @staticmethod
    def create(db: Session, **profile_data) -> CoachProfile:
        profile = CoachProfile(**profile_data)
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile

    @staticmethod
    def update(db: Session, profile: CoachProfile, **updates) -> CoachProfile:
        for key, value in updates.items():
            if value is not None and hasattr(profile, key):
                setattr(profile, key, value)
        db.commit()
        db.refresh(profile)
        return profile
