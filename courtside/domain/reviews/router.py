"""Review router"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user
from ...database import get_db
from ...models import Review, User
from .schemas import CoachReviewsResponse, ReviewCreate, ReviewResponse
from .service import ReviewService

router = APIRouter(prefix="/reviews", tags=["Reviews"])


def get_review_service(db: Session = Depends(get_db)) -> ReviewService:
    """Dependency injection for ReviewService"""
    return ReviewService(db)


def to_response(r: Review) -> ReviewResponse:
    return ReviewResponse(
        id=r.id,
        userId=r.user_id,
        name=r.user_name,
        coachProfileId=r.coach_profile_id,
        rating=r.rating,
        comment=r.comment,
        createdAt=r.created_at,
    )


@router.post("", response_model=ReviewResponse, status_code=201)
async def add_review(
    data: ReviewCreate,
    current_user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    return to_response(service.add_review(current_user, data))


@router.get("/coach/{coach_profile_id}", response_model=CoachReviewsResponse)
async def get_reviews_by_coach(
    coach_profile_id: int,
    _user: User = Depends(get_current_user),
    service: ReviewService = Depends(get_review_service),
):
    """Reviews for a coach with their average rating (null without reviews)"""
    reviews, avg_rating = service.reviews_for_coach(coach_profile_id)
    return CoachReviewsResponse(avgRating=avg_rating, reviews=[to_response(r) for r in reviews])
