"""Review schemas"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class ReviewCreate(BaseModel):
    coachProfileId: int
    rating: float = Field(..., ge=0, le=5)
    comment: str

    @field_validator("comment")
    @classmethod
    def validate_comment(cls, v):
        v = v.strip()
        if not v:
            raise ValueError("Comment cannot be empty")
        return v


class ReviewResponse(BaseModel):
    id: int
    userId: int
    name: str
    coachProfileId: int
    rating: float
    comment: str
    createdAt: Optional[datetime] = None

    class Config:
        from_attributes = True


class CoachReviewsResponse(BaseModel):
    avgRating: Optional[float] = None
    reviews: list[ReviewResponse]
