"""Coach profile router"""

from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_roles
from ...database import get_db
from ...models import ROLE_ADMIN, ROLE_COACH, CoachProfile, User
from ...services.storage import IMAGE_TYPES, ObjectStorage, get_object_storage, read_upload
from .schemas import CoachProfileCreate, CoachProfileResponse, CoachProfileUpdate
from .service import CoachProfileService

router = APIRouter(prefix="/coach-profiles", tags=["Coach Profiles"])


def get_coach_profile_service(
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_object_storage),
) -> CoachProfileService:
    """Dependency injection for CoachProfileService"""
    return CoachProfileService(db, storage)


def to_response(p: CoachProfile, avg_rating: Optional[float] = None) -> CoachProfileResponse:
    return CoachProfileResponse(
        coachProfileId=p.id,
        userId=p.user_id,
        coachName=p.coach_name,
        coachLevel=p.coach_level,
        coachingSport=p.coaching_sport,
        coachPrice=p.coach_price,
        availableTimeSlots=p.available_time_slots or [],
        experience=p.experience,
        offerSessions=p.offer_sessions,
        sessionDescription=p.session_description,
        isActive=p.is_active,
        image=p.image,
        avgRating=avg_rating,
        createdAt=p.created_at,
        updatedAt=p.updated_at,
    )


@router.post("", response_model=CoachProfileResponse, status_code=201)
async def create_coach_profile(
    data: CoachProfileCreate,
    coach: User = Depends(require_roles(ROLE_COACH)),
    service: CoachProfileService = Depends(get_coach_profile_service),
):
    """Create the calling coach's profile (one per user)"""
    return to_response(service.create_profile(coach, data))


@router.get("", response_model=list[CoachProfileResponse])
async def list_coach_profiles(
    _user: User = Depends(get_current_user),
    service: CoachProfileService = Depends(get_coach_profile_service),
):
    """All coach profiles with their average rating"""
    return [to_response(p, avg) for p, avg in service.list_profiles()]


@router.post("/image", response_model=CoachProfileResponse)
async def upload_coach_profile_image(
    image: Optional[UploadFile] = File(None),
    coach: User = Depends(require_roles(ROLE_COACH)),
    service: CoachProfileService = Depends(get_coach_profile_service),
):
    upload = await read_upload(image, IMAGE_TYPES, missing_message="No file uploaded")
    profile = service.upload_image(coach, upload)
    return to_response(profile, service.average_rating(profile))


@router.put("/toggle/{user_id}", response_model=CoachProfileResponse)
async def toggle_coach_profile(
    user_id: int,
    _admin: User = Depends(require_roles(ROLE_ADMIN)),
    service: CoachProfileService = Depends(get_coach_profile_service),
):
    """Activate/deactivate the profile owned by ``user_id`` (Admin only)"""
    profile = service.toggle_profile(user_id)
    return to_response(profile, service.average_rating(profile))


@router.get("/user/{user_id}", response_model=CoachProfileResponse)
async def get_coach_profile_by_user(
    user_id: int,
    _user: User = Depends(get_current_user),
    service: CoachProfileService = Depends(get_coach_profile_service),
):
    profile = service.get_profile_by_user(user_id)
    return to_response(profile, service.average_rating(profile))


@router.get("/{coach_profile_id}", response_model=CoachProfileResponse)
async def get_coach_profile(
    coach_profile_id: int,
    _user: User = Depends(get_current_user),
    service: CoachProfileService = Depends(get_coach_profile_service),
):
    profile = service.get_profile(coach_profile_id)
    return to_response(profile, service.average_rating(profile))


@router.put("/{coach_profile_id}", response_model=CoachProfileResponse)
async def update_coach_profile(
    coach_profile_id: int,
    data: CoachProfileUpdate,
    coach: User = Depends(require_roles(ROLE_COACH)),
    service: CoachProfileService = Depends(get_coach_profile_service),
):
    profile = service.update_profile(coach_profile_id, coach, data)
    return to_response(profile, service.average_rating(profile))


@router.put("/{coach_profile_id}/image", response_model=CoachProfileResponse)
async def replace_coach_profile_image(
    coach_profile_id: int,
    image: Optional[UploadFile] = File(None),
    coach: User = Depends(require_roles(ROLE_COACH)),
    service: CoachProfileService = Depends(get_coach_profile_service),
):
    """Replace the profile image; the previous object is deleted from storage"""
    upload = await read_upload(image, IMAGE_TYPES, missing_message="No file uploaded")
    profile = service.replace_image(coach_profile_id, coach, upload)
    return to_response(profile, service.average_rating(profile))
