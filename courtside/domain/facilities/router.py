"""Facility router - Court management endpoints"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_roles
from ...database import get_db
from ...models import ROLE_ADMIN, Facility, User
from ...services.storage import IMAGE_TYPES, ObjectStorage, get_object_storage, read_upload
from .schemas import AvailableFacilitiesResponse, FacilityResponse, FacilityToggleRequest
from .service import FacilityService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/facilities", tags=["Facilities"])


def get_facility_service(
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_object_storage),
) -> FacilityService:
    """Dependency injection for FacilityService"""
    return FacilityService(db, storage)


def to_response(f: Facility) -> FacilityResponse:
    return FacilityResponse(
        id=f.id,
        courtNumber=f.court_number,
        sportName=f.sport_name,
        sportCategory=f.sport_category,
        courtPrice=f.court_price,
        image=f.image,
        isActive=f.is_active,
        deactivationReason=f.deactivation_reason,
        createdAt=f.created_at,
        updatedAt=f.updated_at,
    )


@router.post("", response_model=FacilityResponse, status_code=201)
async def create_facility(
    courtNumber: str = Form(...),
    sportName: str = Form(...),
    sportCategory: str = Form(...),
    courtPrice: float = Form(...),
    image: Optional[UploadFile] = File(None),
    _admin: User = Depends(require_roles(ROLE_ADMIN)),
    service: FacilityService = Depends(get_facility_service),
):
    """Create a court (Admin only)"""
    upload = await read_upload(image, IMAGE_TYPES, missing_message="Please upload an image")
    facility = service.create_facility(courtNumber, sportName, sportCategory, courtPrice, upload)
    return to_response(facility)


@router.get("", response_model=list[FacilityResponse])
async def list_facilities(
    _admin: User = Depends(require_roles(ROLE_ADMIN)),
    service: FacilityService = Depends(get_facility_service),
):
    """List every court (Admin only)"""
    return [to_response(f) for f in service.list_facilities()]


@router.get("/available", response_model=AvailableFacilitiesResponse)
async def available_facilities(
    sportName: str = Query(...),
    day: date = Query(..., alias="date"),
    timeSlot: str = Query(...),
    _user: User = Depends(get_current_user),
    service: FacilityService = Depends(get_facility_service),
):
    """Active courts of a sport that are free for one slot"""
    facilities = service.available_facilities(sportName, day, timeSlot)
    return AvailableFacilitiesResponse(
        sportName=sportName,
        date=day,
        timeSlot=timeSlot,
        availableFacilities=[to_response(f) for f in facilities],
    )


@router.get("/{facility_id}", response_model=FacilityResponse)
async def get_facility(
    facility_id: int,
    _user: User = Depends(get_current_user),
    service: FacilityService = Depends(get_facility_service),
):
    return to_response(service.get_facility(facility_id))


@router.put("/toggle/{facility_id}", response_model=FacilityResponse)
async def toggle_facility(
    facility_id: int,
    data: Optional[FacilityToggleRequest] = None,
    _admin: User = Depends(require_roles(ROLE_ADMIN)),
    service: FacilityService = Depends(get_facility_service),
):
    """Activate/deactivate a court (Admin only)"""
    reason = data.deactivationReason if data else None
    return to_response(service.toggle_facility(facility_id, reason))


@router.put("/{facility_id}", response_model=FacilityResponse)
async def update_facility(
    facility_id: int,
    courtNumber: Optional[str] = Form(None),
    sportName: Optional[str] = Form(None),
    sportCategory: Optional[str] = Form(None),
    courtPrice: Optional[float] = Form(None),
    image: Optional[UploadFile] = File(None),
    _admin: User = Depends(require_roles(ROLE_ADMIN)),
    service: FacilityService = Depends(get_facility_service),
):
    """Update a court; a new image is optional (Admin only)"""
    upload = None
    if image is not None and image.filename:
        upload = await read_upload(image, IMAGE_TYPES)
    facility = service.update_facility(
        facility_id,
        court_number=courtNumber,
        sport_name=sportName,
        sport_category=sportCategory,
        court_price=courtPrice,
        image=upload,
    )
    return to_response(facility)


@router.delete("/{facility_id}")
async def delete_facility(
    facility_id: int,
    _admin: User = Depends(require_roles(ROLE_ADMIN)),
    service: FacilityService = Depends(get_facility_service),
):
    return service.delete_facility(facility_id)
