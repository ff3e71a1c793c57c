"""Equipment router"""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_roles
from ...database import get_db
from ...models import ROLE_ADMIN, Equipment, User
from ...services.storage import IMAGE_TYPES, ObjectStorage, get_object_storage, read_upload
from .schemas import EquipmentResponse, EquipmentToggleRequest
from .service import EquipmentService

router = APIRouter(prefix="/equipment", tags=["Equipment"])


def get_equipment_service(
    db: Session = Depends(get_db),
    storage: ObjectStorage = Depends(get_object_storage),
) -> EquipmentService:
    """Dependency injection for EquipmentService"""
    return EquipmentService(db, storage)


def to_response(e: Equipment) -> EquipmentResponse:
    return EquipmentResponse(
        id=e.id,
        equipmentName=e.equipment_name,
        sportName=e.sport_name,
        rentPrice=e.rent_price,
        image=e.image,
        isActive=e.is_active,
        deactivationReason=e.deactivation_reason,
        createdAt=e.created_at,
        updatedAt=e.updated_at,
    )


@router.post("", response_model=EquipmentResponse, status_code=201)
async def create_equipment(
    equipmentName: str = Form(...),
    sportName: str = Form(...),
    rentPrice: float = Form(...),
    image: Optional[UploadFile] = File(None),
    _admin: User = Depends(require_roles(ROLE_ADMIN)),
    service: EquipmentService = Depends(get_equipment_service),
):
    upload = await read_upload(image, IMAGE_TYPES, missing_message="Please upload an image")
    return to_response(service.create_equipment(equipmentName, sportName, rentPrice, upload))


@router.get("", response_model=list[EquipmentResponse])
async def list_equipment(
    _admin: User = Depends(require_roles(ROLE_ADMIN)),
    service: EquipmentService = Depends(get_equipment_service),
):
    """All equipment, active or not (Admin only)"""
    return [to_response(e) for e in service.list_equipment()]


@router.get("/available", response_model=list[EquipmentResponse])
async def list_available_equipment(
    _user: User = Depends(get_current_user),
    service: EquipmentService = Depends(get_equipment_service),
):
    return [to_response(e) for e in service.list_equipment(active_only=True)]


@router.get("/{equipment_id}", response_model=EquipmentResponse)
async def get_equipment(
    equipment_id: int,
    _user: User = Depends(get_current_user),
    service: EquipmentService = Depends(get_equipment_service),
):
    return to_response(service.get_equipment(equipment_id))


@router.put("/toggle/{equipment_id}", response_model=EquipmentResponse)
async def toggle_equipment(
    equipment_id: int,
    data: Optional[EquipmentToggleRequest] = None,
    _admin: User = Depends(require_roles(ROLE_ADMIN)),
    service: EquipmentService = Depends(get_equipment_service),
):
    reason = data.deactivationReason if data else None
    return to_response(service.toggle_equipment(equipment_id, reason))


@router.put("/{equipment_id}", response_model=EquipmentResponse)
async def update_equipment(
    equipment_id: int,
    equipmentName: Optional[str] = Form(None),
    sportName: Optional[str] = Form(None),
    rentPrice: Optional[float] = Form(None),
    image: Optional[UploadFile] = File(None),
    _admin: User = Depends(require_roles(ROLE_ADMIN)),
    service: EquipmentService = Depends(get_equipment_service),
):
    upload = None
    if image is not None and image.filename:
        upload = await read_upload(image, IMAGE_TYPES)
    equipment = service.update_equipment(
        equipment_id,
        equipment_name=equipmentName,
        sport_name=sportName,
        rent_price=rentPrice,
        image=upload,
    )
    return to_response(equipment)


@router.delete("/{equipment_id}")
async def delete_equipment(
    equipment_id: int,
    _admin: User = Depends(require_roles(ROLE_ADMIN)),
    service: EquipmentService = Depends(get_equipment_service),
):
    return service.delete_equipment(equipment_id)
