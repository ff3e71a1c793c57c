"""User account router"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...auth import get_current_user, require_roles
from ...database import get_db
from ...models import ROLE_ADMIN, User
from .schemas import TokenResponse, UserLogin, UserRegister, UserResponse, UserToggleRequest, UserUpdate
from .service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


def get_user_service(db: Session = Depends(get_db)) -> UserService:
    """Dependency injection for UserService"""
    return UserService(db)


def to_response(u: User) -> UserResponse:
    return UserResponse(
        id=u.id,
        name=u.name,
        email=u.email,
        role=u.role,
        phoneNumber=u.phone_number,
        isActive=u.is_active,
        createdAt=u.created_at,
    )


@router.post("/register", response_model=UserResponse, status_code=201)
async def register(data: UserRegister, service: UserService = Depends(get_user_service)):
    return to_response(service.register(data))


@router.post("/login", response_model=TokenResponse)
async def login(data: UserLogin, service: UserService = Depends(get_user_service)):
    """Exchange email + password for a bearer token"""
    user, token = service.login(data.email, data.password)
    return TokenResponse(accessToken=token, user=to_response(user))


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get current authenticated user"""
    return to_response(current_user)


@router.put("/me", response_model=UserResponse)
async def update_me(
    data: UserUpdate,
    current_user: User = Depends(get_current_user),
    service: UserService = Depends(get_user_service),
):
    return to_response(service.update_profile(current_user, data))


@router.get("", response_model=list[UserResponse])
async def list_users(
    _admin: User = Depends(require_roles(ROLE_ADMIN)),
    service: UserService = Depends(get_user_service),
):
    return [to_response(u) for u in service.list_users()]


@router.put("/toggle/{user_id}", response_model=UserResponse)
async def toggle_user(
    user_id: int,
    data: UserToggleRequest,
    _admin: User = Depends(require_roles(ROLE_ADMIN)),
    service: UserService = Depends(get_user_service),
):
    """Activate or deactivate an account (Admin only)"""
    return to_response(service.toggle_active(user_id, data.isActive))
