import logging
from typing import Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .database import get_db
from .models import ROLE_ADMIN, User
from .security_utils import verify_jwt_token
from .shared.exceptions import ForbiddenException

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db),
) -> User:
    """Resolve the bearer token to an active user"""
    if not credentials:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated. Please provide a valid Bearer token in the Authorization header.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    payload = verify_jwt_token(credentials.credentials)
    if not payload or not payload.get("sub"):
        raise HTTPException(status_code=401, detail="Invalid or expired token")

    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token claims")

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        logger.warning(f"⚠️ Token for unknown user id {user_id}")
        raise HTTPException(status_code=401, detail="User not found")

    if not user.is_active:
        logger.warning(f"⚠️ Deactivated user {user.email} attempted to authenticate")
        raise HTTPException(status_code=401, detail="Account is deactivated")

    return user


def require_roles(*roles: str):
    """Dependency factory: the current user must hold one of ``roles``"""

    async def checker(user: User = Depends(get_current_user)) -> User:
        if user.role not in roles:
            logger.warning(f"⚠️ {user.email} ({user.role}) denied, needs one of {roles}")
            raise ForbiddenException(
                "Access denied", code="Forbidden", details={"requiredRoles": list(roles)}
            )
        return user

    return checker


def ensure_self_or_admin(user: User, owner_id: int) -> None:
    """Users may only reach their own records; admins reach everything"""
    if user.role != ROLE_ADMIN and user.id != owner_id:
        raise ForbiddenException("Access denied. You can only view your own records.", code="Forbidden")
