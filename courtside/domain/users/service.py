"""User account service"""

import logging

from fastapi import HTTPException
from sqlalchemy.orm import Session

from ...models import ROLE_COACH, ROLE_USER, User
from ...security_utils import create_access_token, hash_password_bcrypt, verify_password_bcrypt
from ...shared.exceptions import ConflictException, NotFoundException, ValidationException
from .repository import UserRepository
from .schemas import UserRegister, UserUpdate

logger = logging.getLogger(__name__)

# Admins are provisioned out of band
SELF_SERVICE_ROLES = (ROLE_USER, ROLE_COACH)


class UserService:
    def __init__(self, db: Session):
        self.db = db
        self.repo = UserRepository()

    def register(self, data: UserRegister) -> User:
        if data.role not in SELF_SERVICE_ROLES:
            raise ValidationException(
                "Role must be User or Coach", code="InvalidRole", details={"role": data.role}
            )
        if self.repo.get_by_email(self.db, data.email):
            raise ConflictException("Email is already registered", code="EmailTaken")

        user = self.repo.create(
            self.db,
            name=data.name,
            email=data.email,
            password_hash=hash_password_bcrypt(data.password),
            role=data.role,
            phone_number=data.phoneNumber,
        )
        logger.info(f"👤 Registered {user.role} {user.email} (id {user.id})")
        return user

    def login(self, email: str, password: str) -> tuple[User, str]:
        user = self.repo.get_by_email(self.db, email)
        if not user or not verify_password_bcrypt(password, user.password_hash):
            logger.warning(f"⚠️ Failed login for {email}")
            raise HTTPException(status_code=401, detail="Invalid email or password")
        if not user.is_active:
            logger.warning(f"⚠️ Deactivated user {email} attempted to log in")
            raise HTTPException(status_code=401, detail="Account is deactivated")
        return user, create_access_token(user.id, user.role)

    def update_profile(self, user: User, data: UserUpdate) -> User:
        fields = {}
        if data.name is not None:
            fields["name"] = data.name
        if data.phoneNumber is not None:
            fields["phone_number"] = data.phoneNumber
        if data.email is not None and data.email != user.email:
            if self.repo.get_by_email(self.db, data.email):
                raise ConflictException("Email is already registered", code="EmailTaken")
            fields["email"] = data.email
        return self.repo.update(self.db, user, **fields)

    def list_users(self) -> list[User]:
        return self.repo.get_all(self.db)

    def toggle_active(self, user_id: int, is_active: bool) -> User:
        user = self.repo.get_by_id(self.db, user_id)
        if not user:
            raise NotFoundException("User not found", code="UserNotFound")
        user = self.repo.update(self.db, user, is_active=is_active)
        logger.info(f"🔁 User {user.id} is now {'active' if is_active else 'deactivated'}")
        return user
