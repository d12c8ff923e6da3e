from datetime import datetime
from typing import Optional
from uuid import UUID

import attrs
from pydantic import SecretStr
import uuid_utils.compat as uuid

from src.platform.exception.exceptions import DomainError, ForbiddenError, LoginError
from src.service.group_ticketing.app.interface.i_password_hasher import IPasswordHasher
from src.service.group_ticketing.domain.enum.user_role import UserRole
from src.service.group_ticketing.domain.value_object.caller_identity import CallerIdentity


USERNAME_MAX_LENGTH = 80
PASSWORD_MIN_LENGTH = 6


@attrs.define
class User:
    id: UUID
    agency_id: UUID
    username: str
    role: UserRole
    password_hash: str = attrs.field(default='', repr=False)  # Hide from repr for security
    email: Optional[str] = None
    phone: Optional[str] = None
    is_active: bool = True
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        *,
        agency_id: UUID,
        username: str,
        plain_password: str,
        role: UserRole,
        password_hasher: IPasswordHasher,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> 'User':
        username = (username or '').strip()
        if not username or len(username) > USERNAME_MAX_LENGTH:
            raise DomainError(f'username must be 1 to {USERNAME_MAX_LENGTH} characters')
        user = cls(
            id=uuid.uuid7(),
            agency_id=agency_id,
            username=username,
            role=UserRole(role),
            email=email,
            phone=phone,
        )
        user.set_password(plain_password, password_hasher)
        return user

    def set_password(self, plain_password: str, password_hasher: IPasswordHasher) -> None:
        if not plain_password or len(plain_password) < PASSWORD_MIN_LENGTH:
            raise DomainError(f'password must be at least {PASSWORD_MIN_LENGTH} characters')
        self.password_hash = password_hasher.hash_password(plain_password=SecretStr(plain_password))

    def verify_password(self, plain_password: str, password_hasher: IPasswordHasher) -> bool:
        return password_hasher.verify_password(
            plain_password=SecretStr(plain_password), hashed_password=self.password_hash
        )

    def validate_for_login(self) -> None:
        if not self.is_active:
            raise ForbiddenError('User is inactive')

    def record_login(self, now: datetime) -> None:
        self.last_login_at = now

    def to_identity(self) -> CallerIdentity:
        return CallerIdentity(
            user_id=self.id, agency_id=self.agency_id, username=self.username, role=self.role
        )

    @staticmethod
    def validate_user_exists(user: Optional['User']) -> 'User':
        if not user:
            raise LoginError('LOGIN_BAD_CREDENTIALS')
        return user
