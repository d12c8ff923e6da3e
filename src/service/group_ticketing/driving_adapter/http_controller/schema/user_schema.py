"""
User API Schemas - Pydantic models for request/response
"""

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, SecretStr

from src.service.group_ticketing.domain.entity.user_entity import User
from src.service.group_ticketing.domain.enum.user_role import UserRole
from src.service.group_ticketing.domain.value_object.caller_identity import CallerIdentity


class CreateUserRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'agency_id': '01234567-89ab-7def-0123-456789abcdef',
                'username': 'counter01',
                'password': 'P@ssw0rd',
                'role': 'SUB_AGENT',
                'email': 'counter01@agency.example',
            }
        }
    )

    # defaults to the caller's own agency
    agency_id: Optional[UUID] = None
    username: str = Field(..., min_length=1, max_length=80)
    password: SecretStr = Field(
        ..., min_length=6, max_length=72, description='Password must be 6-72 characters (bcrypt limit)'
    )
    role: UserRole = UserRole.SUB_AGENT
    email: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=50)


class LoginRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            'example': {'agency_code': 'SKYTOURS', 'username': 'manager', 'password': 'P@ssw0rd'}
        }
    )

    agency_code: str = Field(..., min_length=1, max_length=30)
    username: str = Field(..., min_length=1, max_length=80)
    password: SecretStr = Field(..., min_length=1, max_length=72)


class UserResponse(BaseModel):
    id: UUID
    agency_id: UUID
    username: str
    role: UserRole
    email: Optional[str] = None
    phone: Optional[str] = None
    is_active: bool
    last_login_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, user: User) -> 'UserResponse':
        return cls(
            id=user.id,
            agency_id=user.agency_id,
            username=user.username,
            role=user.role,
            email=user.email,
            phone=user.phone,
            is_active=user.is_active,
            last_login_at=user.last_login_at,
        )


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = 'bearer'
    user: UserResponse


class MeResponse(BaseModel):
    user_id: UUID
    agency_id: UUID
    username: str
    role: UserRole

    @classmethod
    def from_identity(cls, identity: CallerIdentity) -> 'MeResponse':
        return cls(
            user_id=identity.user_id,
            agency_id=identity.agency_id,
            username=identity.username,
            role=identity.role,
        )
