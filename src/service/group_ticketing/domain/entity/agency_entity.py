from datetime import datetime
from typing import Optional
from uuid import UUID

import attrs
import uuid_utils.compat as uuid

from src.platform.exception.exceptions import DomainError, ForbiddenError
from src.service.group_ticketing.domain.enum.agency_status import AgencyStatus


NAME_MAX_LENGTH = 150
CODE_MAX_LENGTH = 30


def _validate_name(name: str) -> str:
    name = (name or '').strip()
    if not name or len(name) > NAME_MAX_LENGTH:
        raise DomainError(f'name must be 1 to {NAME_MAX_LENGTH} characters')
    return name


@attrs.define
class Agency:
    """Node of the agency tree; only the parent pointer is stored, children are queried."""

    id: UUID
    name: str
    code: str
    parent_agency_id: Optional[UUID] = None
    status: AgencyStatus = AgencyStatus.ACTIVE
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        *,
        name: str,
        code: str,
        parent_agency_id: Optional[UUID] = None,
        contact_email: Optional[str] = None,
        contact_phone: Optional[str] = None,
        address: Optional[str] = None,
        city: Optional[str] = None,
        country: Optional[str] = None,
    ) -> 'Agency':
        code = (code or '').strip().upper()
        if not code or len(code) > CODE_MAX_LENGTH:
            raise DomainError(f'code must be 1 to {CODE_MAX_LENGTH} characters')
        return cls(
            id=uuid.uuid7(),
            name=_validate_name(name),
            code=code,
            parent_agency_id=parent_agency_id,
            contact_email=contact_email,
            contact_phone=contact_phone,
            address=address,
            city=city,
            country=country,
        )

    @property
    def is_active(self) -> bool:
        return self.status == AgencyStatus.ACTIVE

    def ensure_active(self) -> None:
        if not self.is_active:
            raise ForbiddenError('Agency is suspended')

    def rename(self, name: str) -> None:
        self.name = _validate_name(name)
