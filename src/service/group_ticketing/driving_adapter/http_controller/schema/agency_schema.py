from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.service.group_ticketing.domain.entity.agency_entity import Agency
from src.service.group_ticketing.domain.enum.agency_status import AgencyStatus


class AgencyCreateRequest(BaseModel):
    model_config = ConfigDict(
        json_schema_extra={
            'example': {
                'name': 'Sky Tours Taipei',
                'code': 'SKYTPE',
                'parent_agency_id': None,
                'contact_email': 'ops@skytours.example',
                'city': 'Taipei',
                'country': 'TW',
            }
        }
    )

    name: str = Field(..., min_length=1, max_length=150)
    code: str = Field(..., min_length=1, max_length=30)
    parent_agency_id: Optional[UUID] = None
    contact_email: Optional[str] = Field(None, max_length=255)
    contact_phone: Optional[str] = Field(None, max_length=50)
    address: Optional[str] = Field(None, max_length=255)
    city: Optional[str] = Field(None, max_length=100)
    country: Optional[str] = Field(None, max_length=100)


class AgencyUpdateRequest(BaseModel):
    """Omitted fields stay unchanged; an explicit `parent_agency_id: null` makes the agency a root."""

    model_config = ConfigDict(
        json_schema_extra={'example': {'status': 'SUSPENDED', 'parent_agency_id': None}}
    )

    name: Optional[str] = Field(None, min_length=1, max_length=150)
    status: Optional[AgencyStatus] = None
    parent_agency_id: Optional[UUID] = None

    @property
    def updates_parent(self) -> bool:
        return 'parent_agency_id' in self.model_fields_set


class AgencyResponse(BaseModel):
    id: UUID
    name: str
    code: str
    parent_agency_id: Optional[UUID] = None
    status: AgencyStatus
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    address: Optional[str] = None
    city: Optional[str] = None
    country: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_entity(cls, agency: Agency) -> 'AgencyResponse':
        return cls(
            id=agency.id,
            name=agency.name,
            code=agency.code,
            parent_agency_id=agency.parent_agency_id,
            status=agency.status,
            contact_email=agency.contact_email,
            contact_phone=agency.contact_phone,
            address=agency.address,
            city=agency.city,
            country=agency.country,
            created_at=agency.created_at,
            updated_at=agency.updated_at,
        )
