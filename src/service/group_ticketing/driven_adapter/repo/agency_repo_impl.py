from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, exists, or_, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.service.group_ticketing.app.interface.i_agency_repo import IAgencyRepo
from src.service.group_ticketing.domain.entity.agency_entity import Agency
from src.service.group_ticketing.domain.enum.agency_status import AgencyStatus
from src.service.group_ticketing.driven_adapter.model.agency_model import AgencyModel
from src.service.group_ticketing.driven_adapter.model.flight_group_model import FlightGroupModel
from src.service.group_ticketing.driven_adapter.model.user_model import UserModel


class AgencyRepoImpl(IAgencyRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(model: AgencyModel) -> Agency:
        return Agency(
            id=model.id,
            name=model.name,
            code=model.code,
            parent_agency_id=model.parent_agency_id,
            status=AgencyStatus(model.status),
            contact_email=model.contact_email,
            contact_phone=model.contact_phone,
            address=model.address,
            city=model.city,
            country=model.country,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @Logger.io
    async def create(self, *, agency: Agency) -> Agency:
        model = AgencyModel(
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
        )
        self.session.add(model)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise ConflictError(f'Agency code {agency.code} already exists') from e
        await self.session.refresh(model)
        return self._to_entity(model)

    @Logger.io
    async def get_by_id(self, *, agency_id: UUID) -> Optional[Agency]:
        result = await self.session.execute(select(AgencyModel).where(AgencyModel.id == agency_id))
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    @Logger.io
    async def get_for_update(self, *, agency_id: UUID) -> Optional[Agency]:
        result = await self.session.execute(
            select(AgencyModel).where(AgencyModel.id == agency_id).with_for_update()
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    @Logger.io
    async def get_by_code(self, *, code: str) -> Optional[Agency]:
        result = await self.session.execute(select(AgencyModel).where(AgencyModel.code == code))
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    @Logger.io
    async def list_children(self, *, parent_agency_id: UUID) -> List[Agency]:
        result = await self.session.execute(
            select(AgencyModel)
            .where(AgencyModel.parent_agency_id == parent_agency_id)
            .order_by(AgencyModel.code)
        )
        return [self._to_entity(model) for model in result.scalars()]

    @Logger.io
    async def update(self, *, agency: Agency) -> Agency:
        result = await self.session.execute(
            update(AgencyModel)
            .where(AgencyModel.id == agency.id)
            .values(
                name=agency.name,
                status=agency.status,
                parent_agency_id=agency.parent_agency_id,
                contact_email=agency.contact_email,
                contact_phone=agency.contact_phone,
                address=agency.address,
                city=agency.city,
                country=agency.country,
            )
            .returning(AgencyModel)
        )
        return self._to_entity(result.scalar_one())

    @Logger.io
    async def delete(self, *, agency_id: UUID) -> None:
        await self.session.execute(
            update(AgencyModel)
            .where(AgencyModel.parent_agency_id == agency_id)
            .values(parent_agency_id=None)
        )
        await self.session.execute(delete(UserModel).where(UserModel.agency_id == agency_id))
        await self.session.execute(delete(AgencyModel).where(AgencyModel.id == agency_id))

    @Logger.io
    async def owns_flight_groups(self, *, agency_id: UUID) -> bool:
        agency_users = select(UserModel.id).where(UserModel.agency_id == agency_id)
        result = await self.session.execute(
            select(
                exists().where(
                    or_(
                        FlightGroupModel.agency_id == agency_id,
                        FlightGroupModel.created_by.in_(agency_users),
                    )
                )
            )
        )
        return bool(result.scalar())
