from typing import Optional, Self
from uuid import UUID

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import ConflictError, ForbiddenError, NotFoundError
from src.platform.logging.loguru_io import Logger
from src.service.group_ticketing.app.interface.i_password_hasher import IPasswordHasher
from src.service.group_ticketing.domain.entity.user_entity import User
from src.service.group_ticketing.domain.enum.user_role import UserRole
from src.service.group_ticketing.domain.permission import (
    Capability,
    ensure_capability,
    ensure_same_agency,
)
from src.service.group_ticketing.domain.value_object.caller_identity import CallerIdentity


class CreateUserUseCase:
    """ADMIN creates users anywhere; MANAGER only inside their own agency and never ADMINs."""

    def __init__(self, *, uow: AbstractUnitOfWork, password_hasher: IPasswordHasher) -> None:
        self.uow = uow
        self.password_hasher = password_hasher

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        password_hasher: IPasswordHasher = Depends(Provide[Container.password_hasher]),
    ) -> Self:
        return cls(uow=uow, password_hasher=password_hasher)

    @Logger.io
    async def execute(
        self,
        *,
        identity: CallerIdentity,
        agency_id: UUID,
        username: str,
        password: str,
        role: UserRole,
        email: Optional[str] = None,
        phone: Optional[str] = None,
    ) -> User:
        ensure_capability(identity, Capability.MANAGE_USERS)
        ensure_same_agency(identity, agency_id)
        role = UserRole(role)
        if role == UserRole.ADMIN and not identity.is_admin:
            raise ForbiddenError('Only administrators can create administrators')

        user = User.create(
            agency_id=agency_id,
            username=username,
            plain_password=password,
            role=role,
            password_hasher=self.password_hasher,
            email=email,
            phone=phone,
        )

        async with self.uow:
            if not await self.uow.agency_repo.get_by_id(agency_id=agency_id):
                raise NotFoundError('Agency not found')
            existing = await self.uow.user_repo.get_by_agency_and_username(
                agency_id=agency_id, username=user.username
            )
            if existing:
                raise ConflictError(f'Username {user.username} already exists in this agency')

            user = await self.uow.user_repo.create(user=user)
            await self.uow.commit()

        Logger.base.info(f'👤 [USER] Created {user.username} ({user.role}) in agency {agency_id}')
        return user
