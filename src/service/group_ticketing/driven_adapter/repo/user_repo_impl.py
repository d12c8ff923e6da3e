from typing import Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.exception.exceptions import ConflictError
from src.platform.logging.loguru_io import Logger
from src.service.group_ticketing.app.interface.i_user_repo import IUserRepo
from src.service.group_ticketing.domain.entity.user_entity import User
from src.service.group_ticketing.domain.enum.user_role import UserRole
from src.service.group_ticketing.driven_adapter.model.user_model import UserModel


class UserRepoImpl(IUserRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _to_entity(model: UserModel) -> User:
        return User(
            id=model.id,
            agency_id=model.agency_id,
            username=model.username,
            role=UserRole(model.role),
            password_hash=model.password_hash,
            email=model.email,
            phone=model.phone,
            is_active=model.is_active,
            last_login_at=model.last_login_at,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @Logger.io
    async def create(self, *, user: User) -> User:
        model = UserModel(
            id=user.id,
            agency_id=user.agency_id,
            username=user.username,
            password_hash=user.password_hash,
            email=user.email,
            phone=user.phone,
            role=user.role,
            is_active=user.is_active,
        )
        self.session.add(model)
        try:
            await self.session.flush()
        except IntegrityError as e:
            raise ConflictError(f'Username {user.username} already exists in this agency') from e
        await self.session.refresh(model)
        return self._to_entity(model)

    @Logger.io
    async def get_by_id(self, *, user_id: UUID) -> Optional[User]:
        result = await self.session.execute(select(UserModel).where(UserModel.id == user_id))
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    @Logger.io
    async def get_by_agency_and_username(self, *, agency_id: UUID, username: str) -> Optional[User]:
        result = await self.session.execute(
            select(UserModel).where(
                UserModel.agency_id == agency_id, UserModel.username == username
            )
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    @Logger.io
    async def update(self, *, user: User) -> User:
        result = await self.session.execute(
            update(UserModel)
            .where(UserModel.id == user.id)
            .values(
                password_hash=user.password_hash,
                email=user.email,
                phone=user.phone,
                role=user.role,
                is_active=user.is_active,
                last_login_at=user.last_login_at,
            )
            .returning(UserModel)
        )
        return self._to_entity(result.scalar_one())
