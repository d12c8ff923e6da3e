from datetime import datetime
from typing import Callable, Self

from dependency_injector.wiring import Provide, inject
from fastapi import Depends

from src.platform.config.di import Container
from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.exception.exceptions import LoginError
from src.platform.logging.loguru_io import Logger
from src.service.group_ticketing.app.interface.i_password_hasher import IPasswordHasher
from src.service.group_ticketing.domain.clock import utc_now
from src.service.group_ticketing.domain.entity.user_entity import User


class LoginUseCase:
    def __init__(
        self,
        *,
        uow: AbstractUnitOfWork,
        password_hasher: IPasswordHasher,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.uow = uow
        self.password_hasher = password_hasher
        self.clock = clock

    @classmethod
    @inject
    def depends(
        cls,
        uow: AbstractUnitOfWork = Depends(Provide[Container.unit_of_work]),
        password_hasher: IPasswordHasher = Depends(Provide[Container.password_hasher]),
    ) -> Self:
        return cls(uow=uow, password_hasher=password_hasher)

    @Logger.io
    async def execute(self, *, agency_code: str, username: str, password: str) -> User:
        """
        Authenticate a user of an agency. Unknown agency, unknown user and wrong
        password all fail the same way so accounts cannot be probed.
        """
        async with self.uow:
            agency = await self.uow.agency_repo.get_by_code(code=(agency_code or '').strip().upper())
            if not agency:
                raise LoginError('LOGIN_BAD_CREDENTIALS')

            user = User.validate_user_exists(
                await self.uow.user_repo.get_by_agency_and_username(
                    agency_id=agency.id, username=(username or '').strip()
                )
            )
            if not user.verify_password(password, self.password_hasher):
                raise LoginError('LOGIN_BAD_CREDENTIALS')

            agency.ensure_active()
            user.validate_for_login()

            user.record_login(self.clock())
            user = await self.uow.user_repo.update(user=user)
            await self.uow.commit()

        Logger.base.info(f'🔐 [LOGIN] {user.username}@{agency.code} logged in')
        return user
