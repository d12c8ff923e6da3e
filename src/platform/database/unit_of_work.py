"""
Unit of Work: one database session and transaction shared by all repositories

- Every `async with uow:` block opens a fresh session and transaction, so one
  UoW instance may be entered again after the previous block finished
- Lock waits inside the transaction are bounded by `SET LOCAL lock_timeout`
- Leaving the block without `commit()` rolls back
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Any, Callable

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.config.core_setting import settings


if TYPE_CHECKING:
    from src.service.group_ticketing.app.interface.i_agency_repo import IAgencyRepo
    from src.service.group_ticketing.app.interface.i_audit_log_repo import IAuditLogRepo
    from src.service.group_ticketing.app.interface.i_flight_group_repo import IFlightGroupRepo
    from src.service.group_ticketing.app.interface.i_seat_bucket_repo import ISeatBucketRepo
    from src.service.group_ticketing.app.interface.i_seat_hold_repo import ISeatHoldRepo
    from src.service.group_ticketing.app.interface.i_user_repo import IUserRepo


class AbstractUnitOfWork(abc.ABC):
    """
    Usage:
        async with uow:
            bucket = await uow.seat_bucket_repo.get_for_update(bucket_id=...)
            ...
            await uow.commit()
    """

    agency_repo: IAgencyRepo
    user_repo: IUserRepo
    flight_group_repo: IFlightGroupRepo
    seat_bucket_repo: ISeatBucketRepo
    seat_hold_repo: ISeatHoldRepo
    audit_log_repo: IAuditLogRepo

    async def __aenter__(self) -> AbstractUnitOfWork:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.rollback()

    async def commit(self) -> None:
        await self._commit()

    @abc.abstractmethod
    async def _commit(self) -> None:
        raise NotImplementedError

    @abc.abstractmethod
    async def rollback(self) -> None:
        raise NotImplementedError


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    def __init__(
        self,
        session_factory: Callable[[], AsyncSession],
        *,
        lock_timeout_ms: int | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.lock_timeout_ms = (
            settings.DB_LOCK_TIMEOUT_MS if lock_timeout_ms is None else lock_timeout_ms
        )
        self.session: AsyncSession | None = None

    async def __aenter__(self) -> AbstractUnitOfWork:
        from src.service.group_ticketing.driven_adapter.repo.agency_repo_impl import (
            AgencyRepoImpl,
        )
        from src.service.group_ticketing.driven_adapter.repo.audit_log_repo_impl import (
            AuditLogRepoImpl,
        )
        from src.service.group_ticketing.driven_adapter.repo.flight_group_repo_impl import (
            FlightGroupRepoImpl,
        )
        from src.service.group_ticketing.driven_adapter.repo.seat_bucket_repo_impl import (
            SeatBucketRepoImpl,
        )
        from src.service.group_ticketing.driven_adapter.repo.seat_hold_repo_impl import (
            SeatHoldRepoImpl,
        )
        from src.service.group_ticketing.driven_adapter.repo.user_repo_impl import UserRepoImpl

        self.session = self.session_factory()
        # SET cannot take bind parameters; the value is an int from settings
        await self.session.execute(text(f"SET LOCAL lock_timeout = '{int(self.lock_timeout_ms)}ms'"))

        self.agency_repo = AgencyRepoImpl(session=self.session)
        self.user_repo = UserRepoImpl(session=self.session)
        self.flight_group_repo = FlightGroupRepoImpl(session=self.session)
        self.seat_bucket_repo = SeatBucketRepoImpl(session=self.session)
        self.seat_hold_repo = SeatHoldRepoImpl(session=self.session)
        self.audit_log_repo = AuditLogRepoImpl(session=self.session)

        return await super().__aenter__()

    async def __aexit__(self, *args: Any) -> None:
        try:
            await super().__aexit__(*args)
        finally:
            if self.session is not None:
                await self.session.close()
                self.session = None

    async def _commit(self) -> None:
        assert self.session is not None, 'commit() called outside `async with uow`'
        await self.session.commit()

    async def rollback(self) -> None:
        if self.session is not None:
            await self.session.rollback()
