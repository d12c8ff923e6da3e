from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.service.group_ticketing.domain.entity.user_entity import User


class IUserRepo(ABC):
    @abstractmethod
    async def create(self, *, user: User) -> User:
        pass

    @abstractmethod
    async def get_by_id(self, *, user_id: UUID) -> Optional[User]:
        pass

    @abstractmethod
    async def get_by_agency_and_username(self, *, agency_id: UUID, username: str) -> Optional[User]:
        pass

    @abstractmethod
    async def update(self, *, user: User) -> User:
        pass
