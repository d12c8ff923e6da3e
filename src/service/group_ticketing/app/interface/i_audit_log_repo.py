from abc import ABC, abstractmethod

from src.service.group_ticketing.domain.entity.audit_log_entity import AuditLog


class IAuditLogRepo(ABC):
    @abstractmethod
    async def create(self, *, audit_log: AuditLog) -> AuditLog:
        pass
