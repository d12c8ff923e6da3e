from sqlalchemy.ext.asyncio import AsyncSession

from src.platform.logging.loguru_io import Logger
from src.service.group_ticketing.app.interface.i_audit_log_repo import IAuditLogRepo
from src.service.group_ticketing.domain.entity.audit_log_entity import AuditLog
from src.service.group_ticketing.driven_adapter.model.audit_log_model import AuditLogModel


class AuditLogRepoImpl(IAuditLogRepo):
    def __init__(self, *, session: AsyncSession) -> None:
        self.session = session

    @Logger.io
    async def create(self, *, audit_log: AuditLog) -> AuditLog:
        self.session.add(
            AuditLogModel(
                id=audit_log.id,
                agency_id=audit_log.agency_id,
                actor_user_id=audit_log.actor_user_id,
                entity_type=audit_log.entity_type,
                entity_id=audit_log.entity_id,
                action=audit_log.action,
                old_values=audit_log.old_values,
                new_values=audit_log.new_values,
                occurred_at=audit_log.occurred_at,
            )
        )
        await self.session.flush()
        return audit_log
