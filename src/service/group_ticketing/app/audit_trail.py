"""
Audit trail writes

Entries are added inside the caller's unit of work so they commit or roll back
with the change they describe; `log_entries` runs after the commit.
"""

from typing import Iterable, List

from src.platform.database.unit_of_work import AbstractUnitOfWork
from src.platform.logging.loguru_io import Logger
from src.service.group_ticketing.domain.entity.audit_log_entity import AuditLog


async def write_entries(uow: AbstractUnitOfWork, entries: Iterable[AuditLog]) -> List[AuditLog]:
    written = []
    for entry in entries:
        written.append(await uow.audit_log_repo.create(audit_log=entry))
    return written


def log_entries(entries: Iterable[AuditLog]) -> None:
    for entry in entries:
        Logger.base.info(
            f'📝 [AUDIT] {entry.action} {entry.entity_type}:{entry.entity_id} '
            f'by {entry.actor_user_id or "system"} {entry.old_values} -> {entry.new_values}'
        )
