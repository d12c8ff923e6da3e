from uuid import UUID

import attrs

from src.service.group_ticketing.domain.enum.user_role import UserRole


@attrs.frozen
class CallerIdentity:
    """Pre-validated identity decoded from the JWT; no DB lookup behind it."""

    user_id: UUID
    agency_id: UUID
    username: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
