import pytest
import uuid_utils.compat as uuid

from src.platform.exception.exceptions import ForbiddenError
from src.service.group_ticketing.domain.enum.user_role import UserRole
from src.service.group_ticketing.domain.permission import (
    Capability,
    ensure_capability,
    ensure_same_agency,
    has_capability,
)
from test.service.group_ticketing.builders import make_identity


ADMIN_ONLY = {
    Capability.CREATE_AGENCY,
    Capability.UPDATE_AGENCY,
    Capability.DELETE_AGENCY,
    Capability.EXPIRE_HOLDS,
}
MANAGER_AND_ADMIN = {
    Capability.MANAGE_USERS,
    Capability.CREATE_FLIGHT_GROUP,
    Capability.CONFIGURE_SEAT_BUCKETS,
    Capability.CHANGE_GROUP_STATUS,
    Capability.CONFIRM_HOLD,
}
EVERY_ROLE = {
    Capability.VIEW_AGENCY,
    Capability.VIEW_FLIGHT_GROUP,
    Capability.QUOTE_FARE,
    Capability.HOLD_SEATS,
    Capability.RELEASE_HOLD,
}


def test_capability_groups_cover_every_capability() -> None:
    assert ADMIN_ONLY | MANAGER_AND_ADMIN | EVERY_ROLE == set(Capability)


@pytest.mark.parametrize('capability', sorted(Capability))
def test_role_capability_table(capability: Capability) -> None:
    assert has_capability(UserRole.ADMIN, capability)
    assert has_capability(UserRole.MANAGER, capability) == (capability not in ADMIN_ONLY)
    assert has_capability(UserRole.SUB_AGENT, capability) == (capability in EVERY_ROLE)


def test_sub_agent_cannot_confirm_holds() -> None:
    with pytest.raises(ForbiddenError):
        ensure_capability(make_identity(UserRole.SUB_AGENT), Capability.CONFIRM_HOLD)


def test_manager_cannot_manage_agencies() -> None:
    with pytest.raises(ForbiddenError):
        ensure_capability(make_identity(UserRole.MANAGER), Capability.CREATE_AGENCY)


class TestTenancy:
    def test_own_agency_is_allowed(self) -> None:
        identity = make_identity(UserRole.SUB_AGENT)

        ensure_same_agency(identity, identity.agency_id)

    def test_other_agency_is_forbidden(self) -> None:
        with pytest.raises(ForbiddenError):
            ensure_same_agency(make_identity(UserRole.MANAGER), uuid.uuid7())

    def test_admin_crosses_agencies(self) -> None:
        ensure_same_agency(make_identity(UserRole.ADMIN), uuid.uuid7())
