"""
Wire Modules Configuration

Defines the modules that need dependency injection wiring.
Shared between production and test environments.
"""

from types import ModuleType

from src.service.group_ticketing.app.command import (
    change_group_status_use_case,
    configure_seat_bucket_use_case,
    confirm_hold_use_case,
    create_agency_use_case,
    create_flight_group_use_case,
    create_user_use_case,
    delete_agency_use_case,
    expire_stale_holds_use_case,
    login_use_case,
    release_hold_use_case,
    reserve_seats_use_case,
    update_agency_use_case,
)
from src.service.group_ticketing.app.query import (
    get_agency_use_case,
    get_flight_group_use_case,
    list_child_agencies_use_case,
    list_flight_groups_use_case,
    quote_fare_use_case,
)
from src.service.group_ticketing.driving_adapter.http_controller import user_controller
from src.service.group_ticketing.driving_adapter.http_controller.auth import role_auth


WIRE_MODULES: list[ModuleType] = [
    create_agency_use_case,
    update_agency_use_case,
    delete_agency_use_case,
    create_user_use_case,
    login_use_case,
    create_flight_group_use_case,
    configure_seat_bucket_use_case,
    change_group_status_use_case,
    reserve_seats_use_case,
    confirm_hold_use_case,
    release_hold_use_case,
    expire_stale_holds_use_case,
    get_agency_use_case,
    list_child_agencies_use_case,
    get_flight_group_use_case,
    list_flight_groups_use_case,
    quote_fare_use_case,
    user_controller,
    role_auth,
]
