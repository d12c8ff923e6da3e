from datetime import timedelta

import uuid_utils.compat as uuid

from src.service.group_ticketing.domain.entity.audit_log_entity import AuditLog
from src.service.group_ticketing.domain.entity.seat_hold_entity import SeatHold
from src.service.group_ticketing.domain.enum.audit_action import AuditAction
from src.service.group_ticketing.domain.enum.flight_group_status import FlightGroupStatus
from test.service.group_ticketing.builders import NOW, make_bucket, make_flight_group


def _hold() -> SeatHold:
    bucket = make_bucket(make_flight_group(agency_id=uuid.uuid7(), created_by=uuid.uuid7()))
    return SeatHold.create(
        seat_bucket_id=bucket.id,
        flight_group_id=bucket.flight_group_id,
        quantity=2,
        held_by=uuid.uuid7(),
        now=NOW,
        ttl=timedelta(minutes=30),
    )


class TestHoldChange:
    def test_action_follows_hold_status(self) -> None:
        hold = _hold()
        agency_id = uuid.uuid7()

        created = AuditLog.hold_change(
            hold=hold, agency_id=agency_id, actor_user_id=hold.held_by, now=NOW
        )
        hold.expire(NOW)
        expired = AuditLog.hold_change(hold=hold, agency_id=agency_id, actor_user_id=None, now=NOW)

        assert created.action == AuditAction.HOLD_CREATED
        assert created.old_values is None
        assert 'expires_at' in created.new_values
        assert expired.action == AuditAction.HOLD_EXPIRED
        assert expired.old_values == {'status': 'HELD'}
        assert 'expires_at' not in expired.new_values
        assert created.id != expired.id

    def test_reason_is_kept(self) -> None:
        hold = _hold()
        hold.release(NOW)

        entry = AuditLog.hold_change(
            hold=hold,
            agency_id=uuid.uuid7(),
            actor_user_id=None,
            now=NOW,
            reason='group_cancelled',
        )

        assert entry.action == AuditAction.HOLD_RELEASED
        assert entry.new_values['reason'] == 'group_cancelled'


class TestGroupTransition:
    def test_released_holds_only_on_cancellation(self) -> None:
        flight_group = make_flight_group(agency_id=uuid.uuid7(), created_by=uuid.uuid7())
        actor = uuid.uuid7()

        flight_group.status = FlightGroupStatus.CLOSED
        closed = AuditLog.group_transition(
            flight_group=flight_group,
            previous=FlightGroupStatus.PUBLISHED,
            actor_user_id=actor,
            now=NOW,
        )
        flight_group.status = FlightGroupStatus.CANCELLED
        cancelled = AuditLog.group_transition(
            flight_group=flight_group,
            previous=FlightGroupStatus.PUBLISHED,
            actor_user_id=actor,
            now=NOW,
            released_holds=3,
        )

        assert closed.new_values == {'status': 'CLOSED'}
        assert cancelled.new_values == {'status': 'CANCELLED', 'released_holds': 3}
        assert cancelled.agency_id == flight_group.agency_id
        assert cancelled.entity_id == flight_group.id
