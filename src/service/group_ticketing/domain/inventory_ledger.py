"""
Seat ledger rules over one locked bucket and its holds.

Callers load the bucket (and holds) under row locks in a single transaction,
apply one of these functions, then persist every returned entity. Nothing
here performs I/O.
"""

from datetime import datetime, timedelta
from typing import Iterable, List
from uuid import UUID

from src.platform.exception.exceptions import ConflictError, HoldNotFoundError
from src.service.group_ticketing.domain.entity.seat_bucket_entity import SeatBucket
from src.service.group_ticketing.domain.entity.seat_hold_entity import SeatHold
from src.service.group_ticketing.domain.enum.hold_status import HoldStatus


def _ensure_hold_of_bucket(bucket: SeatBucket, hold: SeatHold) -> None:
    if hold.seat_bucket_id != bucket.id:
        raise ConflictError(f'Hold {hold.id} does not belong to seat bucket {bucket.id}')


def reserve(
    bucket: SeatBucket, *, quantity: int, held_by: UUID, now: datetime, ttl: timedelta
) -> SeatHold:
    bucket.reserve(quantity)
    return SeatHold.create(
        seat_bucket_id=bucket.id,
        flight_group_id=bucket.flight_group_id,
        quantity=quantity,
        held_by=held_by,
        now=now,
        ttl=ttl,
    )


def confirm(bucket: SeatBucket, hold: SeatHold, *, now: datetime) -> bool:
    """
    Issue the seats of a HELD hold. Returns False when the hold was already
    confirmed. Released, expired or past-TTL holds raise HoldNotFoundError;
    a past-TTL hold must be expired with `expire` first.
    """
    _ensure_hold_of_bucket(bucket, hold)
    if hold.status == HoldStatus.CONFIRMED:
        return False
    if not hold.is_held or hold.is_expired(now):
        raise HoldNotFoundError(f'Hold {hold.id} is no longer active')
    bucket.issue(hold.quantity)
    hold.confirm(now)
    return True


def release(bucket: SeatBucket, hold: SeatHold, *, now: datetime) -> int:
    """Return held seats to the pool; a resolved hold is left as is. Returns seats released."""
    _ensure_hold_of_bucket(bucket, hold)
    if not hold.is_held:
        return 0
    bucket.release(hold.quantity)
    hold.release(now)
    return hold.quantity


def expire(bucket: SeatBucket, holds: Iterable[SeatHold], *, now: datetime) -> List[SeatHold]:
    """Expire every HELD hold past its TTL; returns the holds that changed."""
    expired: List[SeatHold] = []
    for hold in holds:
        _ensure_hold_of_bucket(bucket, hold)
        if not hold.is_expired(now):
            continue
        bucket.release(hold.quantity)
        hold.expire(now)
        expired.append(hold)
    return expired
