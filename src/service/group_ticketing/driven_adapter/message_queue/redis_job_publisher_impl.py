"""
Redis Job Publisher Implementation

Enqueues follow-up jobs after an inventory change committed:
- hold confirmed: pnr_sync + email
- group cancelled: email
A Redis outage is logged and counted; it never reaches the caller.
"""

from typing import Any, Dict

from redis.exceptions import RedisError

from src.platform.logging.loguru_io import Logger
from src.platform.message_queue.job_constant import JobQueues, JobTypes
from src.platform.message_queue.job_queue import enqueue_job
from src.platform.metrics.inventory_metrics import metrics
from src.platform.state.redis_client import RedisClient
from src.service.group_ticketing.app.interface.i_job_publisher import IJobPublisher
from src.service.group_ticketing.domain.entity.flight_group_entity import FlightGroup
from src.service.group_ticketing.domain.entity.seat_bucket_entity import SeatBucket
from src.service.group_ticketing.domain.entity.seat_hold_entity import SeatHold


class RedisJobPublisherImpl(IJobPublisher):
    def __init__(self, *, redis_client: RedisClient) -> None:
        self.redis_client = redis_client

    @staticmethod
    def _flight_payload(flight_group: FlightGroup) -> Dict[str, Any]:
        return {
            'flight_group_id': str(flight_group.id),
            'agency_id': str(flight_group.agency_id),
            'flight': f'{flight_group.carrier_code}{flight_group.flight_number}',
            'origin': flight_group.origin,
            'destination': flight_group.destination,
            'departure_time_utc': flight_group.departure_time_utc.isoformat(),
            'pnr_mode': str(flight_group.pnr_mode),
        }

    async def _publish(self, *, queue: str, job_type: str, payload: Dict[str, Any]) -> None:
        try:
            await enqueue_job(
                client=self.redis_client.get_client(),
                queue=queue,
                job_type=job_type,
                payload=payload,
            )
        except (RedisError, RuntimeError) as e:
            metrics.record_job_published(queue=queue, result='failed')
            Logger.base.warning(f'⚠️ [JOB] Could not enqueue {queue}/{job_type}: {e}')
            return
        metrics.record_job_published(queue=queue, result='ok')

    @Logger.io
    async def publish_hold_confirmed(
        self, *, hold: SeatHold, bucket: SeatBucket, flight_group: FlightGroup
    ) -> None:
        payload = {
            **self._flight_payload(flight_group),
            'hold_id': str(hold.id),
            'held_by': str(hold.held_by),
            'pax_type': str(bucket.pax_type),
            'quantity': hold.quantity,
            'unit_price': str(bucket.unit_price),
            'total_price': str(bucket.price_for(hold.quantity)),
            'currency': bucket.currency,
        }
        await self._publish(queue=JobQueues.PNR_SYNC, job_type=JobTypes.HOLD_CONFIRMED, payload=payload)
        await self._publish(queue=JobQueues.EMAIL, job_type=JobTypes.HOLD_CONFIRMED, payload=payload)

    @Logger.io
    async def publish_group_cancelled(
        self, *, flight_group: FlightGroup, released_holds: int
    ) -> None:
        payload = {**self._flight_payload(flight_group), 'released_holds': released_holds}
        await self._publish(queue=JobQueues.EMAIL, job_type=JobTypes.GROUP_CANCELLED, payload=payload)
