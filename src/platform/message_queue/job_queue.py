"""
Redis-list job queues

Jobs are orjson documents pushed with LPUSH and consumed with BRPOP (FIFO).
Each job carries the W3C trace context of the publisher so the worker span
joins the same trace.
"""

import time
from typing import Any, Dict, Optional

from opentelemetry import trace
import orjson
from redis.asyncio import Redis as AsyncRedis
import uuid_utils.compat as uuid

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import inject_trace_context


def queue_key(queue: str) -> str:
    return f'{settings.JOB_QUEUE_PREFIX}:{queue}'


def dead_letter_key(queue: str) -> str:
    return f'{settings.JOB_QUEUE_PREFIX}:{queue}:dead'


def build_job(*, job_type: str, payload: Dict[str, Any], attempts: int = 0) -> Dict[str, Any]:
    return {
        'id': str(uuid.uuid7()),
        'type': job_type,
        'payload': payload,
        'attempts': attempts,
        'enqueued_at': time.time(),
        'trace': inject_trace_context(),
    }


def encode_job(job: Dict[str, Any]) -> bytes:
    # default=str covers Decimal values in payloads
    return orjson.dumps(job, default=str)


def decode_job(raw: bytes | str) -> Dict[str, Any]:
    job = orjson.loads(raw)
    if not isinstance(job, dict):
        raise ValueError(f'Job must be a JSON object, got {type(job).__name__}')
    return job


async def enqueue_job(
    *,
    client: AsyncRedis,
    queue: str,
    job_type: str,
    payload: Dict[str, Any],
) -> str:
    tracer = trace.get_tracer(__name__)
    with tracer.start_as_current_span(
        'job_queue.enqueue',
        attributes={'messaging.system': 'redis', 'messaging.destination': queue},
    ):
        job = build_job(job_type=job_type, payload=payload)
        await client.lpush(queue_key(queue), encode_job(job))
        Logger.base.debug(f'📤 [JOB] {queue}/{job_type} enqueued as {job["id"]}')
        return job['id']


async def requeue_job(*, client: AsyncRedis, queue: str, job: Dict[str, Any]) -> None:
    job = {**job, 'attempts': job.get('attempts', 0) + 1}
    await client.lpush(queue_key(queue), encode_job(job))


async def dead_letter_job(
    *, client: AsyncRedis, queue: str, job: Dict[str, Any], error: Optional[str]
) -> None:
    await client.lpush(
        dead_letter_key(queue),
        encode_job({**job, 'error': error, 'failed_at': time.time()}),
    )
    Logger.base.warning(f'☠️ [DLQ] {queue}/{job.get("type")} {job.get("id")}: {error}')
