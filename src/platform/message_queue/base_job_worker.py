from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, Optional

import anyio
from opentelemetry import trace
from redis.asyncio import Redis as AsyncRedis
from redis.exceptions import RedisError

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.platform.message_queue.job_queue import (
    dead_letter_job,
    decode_job,
    queue_key,
    requeue_job,
)
from src.platform.metrics.inventory_metrics import metrics
from src.platform.observability.tracing import extract_trace_context


JobHandler = Callable[[Dict[str, Any]], Awaitable[None]]


class BaseJobWorker(ABC):
    """
    Consumes one Redis-list queue.

    Loop: BRPOP with timeout -> decode -> dispatch by job type.
    A failing job is pushed back until JOB_MAX_ATTEMPTS is reached, then it
    goes to the dead-letter list. Undecodable jobs go straight to dead letter.
    """

    REDIS_ERROR_BACKOFF_SECONDS: float = 1.0

    def __init__(
        self,
        *,
        queue: str,
        client: AsyncRedis,
        pop_timeout_seconds: Optional[int] = None,
        max_attempts: Optional[int] = None,
    ) -> None:
        self.queue = queue
        self.client = client
        self.pop_timeout_seconds = (
            settings.JOB_POP_TIMEOUT_SECONDS if pop_timeout_seconds is None else pop_timeout_seconds
        )
        self.max_attempts = settings.JOB_MAX_ATTEMPTS if max_attempts is None else max_attempts
        self.tracer = trace.get_tracer(__name__)
        self.running = False

    @abstractmethod
    def _get_job_handlers(self) -> Dict[str, JobHandler]:
        """
        Return job type to handler mapping.

        Example:
            return {'hold_confirmed': self._handle_hold_confirmed}
        """

    async def run(self) -> None:
        self.running = True
        Logger.base.info(f'👷 [{self.queue}] Worker started on {queue_key(self.queue)}')
        while self.running:
            try:
                await self.poll_once()
            except RedisError as e:
                Logger.base.error(f'[{self.queue}] Redis error: {e}')
                await anyio.sleep(self.REDIS_ERROR_BACKOFF_SECONDS)
        Logger.base.info(f'[{self.queue}] Worker stopped')

    def stop(self) -> None:
        self.running = False

    async def poll_once(self) -> bool:
        """Pop and process at most one job; returns False when the pop timed out."""
        item = await self.client.brpop([queue_key(self.queue)], timeout=self.pop_timeout_seconds)
        if item is None:
            return False
        _, raw = item
        await self.process(raw)
        return True

    async def process(self, raw: bytes | str) -> None:
        try:
            job = decode_job(raw)
        except ValueError as e:
            await dead_letter_job(
                client=self.client, queue=self.queue, job={'raw': str(raw)}, error=str(e)
            )
            metrics.record_job_processed(queue=self.queue, result='undecodable')
            return

        handler = self._get_job_handlers().get(job.get('type', ''))
        if handler is None:
            await dead_letter_job(
                client=self.client,
                queue=self.queue,
                job=job,
                error=f'No handler for job type {job.get("type")!r}',
            )
            metrics.record_job_processed(queue=self.queue, result='unknown_type')
            return

        ctx = extract_trace_context(headers=job.get('trace'))
        with self.tracer.start_as_current_span(
            f'worker.{self.queue}.{job["type"]}',
            context=ctx,
            attributes={'messaging.system': 'redis', 'messaging.destination': self.queue},
        ):
            try:
                await handler(job.get('payload') or {})
            except Exception as e:
                await self._handle_failure(job=job, error=e)
                return

        metrics.record_job_processed(queue=self.queue, result='ok')

    async def _handle_failure(self, *, job: Dict[str, Any], error: Exception) -> None:
        attempts = job.get('attempts', 0) + 1
        Logger.base.opt(exception=error).error(
            f'[{self.queue}] Job {job.get("id")} failed (attempt {attempts}/{self.max_attempts})'
        )
        if attempts >= self.max_attempts:
            await dead_letter_job(
                client=self.client,
                queue=self.queue,
                job={**job, 'attempts': attempts},
                error=str(error),
            )
            metrics.record_job_processed(queue=self.queue, result='dead_letter')
        else:
            await requeue_job(client=self.client, queue=self.queue, job=job)
            metrics.record_job_processed(queue=self.queue, result='retry')
