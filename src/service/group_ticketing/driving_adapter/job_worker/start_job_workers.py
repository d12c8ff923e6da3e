"""
Background jobs: email worker, PNR sync worker and the hold expiry sweep

Runs inside the API process (see main.lifespan) or standalone:
    PYTHONPATH=$PWD uv run python -m src.service.group_ticketing.driving_adapter.job_worker.start_job_workers
"""

from typing import List

import anyio

from src.platform.config.di import container
from src.platform.database.db_setting import dispose_engine, get_engine
from src.platform.logging.loguru_io import Logger
from src.platform.message_queue.base_job_worker import BaseJobWorker
from src.platform.observability.tracing import TracingConfig
from src.platform.state.redis_client import redis_client
from src.service.group_ticketing.app.command.expire_stale_holds_use_case import (
    ExpireStaleHoldsUseCase,
)
from src.service.group_ticketing.driving_adapter.job_worker.email_worker import EmailWorker
from src.service.group_ticketing.driving_adapter.job_worker.hold_expiry_job import HoldExpiryJob
from src.service.group_ticketing.driving_adapter.job_worker.pnr_sync_worker import PnrSyncWorker


def build_job_workers() -> List[BaseJobWorker]:
    client = redis_client.get_client()
    return [EmailWorker(client=client), PnrSyncWorker(client=client)]


def build_hold_expiry_job() -> HoldExpiryJob:
    return HoldExpiryJob(
        use_case_factory=lambda: ExpireStaleHoldsUseCase(uow=container.unit_of_work())
    )


async def run_job_workers(*, queue_workers: bool = True) -> None:
    """Run every worker until cancelled; the expiry sweep does not need Redis."""
    workers = build_job_workers() if queue_workers else []
    expiry_job = build_hold_expiry_job()
    try:
        async with anyio.create_task_group() as tg:
            for worker in workers:
                tg.start_soon(worker.run)
            tg.start_soon(expiry_job.run)
            Logger.base.info(f'👷 [Jobs] {len(workers)} queue workers and hold expiry started')
    finally:
        for worker in workers:
            worker.stop()
        expiry_job.stop()


async def _main() -> None:
    tracing = TracingConfig(service_name='group-ticketing-worker')
    tracing.setup()
    tracing.instrument_sqlalchemy(engine=get_engine())
    tracing.instrument_redis()
    await redis_client.initialize()
    try:
        await run_job_workers()
    finally:
        await redis_client.disconnect()
        await dispose_engine()
        tracing.shutdown()


def main() -> None:
    Logger.base.info('🚀 [Standalone Job Workers] Starting...')
    anyio.run(_main)


if __name__ == '__main__':
    main()
