"""
Group Ticketing Service - Main Application
Agencies, users, flight groups, seat inventory and background jobs.

    uv run uvicorn src.service.group_ticketing.main:app --reload
"""

from contextlib import asynccontextmanager
import functools

import anyio
from fastapi import FastAPI
from redis.exceptions import RedisError

from src.platform.app_factory import create_app
from src.platform.config.core_setting import settings
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.db_setting import dispose_engine, get_engine
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig
from src.platform.state.redis_client import redis_client
from src.service.group_ticketing.driving_adapter.job_worker.start_job_workers import (
    run_job_workers,
)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Manage application lifespan: startup and shutdown"""
    Logger.base.info('🚀 [Group Ticketing] Starting up...')

    tracing = TracingConfig(service_name=settings.SERVICE_NAME)
    tracing.setup()
    tracing.instrument_sqlalchemy(engine=get_engine())
    tracing.instrument_redis()
    Logger.base.info('📊 [Group Ticketing] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Group Ticketing] Dependency injection wired')

    # Jobs are enqueued best effort; the API keeps serving without Redis
    try:
        await redis_client.initialize()
    except (RedisError, OSError) as e:
        Logger.base.warning(
            f'⚠️  [Group Ticketing] Redis unavailable at startup: {e}'
            '\n   Continuing without job queues'
        )

    async with anyio.create_task_group() as tg:
        if settings.ENABLE_BACKGROUND_JOBS:
            tg.start_soon(
                functools.partial(run_job_workers, queue_workers=redis_client.is_initialized)
            )
            Logger.base.info('👷 [Group Ticketing] Background jobs started')
        else:
            Logger.base.info('⏭️  [Group Ticketing] Background jobs disabled')

        yield

        Logger.base.info('🛑 [Group Ticketing] Shutting down...')
        tg.cancel_scope.cancel()

    await redis_client.disconnect()
    await dispose_engine()
    container.unwire()
    tracing.shutdown()
    Logger.base.info('👋 [Group Ticketing] Shutdown complete')


app = create_app(lifespan=lifespan)
