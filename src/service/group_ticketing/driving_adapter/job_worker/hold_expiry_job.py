from typing import Callable, Optional

import anyio

from src.platform.config.core_setting import settings
from src.platform.logging.loguru_io import Logger
from src.service.group_ticketing.app.command.expire_stale_holds_use_case import (
    ExpireStaleHoldsUseCase,
)


class HoldExpiryJob:
    """Runs the stale-hold sweep every HOLD_EXPIRY_INTERVAL_SECONDS."""

    def __init__(
        self,
        *,
        use_case_factory: Callable[[], ExpireStaleHoldsUseCase],
        interval_seconds: Optional[float] = None,
    ) -> None:
        self.use_case_factory = use_case_factory
        self.interval_seconds = (
            settings.HOLD_EXPIRY_INTERVAL_SECONDS if interval_seconds is None else interval_seconds
        )
        self.running = False

    async def run_once(self) -> int:
        return await self.use_case_factory().execute()

    async def run(self) -> None:
        self.running = True
        Logger.base.info(f'⏰ [EXPIRY] Sweeping stale holds every {self.interval_seconds}s')
        while self.running:
            try:
                await self.run_once()
            except Exception as e:
                # one failed sweep must not stop the schedule
                Logger.base.opt(exception=e).error('[EXPIRY] Sweep failed')
            await anyio.sleep(self.interval_seconds)

    def stop(self) -> None:
        self.running = False
