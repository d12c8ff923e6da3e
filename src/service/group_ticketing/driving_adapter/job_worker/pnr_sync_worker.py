from typing import Any, Dict

from src.platform.logging.loguru_io import Logger
from src.platform.message_queue.base_job_worker import BaseJobWorker, JobHandler
from src.platform.message_queue.job_constant import JobQueues, JobTypes


class PnrSyncWorker(BaseJobWorker):
    """Pushes issued seats to the airline reservation system; placeholder that only logs."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(queue=JobQueues.PNR_SYNC, **kwargs)

    def _get_job_handlers(self) -> Dict[str, JobHandler]:
        return {JobTypes.HOLD_CONFIRMED: self._handle_hold_confirmed}

    async def _handle_hold_confirmed(self, payload: Dict[str, Any]) -> None:
        if not payload.get('hold_id'):
            raise ValueError('hold_confirmed job without hold_id')
        Logger.base.info(
            f'🛫 [PNR_SYNC] {payload.get("pnr_mode")} sync for hold {payload["hold_id"]}: '
            f'{payload.get("quantity")} {payload.get("pax_type")} on {payload.get("flight")}'
        )
