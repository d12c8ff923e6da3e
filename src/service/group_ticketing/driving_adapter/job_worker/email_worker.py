from typing import Any, Dict

from src.platform.logging.loguru_io import Logger
from src.platform.message_queue.base_job_worker import BaseJobWorker, JobHandler
from src.platform.message_queue.job_constant import JobQueues, JobTypes


class EmailWorker(BaseJobWorker):
    """Notification mails; delivery is not wired up yet, jobs are only logged."""

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(queue=JobQueues.EMAIL, **kwargs)

    def _get_job_handlers(self) -> Dict[str, JobHandler]:
        return {
            JobTypes.HOLD_CONFIRMED: self._handle_hold_confirmed,
            JobTypes.GROUP_CANCELLED: self._handle_group_cancelled,
        }

    async def _handle_hold_confirmed(self, payload: Dict[str, Any]) -> None:
        Logger.base.info(
            f'📧 [EMAIL] Seats issued: {payload.get("quantity")} {payload.get("pax_type")} on '
            f'{payload.get("flight")} {payload.get("origin")}-{payload.get("destination")} '
            f'(hold {payload.get("hold_id")}, {payload.get("total_price")} {payload.get("currency")})'
        )

    async def _handle_group_cancelled(self, payload: Dict[str, Any]) -> None:
        Logger.base.info(
            f'📧 [EMAIL] Flight group {payload.get("flight")} cancelled, '
            f'{payload.get("released_holds")} holds released'
        )
