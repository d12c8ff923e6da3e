from uuid import UUID

from fastapi import APIRouter, Depends, status

from src.platform.logging.loguru_io import Logger
from src.service.group_ticketing.app.command.confirm_hold_use_case import ConfirmHoldUseCase
from src.service.group_ticketing.app.command.expire_stale_holds_use_case import (
    ExpireStaleHoldsUseCase,
)
from src.service.group_ticketing.app.command.release_hold_use_case import ReleaseHoldUseCase
from src.service.group_ticketing.domain.permission import Capability
from src.service.group_ticketing.domain.value_object.caller_identity import CallerIdentity
from src.service.group_ticketing.driving_adapter.http_controller.auth.role_auth import (
    require_capability,
)
from src.service.group_ticketing.driving_adapter.http_controller.schema.hold_schema import (
    ExpireHoldsResponse,
    HoldResponse,
)


router = APIRouter()


@router.post('/expire', status_code=status.HTTP_200_OK)
@Logger.io
async def expire_stale_holds(
    identity: CallerIdentity = Depends(require_capability(Capability.EXPIRE_HOLDS)),
    use_case: ExpireStaleHoldsUseCase = Depends(ExpireStaleHoldsUseCase.depends),
) -> ExpireHoldsResponse:
    return ExpireHoldsResponse(expired=await use_case.execute())


@router.post('/{hold_id}/confirm', status_code=status.HTTP_200_OK)
@Logger.io
async def confirm_hold(
    hold_id: UUID,
    identity: CallerIdentity = Depends(require_capability(Capability.CONFIRM_HOLD)),
    use_case: ConfirmHoldUseCase = Depends(ConfirmHoldUseCase.depends),
) -> HoldResponse:
    hold = await use_case.execute(identity=identity, hold_id=hold_id)
    return HoldResponse.from_entity(hold)


@router.post('/{hold_id}/release', status_code=status.HTTP_200_OK)
@Logger.io
async def release_hold(
    hold_id: UUID,
    identity: CallerIdentity = Depends(require_capability(Capability.RELEASE_HOLD)),
    use_case: ReleaseHoldUseCase = Depends(ReleaseHoldUseCase.depends),
) -> HoldResponse:
    hold = await use_case.execute(identity=identity, hold_id=hold_id)
    return HoldResponse.from_entity(hold)
