from dependency_injector.wiring import Provide, inject
from fastapi import APIRouter, Depends, Response, status

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.platform.logging.loguru_io import Logger
from src.service.group_ticketing.app.command.create_user_use_case import CreateUserUseCase
from src.service.group_ticketing.app.command.login_use_case import LoginUseCase
from src.service.group_ticketing.domain.permission import Capability
from src.service.group_ticketing.domain.value_object.caller_identity import CallerIdentity
from src.service.group_ticketing.driving_adapter.http_controller.auth.jwt_auth import JwtAuth
from src.service.group_ticketing.driving_adapter.http_controller.auth.role_auth import (
    get_current_identity,
    require_capability,
)
from src.service.group_ticketing.driving_adapter.http_controller.schema.user_schema import (
    CreateUserRequest,
    LoginRequest,
    LoginResponse,
    MeResponse,
    UserResponse,
)


router = APIRouter()


@router.post('/login', status_code=status.HTTP_200_OK)
@Logger.io
@inject
async def login(
    response: Response,
    request: LoginRequest,
    use_case: LoginUseCase = Depends(LoginUseCase.depends),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
) -> LoginResponse:
    user = await use_case.execute(
        agency_code=request.agency_code,
        username=request.username,
        password=request.password.get_secret_value(),
    )
    token = jwt_auth.create_jwt_token(user)

    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        max_age=jwt_auth.max_age_seconds,
        httponly=True,
        samesite='lax',
        secure=not settings.DEBUG,
    )
    return LoginResponse(access_token=token, user=UserResponse.from_entity(user))


@router.post('', status_code=status.HTTP_201_CREATED)
@Logger.io
async def create_user(
    request: CreateUserRequest,
    identity: CallerIdentity = Depends(require_capability(Capability.MANAGE_USERS)),
    use_case: CreateUserUseCase = Depends(CreateUserUseCase.depends),
) -> UserResponse:
    user = await use_case.execute(
        identity=identity,
        agency_id=request.agency_id or identity.agency_id,
        username=request.username,
        password=request.password.get_secret_value(),
        role=request.role,
        email=request.email,
        phone=request.phone,
    )
    return UserResponse.from_entity(user)


@router.get('/me', status_code=status.HTTP_200_OK)
@Logger.io
async def get_me(identity: CallerIdentity = Depends(get_current_identity)) -> MeResponse:
    """Read straight from the token, no DB query."""
    return MeResponse.from_identity(identity)
