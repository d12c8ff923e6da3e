from typing import Awaitable, Callable, Optional

from dependency_injector.wiring import Provide, inject
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from opentelemetry import trace

from src.platform.config.core_setting import settings
from src.platform.config.di import Container
from src.service.group_ticketing.domain.permission import Capability, ensure_capability
from src.service.group_ticketing.domain.value_object.caller_identity import CallerIdentity
from src.service.group_ticketing.driving_adapter.http_controller.auth.jwt_auth import JwtAuth


bearer_scheme = HTTPBearer(auto_error=False)


@inject
async def get_current_identity(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    jwt_auth: JwtAuth = Depends(Provide[Container.jwt_auth]),
) -> CallerIdentity:
    """Identity from the auth cookie, or from an `Authorization: Bearer` header."""
    token = request.cookies.get(settings.AUTH_COOKIE_NAME)
    if not token and credentials is not None:
        token = credentials.credentials
    return jwt_auth.get_identity_from_jwt(token)


def require_capability(capability: Capability) -> Callable[..., Awaitable[CallerIdentity]]:
    """Route dependency rejecting callers whose role lacks `capability`."""

    async def dependency(
        identity: CallerIdentity = Depends(get_current_identity),
    ) -> CallerIdentity:
        tracer = trace.get_tracer(__name__)
        with tracer.start_as_current_span(
            'auth.require_capability',
            attributes={
                'user.id': str(identity.user_id),
                'user.role': str(identity.role),
                'auth.capability': str(capability),
            },
        ):
            ensure_capability(identity, capability)
            return identity

    return dependency
