"""
JWT issuing and decoding

The token carries everything a request needs to authorize itself
(user id, agency id, username, role); no DB query per request.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional
from uuid import UUID

import jwt

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import AuthenticationError
from src.service.group_ticketing.domain.entity.user_entity import User
from src.service.group_ticketing.domain.enum.user_role import UserRole
from src.service.group_ticketing.domain.value_object.caller_identity import CallerIdentity


class JwtAuth:
    def __init__(
        self,
        *,
        secret: Optional[str] = None,
        algorithm: Optional[str] = None,
        expire_minutes: Optional[int] = None,
    ) -> None:
        self.secret = secret or settings.SECRET_KEY.get_secret_value()
        self.algorithm = algorithm or settings.ALGORITHM
        self.expire_minutes = expire_minutes or settings.ACCESS_TOKEN_EXPIRE_MINUTES

    @property
    def max_age_seconds(self) -> int:
        return self.expire_minutes * 60

    def create_jwt_token(self, user: User) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            'sub': str(user.id),
            'exp': now + timedelta(minutes=self.expire_minutes),
            'iat': now,
            'user_id': str(user.id),
            'agency_id': str(user.agency_id),
            'username': user.username,
            'role': str(user.role),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_jwt_token(self, token: str) -> Dict[str, Any]:
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except jwt.ExpiredSignatureError as e:
            raise AuthenticationError('Token expired') from e
        except jwt.PyJWTError as e:
            raise AuthenticationError('Invalid token') from e

    def get_identity_from_jwt(self, token: Optional[str]) -> CallerIdentity:
        if not token:
            raise AuthenticationError('Not authenticated')

        payload = self.decode_jwt_token(token)
        try:
            return CallerIdentity(
                user_id=UUID(payload['user_id']),
                agency_id=UUID(payload['agency_id']),
                username=payload['username'],
                role=UserRole(payload['role']),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise AuthenticationError('Invalid token') from e
