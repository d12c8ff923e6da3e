"""
Retry of transient transaction failures

Deadlocks (40P01), serialization failures (40001) and dropped connections are
retried with linear backoff; each retry re-runs the whole transaction. A lock
wait that hits `lock_timeout` (55P03) is not retried and, like an exhausted
retry budget, surfaces as LockTimeoutError.
"""

from functools import wraps
from typing import Any, Awaitable, Callable, Optional, ParamSpec, TypeVar

import anyio
from sqlalchemy.exc import DBAPIError

from src.platform.config.core_setting import settings
from src.platform.exception.exceptions import LockTimeoutError
from src.platform.logging.loguru_io import Logger


DEADLOCK_DETECTED = '40P01'
SERIALIZATION_FAILURE = '40001'
LOCK_NOT_AVAILABLE = '55P03'

RETRYABLE_SQLSTATES = frozenset({DEADLOCK_DETECTED, SERIALIZATION_FAILURE})

_P = ParamSpec('_P')
_T = TypeVar('_T')


def get_sqlstate(exc: DBAPIError) -> Optional[str]:
    orig: Any = exc.orig
    return getattr(orig, 'sqlstate', None) or getattr(orig, 'pgcode', None)


def is_transient(exc: DBAPIError) -> bool:
    return exc.connection_invalidated or get_sqlstate(exc) in RETRYABLE_SQLSTATES


async def run_with_retry(
    operation: Callable[[], Awaitable[_T]],
    *,
    attempts: Optional[int] = None,
    backoff_seconds: Optional[float] = None,
) -> _T:
    max_retries = settings.DB_RETRY_ATTEMPTS if attempts is None else attempts
    backoff = settings.DB_RETRY_BACKOFF_SECONDS if backoff_seconds is None else backoff_seconds

    retry = 0
    while True:
        try:
            return await operation()
        except DBAPIError as e:
            sqlstate = get_sqlstate(e)
            if sqlstate == LOCK_NOT_AVAILABLE:
                Logger.base.warning('⏳ [DB] Lock wait timed out')
                raise LockTimeoutError() from e
            if not is_transient(e):
                raise
            if retry >= max_retries:
                Logger.base.warning(f'⏳ [DB] Transient failure persisted after {retry} retries')
                raise LockTimeoutError() from e
            retry += 1
            Logger.base.warning(
                f'🔁 [DB] Transient failure (sqlstate={sqlstate}), retry {retry}/{max_retries}'
            )
            await anyio.sleep(backoff * retry)


def retry_transaction(func: Callable[_P, Awaitable[_T]]) -> Callable[_P, Awaitable[_T]]:
    """Decorator form of run_with_retry for use case methods owning a whole transaction."""

    @wraps(func)
    async def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _T:
        return await run_with_retry(lambda: func(*args, **kwargs))

    return wrapper
