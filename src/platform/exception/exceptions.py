class CustomBaseError(Exception):
    """Base class for errors reported to the caller; @Logger.io logs them without traceback."""

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class ForbiddenError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 403)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class AuthenticationError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 401)


class LoginError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 400)


class CapacityExceededError(CustomBaseError):
    def __init__(self, message: str = 'Not enough seats available') -> None:
        super().__init__(message, 409)


class GroupNotOnSaleError(CustomBaseError):
    def __init__(self, message: str = 'Flight group is not on sale') -> None:
        super().__init__(message, 403)


class HoldNotFoundError(CustomBaseError):
    def __init__(self, message: str = 'Hold not found') -> None:
        super().__init__(message, 404)


class InvalidTransitionError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class LockTimeoutError(CustomBaseError):
    """Row lock contention or a transient transaction failure; the caller should retry."""

    def __init__(self, message: str = 'Inventory is busy, please retry') -> None:
        super().__init__(message, 503)
