from fastapi import status

from liturgi.libs.result import Error

STATUS_BY_CODE = {
    "UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED,
    "INVALID_CREDENTIALS": status.HTTP_401_UNAUTHORIZED,
    "TWO_FACTOR_REQUIRED": status.HTTP_401_UNAUTHORIZED,
    "INVALID_API_KEY": status.HTTP_401_UNAUTHORIZED,
    "PERMISSION_DENIED": status.HTTP_403_FORBIDDEN,
    "PLAN_LIMIT_REACHED": status.HTTP_403_FORBIDDEN,
    "ACCOUNT_INACTIVE": status.HTTP_403_FORBIDDEN,
    "VALIDATION_FAILED": status.HTTP_400_BAD_REQUEST,
    "CONFLICT": status.HTTP_400_BAD_REQUEST,
    "INVALID_INVITE": status.HTTP_400_BAD_REQUEST,
    "INVITE_EXPIRED": status.HTTP_400_BAD_REQUEST,
    "INVITE_ALREADY_USED": status.HTTP_400_BAD_REQUEST,
    "INVALID_TOKEN": status.HTTP_400_BAD_REQUEST,
    "TOKEN_EXPIRED": status.HTTP_400_BAD_REQUEST,
    "TOKEN_ALREADY_USED": status.HTTP_400_BAD_REQUEST,
    "REGISTRATION_CLOSED": status.HTTP_400_BAD_REQUEST,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "RATE_LIMITED": status.HTTP_429_TOO_MANY_REQUESTS,
}


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


def raise_for_error(error: Error):
    """Map a use case error to the exception the app handlers render"""
    status_code = STATUS_BY_CODE.get(error.code)
    if status_code is None:
        raise ServerError(error)
    raise ClientError(error, status_code=status_code)


def unwrap(result):
    """Value of an ok Result; raises the mapped error otherwise"""
    if result.is_err():
        raise_for_error(result.error)
    return result.value
