from fastapi import status
from libs.result import Error


class ClientError(Exception):
    def __init__(self, base_error: Error, status_code: int = status.HTTP_400_BAD_REQUEST):
        self.base_error = base_error
        self.status_code = status_code
        super().__init__(base_error.message)


class ServerError(Exception):
    def __init__(self, base_error: Error):
        self.base_error = base_error
        super().__init__(base_error.message)


ERROR_STATUS = {
    # Unauthorized: never says which check failed
    "UNAUTHORIZED": status.HTTP_401_UNAUTHORIZED,
    "INVALID_CREDENTIALS": status.HTTP_401_UNAUTHORIZED,
    "INVALID_TOKEN": status.HTTP_401_UNAUTHORIZED,
    # Forbidden: valid principal without live role/state
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "ROLE_NOT_ACTIVE": status.HTTP_403_FORBIDDEN,
    "INVALID_CURRENT_PASSWORD": status.HTTP_403_FORBIDDEN,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "EMAIL_ALREADY_EXISTS": status.HTTP_409_CONFLICT,
    "INVALID_PASSWORD": status.HTTP_400_BAD_REQUEST,
    "INVALID_RESET_TOKEN": status.HTTP_400_BAD_REQUEST,
    "INVALID_VERIFICATION_TOKEN": status.HTTP_400_BAD_REQUEST,
    "VALIDATION_ERROR": status.HTTP_400_BAD_REQUEST,
}


def to_http_error(error: Error) -> Exception:
    """ClientError for known codes, ServerError for anything else"""
    status_code = ERROR_STATUS.get(error.code)
    if status_code is None:
        return ServerError(error)
    return ClientError(error, status_code=status_code)
