from enum import Enum


class RequestErrorKind(Enum):
    """Failure categories reported through RequestError"""

    TRANSPORT_FAILURE = "HTTP_001"
    NON_SUCCESS_STATUS = "HTTP_002"
    TIMEOUT = "HTTP_003"


class HttpAdapterError(Exception):
    """Base exception for the HTTP adapter"""

    pass


class RequestError(HttpAdapterError):
    """Raised when a request fails for any reason other than caller cancellation"""

    def __init__(self, message: str, status_code: int | None = None, is_timed_out: bool = False):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.is_timed_out = is_timed_out

    @property
    def kind(self) -> RequestErrorKind:
        if self.is_timed_out:
            return RequestErrorKind.TIMEOUT
        if self.status_code is not None:
            return RequestErrorKind.NON_SUCCESS_STATUS
        return RequestErrorKind.TRANSPORT_FAILURE

    def __str__(self) -> str:
        if self.status_code is not None:
            return f"[{self.status_code}] {self.message}"
        return self.message


class OperationCancelledError(HttpAdapterError):
    """Raised when the caller's cancellation token was requested"""

    def __init__(self, message: str = "The operation was cancelled"):
        super().__init__(message)
        self.message = message
