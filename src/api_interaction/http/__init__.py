"""HTTP client adapter with error mapping and cooperative cancellation."""

from .cancellation import CancellationToken
from .client import AsyncHttpClient, create_http_client
from .errors import HttpAdapterError, OperationCancelledError, RequestError, RequestErrorKind
from .ports import AsyncHttpClientPort

__all__ = [
    "AsyncHttpClient",
    "AsyncHttpClientPort",
    "CancellationToken",
    "HttpAdapterError",
    "OperationCancelledError",
    "RequestError",
    "RequestErrorKind",
    "create_http_client",
]
