import asyncio
import io
from typing import Any, BinaryIO

import httpx
import structlog

from ..config.settings import HttpClientSettings, get_settings
from ..logging.setup import get_correlation_id, get_logger, get_trace_id, setup_logging_from_settings
from .cancellation import CancellationToken
from .errors import OperationCancelledError, RequestError
from .ports import AsyncHttpClientPort


class AsyncHttpClient(AsyncHttpClientPort):
    """HTTP client that maps httpx failures to RequestError and honours cancellation tokens"""

    def __init__(
        self,
        logger=None,
        transport: httpx.AsyncBaseTransport | None = None,
        timeout: float | httpx.Timeout = 100.0,
        default_headers: dict[str, str] | None = None,
    ):
        self.logger = logger if logger is not None else structlog.get_logger(__name__)
        self._client = httpx.AsyncClient(
            transport=transport,
            timeout=timeout,
            headers=default_headers or {},
        )
        self._closed = False

    @property
    def is_closed(self) -> bool:
        return self._closed

    async def get(self, url: str, cancellation_token: CancellationToken | None = None) -> BinaryIO:
        """Make GET request and return the response body as a stream"""
        self._throw_if_cancelled(cancellation_token)

        self.logger.info("Sending HTTP request", method="GET", url=url)

        response = await self._send("GET", url, cancellation_token)
        return io.BytesIO(response.content)

    async def post(
        self,
        url: str,
        content_type: str,
        post_content: str,
        cancellation_token: CancellationToken | None = None,
    ) -> BinaryIO:
        """Make POST request with a UTF-8 text body and return the response body as a stream"""
        self._throw_if_cancelled(cancellation_token)

        self.logger.info("Sending HTTP request", method="POST", url=url)

        response = await self._send(
            "POST",
            url,
            cancellation_token,
            content=post_content.encode("utf-8"),
            headers={"Content-Type": f"{content_type}; charset=utf-8"},
        )
        return io.BytesIO(response.content)

    async def delete(self, url: str, cancellation_token: CancellationToken | None = None) -> None:
        """Make DELETE request, releasing the response whatever the outcome"""
        self._throw_if_cancelled(cancellation_token)

        self.logger.debug("Sending HTTP request", method="DELETE", url=url)

        response = await self._send("DELETE", url, cancellation_token, stream=True)
        await response.aclose()

    def set_authorization_header(self, scheme: str, parameter: str) -> None:
        """Set the authorization header supplied on every subsequent request"""
        if not scheme:
            raise ValueError("Authorization scheme must not be empty")

        self._client.headers["Authorization"] = f"{scheme} {parameter}" if parameter else scheme

    def remove_authorization_header(self) -> None:
        self._client.headers.pop("Authorization", None)

    async def close(self) -> None:
        """Close the underlying HTTP client"""
        if self._closed:
            return

        self._closed = True
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHttpClient":
        return self

    async def __aexit__(self, exc_type, exc_value, traceback) -> None:
        await self.close()

    async def _send(
        self,
        method: str,
        url: str,
        cancellation_token: CancellationToken | None,
        stream: bool = False,
        headers: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> httpx.Response:
        """Send a request and map failures onto the adapter's error types"""
        try:
            request = self._client.build_request(
                method,
                url,
                headers={**self._context_headers(), **(headers or {})},
                **kwargs,
            )
            response = await self._send_with_cancellation(request, cancellation_token, stream)

            try:
                self._ensure_success_status_code(response)
            except RequestError:
                await response.aclose()
                raise

            return response

        except RequestError:
            raise

        except (httpx.TimeoutException, OperationCancelledError) as e:
            error = self._get_cancellation_exception(url, cancellation_token, e)
            if error is e:
                raise
            raise error from e

        except httpx.RequestError as e:
            self.logger.error("Error getting response", method=method, url=url, error=str(e), exc_info=True)
            raise RequestError(str(e)) from e

        except Exception as e:
            self.logger.error("Error requesting", method=method, url=url, error=str(e), exc_info=True)
            raise

    async def _send_with_cancellation(
        self,
        request: httpx.Request,
        cancellation_token: CancellationToken | None,
        stream: bool,
    ) -> httpx.Response:
        """Race the send against the caller's token; the first to finish wins"""
        if cancellation_token is None:
            return await self._client.send(request, stream=stream)

        send_task = asyncio.ensure_future(self._client.send(request, stream=stream))
        cancel_task = asyncio.ensure_future(cancellation_token.wait())

        try:
            await asyncio.wait({send_task, cancel_task}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            cancel_task.cancel()
            if not send_task.done():
                send_task.cancel()
            # both tasks settle before returning so the token callback is gone
            await asyncio.wait({send_task, cancel_task})

        if send_task.cancelled():
            raise OperationCancelledError()

        return send_task.result()

    def _get_cancellation_exception(
        self,
        url: str,
        cancellation_token: CancellationToken | None,
        exception: Exception,
    ) -> Exception:
        """
        Decide how an aborted request is reported

        When the caller's token was requested the abort is a plain
        cancellation. Otherwise the transport timeout fired and the abort is
        reported as a timed out RequestError.
        """
        if cancellation_token is not None and cancellation_token.is_cancellation_requested:
            if isinstance(exception, OperationCancelledError):
                return exception
            return OperationCancelledError()

        message = f"Connection to {url} timed out"
        self.logger.error(message, url=url)

        return RequestError(message, is_timed_out=True)

    def _ensure_success_status_code(self, response: httpx.Response) -> None:
        if not response.is_success:
            raise RequestError(response.reason_phrase, status_code=response.status_code)

    @staticmethod
    def _throw_if_cancelled(cancellation_token: CancellationToken | None) -> None:
        if cancellation_token is not None:
            cancellation_token.throw_if_cancellation_requested()

    @staticmethod
    def _context_headers() -> dict[str, str]:
        """Correlation and trace headers from the logging context"""
        headers = {}

        correlation_id = get_correlation_id()
        if correlation_id:
            headers["X-Correlation-ID"] = correlation_id

        trace_id = get_trace_id()
        if trace_id:
            headers["X-Trace-ID"] = trace_id

        return headers


def create_http_client(
    settings: HttpClientSettings | None = None,
    logger=None,
    transport: httpx.AsyncBaseTransport | None = None,
    configure_logging: bool = False,
) -> AsyncHttpClient:
    """
    Factory function to create an HTTP client from settings

    With configure_logging, structlog is set up from the settings' service
    name, log level and log format first. Without an explicit logger the
    client logs through a logger bound to the service name.
    """
    settings = settings or get_settings()

    if configure_logging:
        setup_logging_from_settings(settings)

    if logger is None:
        logger = get_logger(__name__).bind(service=settings.service_name)

    if settings.connect_timeout is not None:
        timeout = httpx.Timeout(settings.timeout, connect=settings.connect_timeout)
    else:
        timeout = httpx.Timeout(settings.timeout)

    default_headers = {}
    if settings.user_agent:
        default_headers["User-Agent"] = settings.user_agent

    return AsyncHttpClient(
        logger=logger,
        transport=transport,
        timeout=timeout,
        default_headers=default_headers,
    )
