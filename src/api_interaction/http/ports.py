from abc import ABC, abstractmethod
from typing import BinaryIO

from .cancellation import CancellationToken


class AsyncHttpClientPort(ABC):
    """Port for issuing HTTP requests against a remote API"""

    @abstractmethod
    async def get(self, url: str, cancellation_token: CancellationToken | None = None) -> BinaryIO:
        """Send a GET request and return the response body"""
        pass

    @abstractmethod
    async def post(
        self,
        url: str,
        content_type: str,
        post_content: str,
        cancellation_token: CancellationToken | None = None,
    ) -> BinaryIO:
        """Send a POST request with a text body and return the response body"""
        pass

    @abstractmethod
    async def delete(self, url: str, cancellation_token: CancellationToken | None = None) -> None:
        """Send a DELETE request"""
        pass

    @abstractmethod
    def set_authorization_header(self, scheme: str, parameter: str) -> None:
        """Set the authorization header supplied on every request"""
        pass

    @abstractmethod
    def remove_authorization_header(self) -> None:
        """Remove the authorization header"""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying transport"""
        pass
