import asyncio
import threading
from collections.abc import Callable

from .errors import OperationCancelledError


class CancellationToken:
    """Cooperative cancellation signal shared between a caller and in-flight requests"""

    def __init__(self):
        self._lock = threading.Lock()
        self._cancelled = False
        self._callbacks: list[Callable[[], None]] = []
        self._timer: threading.Timer | None = None

    @property
    def is_cancellation_requested(self) -> bool:
        with self._lock:
            return self._cancelled

    def cancel(self) -> None:
        """Request cancellation; callbacks run once, on the calling thread"""
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            callbacks, self._callbacks = self._callbacks, []
            if self._timer is not None:
                self._timer.cancel()

        for callback in callbacks:
            callback()

    def cancel_after(self, delay: float) -> None:
        """Schedule cancellation after delay seconds"""
        with self._lock:
            if self._cancelled:
                return
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(delay, self.cancel)
            self._timer.daemon = True
            self._timer.start()

    def register(self, callback: Callable[[], None]) -> Callable[[], None]:
        """
        Run callback when cancellation is requested

        Returns a function that removes the registration. If the token is
        already cancelled the callback runs immediately.
        """
        with self._lock:
            if not self._cancelled:
                self._callbacks.append(callback)
                return lambda: self._unregister(callback)

        callback()
        return lambda: None

    def _unregister(self, callback: Callable[[], None]) -> None:
        with self._lock:
            try:
                self._callbacks.remove(callback)
            except ValueError:
                pass

    def throw_if_cancellation_requested(self) -> None:
        if self.is_cancellation_requested:
            raise OperationCancelledError()

    async def wait(self) -> None:
        """Suspend until cancellation is requested"""
        loop = asyncio.get_running_loop()
        waiter = loop.create_future()

        def resolve():
            if not waiter.done():
                waiter.set_result(None)

        unregister = self.register(lambda: loop.call_soon_threadsafe(resolve))
        try:
            await waiter
        finally:
            unregister()
