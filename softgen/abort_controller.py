"""Abort controller for cancelling in-flight LLM requests."""

import signal
import threading
from contextlib import contextmanager
from typing import Callable, Iterator

from .errors import TransportError


class AbortController:
    """Cancellation signal shared between a caller and one request.

    Usage:
        controller = AbortController()

        # In another thread or a signal handler:
        controller.abort()

        # In the request loop:
        controller.check()  # Raises TransportError if aborted

    Listeners registered with `on_abort` run once, on the thread that
    calls `abort()`. Requests use them to close their open response so a
    blocked read returns immediately.
    """

    def __init__(self):
        self._aborted = False
        self._lock = threading.Lock()
        self._listeners: list[Callable[[], None]] = []

    @property
    def is_aborted(self) -> bool:
        """Check if abort was requested."""
        with self._lock:
            return self._aborted

    def abort(self) -> None:
        """Request abortion of the current operation."""
        with self._lock:
            if self._aborted:
                return
            self._aborted = True
            listeners = list(self._listeners)
        for listener in listeners:
            listener()

    def on_abort(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it.

        If the controller is already aborted the listener runs immediately.
        """
        with self._lock:
            fire_now = self._aborted
            if not fire_now:
                self._listeners.append(listener)
        if fire_now:
            listener()

        def remove() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return remove

    def reset(self) -> None:
        """Reset abort state for a new operation."""
        with self._lock:
            self._aborted = False
            self._listeners.clear()

    def check(self) -> None:
        """Raise if aborted.

        Raises:
            TransportError: with `cancelled=True` if abort was requested
        """
        if self.is_aborted:
            raise TransportError("request cancelled", cancelled=True)


@contextmanager
def abort_on_sigint(controller: AbortController) -> Iterator[AbortController]:
    """Route Ctrl-C to `controller.abort()` while the block runs.

    Only the main thread can install signal handlers; elsewhere the
    controller is yielded unchanged.
    """
    if threading.current_thread() is not threading.main_thread():
        yield controller
        return

    previous = signal.getsignal(signal.SIGINT)
    signal.signal(signal.SIGINT, lambda signum, frame: controller.abort())
    try:
        yield controller
    finally:
        signal.signal(signal.SIGINT, previous)
