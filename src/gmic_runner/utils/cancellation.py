"""
Cooperative Cancellation

A one-shot cancellation token shared with the engine and a bridge that
turns SIGINT into a cancellation request instead of a KeyboardInterrupt.
"""

import logging
import signal
import threading
from collections.abc import Iterable
from types import FrameType, TracebackType
from typing import Any

logger = logging.getLogger(__name__)


class CancellationToken:
    """
    Thread-safe, one-shot cancellation flag.

    The flag moves from "not requested" to "requested" once and never
    back. It is safe to set from a signal handler while a worker thread
    reads it.

    Attributes:
        _flag: Event backing the cancellation state.
    """

    def __init__(self) -> None:
        self._flag: threading.Event = threading.Event()
        self._lock = threading.RLock()

    def cancel(self) -> bool:
        """
        Request cancellation.

        Returns:
            True if this call issued the request, False if cancellation had
            already been requested.
        """
        with self._lock:
            if self._flag.is_set():
                return False
            self._flag.set()
        logger.debug("Cancellation requested")
        return True

    def is_cancelled(self) -> bool:
        """
        Check if cancellation has been requested.

        Returns:
            True if cancellation requested, False otherwise.
        """
        return self._flag.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """
        Block until cancellation is requested or the timeout expires.

        Args:
            timeout: Seconds to wait, or None to wait indefinitely.

        Returns:
            True if cancellation has been requested.
        """
        return self._flag.wait(timeout)


class CancellationBridge:
    """
    Map interrupt signals onto a cancellation token for one run.

    While the bridge is active the first interrupt cancels the token and
    later interrupts are ignored; in both cases the process keeps running
    so the engine can wind down. Original handlers are restored on exit.

    Args:
        token: Token to cancel when an interrupt arrives.
        signals: Signal numbers to intercept. Defaults to SIGINT.
    """

    def __init__(
        self,
        token: CancellationToken,
        signals: Iterable[int] = (signal.SIGINT,),
    ) -> None:
        self.token = token
        self.signals: tuple[int, ...] = tuple(signals)
        self._original_handlers: dict[int, Any] = {}

    def setup_signal_handler(self) -> None:
        """Register the handler for every configured signal."""
        if threading.current_thread() is not threading.main_thread():
            # signal.signal() only works from the main thread.
            logger.debug("Not on the main thread, signal handler not installed")
            return

        for signum in self.signals:
            self._original_handlers[signum] = signal.signal(signum, self._signal_handler)
        logger.debug("Signal handler registered")

    def _signal_handler(self, signum: int, _frame: FrameType | None) -> None:
        """Cancel the token instead of raising KeyboardInterrupt."""
        if self.token.cancel():
            logger.warning(
                "Interrupted (%s), waiting for G'MIC to stop",
                signal.Signals(signum).name,
            )
        else:
            logger.debug("Cancellation already pending, ignoring signal %s", signum)

    def cleanup(self) -> None:
        """Restore the original signal handlers."""
        for signum, handler in self._original_handlers.items():
            signal.signal(signum, handler)
        if self._original_handlers:
            logger.debug("Signal handler restored")
        self._original_handlers.clear()

    def __enter__(self) -> "CancellationBridge":
        self.setup_signal_handler()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.cleanup()
