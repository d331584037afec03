"""
Processing Invoker

Dispatches the single engine call of a run and reduces whatever happens
to one of three outcomes: succeeded, faulted or cancelled.
"""

import logging
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import TypeAlias

from gmic_runner.engine.base import ProcessingEngine
from gmic_runner.exceptions import OperationCancelledError
from gmic_runner.images import InputImage, OutputImage
from gmic_runner.utils.cancellation import CancellationToken

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Succeeded:
    """The engine finished and returned its images (possibly none)."""

    images: list[OutputImage] = field(default_factory=list)


@dataclass(slots=True)
class Faulted:
    """The engine failed; ``error`` is the root cause."""

    error: BaseException

    @property
    def message(self) -> str:
        """Text shown to the user, the type name when the error has no message."""
        return str(self.error) or type(self.error).__name__


@dataclass(slots=True)
class Cancelled:
    """The engine acknowledged a cancellation request."""


ExecutionOutcome: TypeAlias = Succeeded | Faulted | Cancelled


def root_cause(exc: BaseException) -> BaseException:
    """
    Find the exception meant for display.

    Exception groups are unwrapped to their first member and explicit
    ``raise ... from`` chains are followed to the innermost exception.

    Args:
        exc: Exception raised by the engine call.

    Returns:
        The innermost exception.
    """
    seen: set[int] = set()
    while id(exc) not in seen:
        seen.add(id(exc))
        if isinstance(exc, BaseExceptionGroup) and exc.exceptions:
            exc = exc.exceptions[0]
        elif exc.__cause__ is not None:
            exc = exc.__cause__
        else:
            break
    return exc


class ProcessingInvoker:
    """
    Run one engine call on a worker thread and wait for its outcome.

    The calling thread waits in short slices so that signal handlers
    (which Python runs on the main thread) get a chance to cancel the
    token while the engine is busy. The call is never abandoned: after
    cancellation the invoker keeps waiting until the engine returns.

    Args:
        engine: Engine to invoke.
        poll_interval: Seconds between checks while waiting.
    """

    def __init__(self, engine: ProcessingEngine, poll_interval: float = 0.1) -> None:
        self.engine = engine
        self.poll_interval = poll_interval

    def run(
        self,
        command: str,
        images: Sequence[InputImage],
        cancellation: CancellationToken,
    ) -> ExecutionOutcome:
        """
        Invoke the engine once.

        Args:
            command: Command script.
            images: Input images, possibly empty.
            cancellation: Token the engine polls.

        Returns:
            Exactly one of ``Succeeded``, ``Faulted`` or ``Cancelled``.
        """
        logger.info("Running %s engine", self.engine.name)

        with ThreadPoolExecutor(max_workers=1, thread_name_prefix="gmic-runner") as executor:
            future = executor.submit(self.engine.run, command, list(images), cancellation)

            while not future.done():
                wait([future], timeout=self.poll_interval)

            try:
                images_out = future.result() or []
            except OperationCancelledError:
                logger.info("Engine acknowledged cancellation")
                return Cancelled()
            except Exception as exc:  # noqa: BLE001
                cause = root_cause(exc)
                logger.debug("Engine call failed", exc_info=exc)
                if isinstance(cause, OperationCancelledError):
                    return Cancelled()
                return Faulted(error=cause)

        logger.info("Engine returned %s image(s)", len(images_out))
        return Succeeded(images=list(images_out))
