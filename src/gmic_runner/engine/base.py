"""Engine protocol and registry."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Protocol

from gmic_runner.exceptions import ArgumentError
from gmic_runner.images import InputImage, OutputImage
from gmic_runner.utils.cancellation import CancellationToken


class ProcessingEngine(Protocol):
    """Runs a command script over zero or more images.

    Implementations poll ``cancellation`` at their own checkpoints and
    raise ``OperationCancelledError`` to acknowledge it. Any other
    exception is treated as a fault.
    """

    name: str

    def run(
        self,
        command: str,
        images: Sequence[InputImage],
        cancellation: CancellationToken,
    ) -> list[OutputImage]:
        ...


class EngineRegistry:
    """Engines available to a run, keyed by name."""

    def __init__(self, engines: Iterable[ProcessingEngine]) -> None:
        self._engines = {engine.name: engine for engine in engines}

    def get(self, name: str) -> ProcessingEngine:
        """Return the engine registered as ``name``, or raise ``ArgumentError``."""
        try:
            return self._engines[name]
        except KeyError:
            raise ArgumentError(
                f"Unknown engine '{name}', expected one of: {', '.join(self.list())}"
            ) from None

    def list(self) -> list[str]:
        """Names of the registered engines, sorted."""
        return sorted(self._engines.keys())
