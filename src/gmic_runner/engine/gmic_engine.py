"""
G'MIC Engine

Runs command scripts through the ``gmic`` Python binding.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import numpy as np

from gmic_runner.exceptions import (
    EngineFault,
    OperationCancelledError,
    UnsupportedOperationError,
)
from gmic_runner.images import InputImage, OutputImage, array_to_image
from gmic_runner.utils.cancellation import CancellationToken

logger = logging.getLogger(__name__)


def _import_gmic() -> Any:
    """
    Import the G'MIC binding on first use.

    Returns:
        The ``gmic`` module.

    Raises:
        UnsupportedOperationError: If the binding is not installed.
    """
    try:
        import gmic
    except ImportError as exc:
        raise UnsupportedOperationError(
            "The G'MIC binding is not installed (pip install 'gmic-runner[gmic]')"
        ) from exc
    return gmic


class GmicEngine:
    """
    Engine backed by the G'MIC interpreter.

    The binding offers no abort hook, so cancellation is observed before
    the interpreter starts and again once it returns; a run cancelled in
    between discards its results.
    """

    name = "gmic"

    def __init__(self) -> None:
        self._gmic: Any = None

    def _binding(self) -> Any:
        if self._gmic is None:
            self._gmic = _import_gmic()
        return self._gmic

    def run(
        self,
        command: str,
        images: Sequence[InputImage],
        cancellation: CancellationToken,
    ) -> list[OutputImage]:
        """
        Run ``command`` over ``images``.

        Args:
            command: G'MIC command script.
            images: Input images, in order.
            cancellation: Token checked before and after the interpreter call.

        Returns:
            The image list left by the script, in order, with G'MIC's names.

        Raises:
            OperationCancelledError: If cancellation was requested.
            EngineFault: If the interpreter rejects the script.
            UnsupportedOperationError: If the binding is missing or a result
                has an unsupported channel count.
        """
        gmic = self._binding()

        if cancellation.is_cancelled():
            raise OperationCancelledError("Cancelled before G'MIC started")

        gmic_images = [gmic.GmicImage.from_PIL(_to_rgb_or_rgba(image.image)) for image in images]
        names = [image.name or "" for image in images]

        logger.debug("Running G'MIC with %s input image(s): %s", len(gmic_images), command)
        try:
            gmic.run(command, gmic_images, names)
        except gmic.GmicException as exc:
            raise EngineFault("G'MIC reported an error") from exc

        if cancellation.is_cancelled():
            raise OperationCancelledError("Cancelled while G'MIC was running")

        results = [
            OutputImage(image=array_to_image(_to_array(gmic_image)), name=name or None)
            for gmic_image, name in zip(gmic_images, _pad_names(names, len(gmic_images)))
        ]
        logger.info("G'MIC produced %s image(s)", len(results))
        return results


def _to_rgb_or_rgba(image: Any) -> Any:
    if image.mode in ("RGB", "RGBA"):
        return image
    has_alpha = "A" in image.getbands() or "transparency" in image.info
    return image.convert("RGBA" if has_alpha else "RGB")


def _to_array(gmic_image: Any) -> np.ndarray:
    # (x, y, z, c) float32 -> (h, w, c) for the first depth slice.
    array = gmic_image.to_numpy_helper(interleave=True, permute="yxzc")
    return np.asarray(array)[:, :, 0, :]


def _pad_names(names: list[str], count: int) -> list[str]:
    return names + [""] * (count - len(names))
