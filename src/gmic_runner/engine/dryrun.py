"""Dry-run engine (offline).

Echoes the input images back unchanged, or renders a placeholder showing
the command when there is no input. Useful for checking a command line
and the output layout without the G'MIC binding installed.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from PIL import Image, ImageDraw, ImageFont

from gmic_runner.exceptions import OperationCancelledError
from gmic_runner.images import InputImage, OutputImage
from gmic_runner.utils.cancellation import CancellationToken

logger = logging.getLogger(__name__)

PLACEHOLDER_SIZE = (512, 256)


class DryRunEngine:
    name = "dryrun"

    def run(
        self,
        command: str,
        images: Sequence[InputImage],
        cancellation: CancellationToken,
    ) -> list[OutputImage]:
        logger.info("Dry run: %s", command)
        if not images:
            _check_cancelled(cancellation)
            return [OutputImage(image=_render_placeholder(command))]

        results: list[OutputImage] = []
        for image in images:
            _check_cancelled(cancellation)
            results.append(OutputImage(image=image.image.copy(), name=image.name))
        return results


def _check_cancelled(cancellation: CancellationToken) -> None:
    if cancellation.is_cancelled():
        raise OperationCancelledError("Dry run cancelled")


def _render_placeholder(command: str) -> Image.Image:
    image = Image.new("RGB", PLACEHOLDER_SIZE, (32, 32, 32))
    draw = ImageDraw.Draw(image)
    draw.text((16, 16), f"dryrun\n{command[:60]}", fill=(255, 255, 255), font=ImageFont.load_default())
    return image
