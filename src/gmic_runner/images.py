"""
Image Handles

In-memory images exchanged with the engine, plus decoding of the input
file and PNG encoding of results.
"""

import io
import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import TracebackType

import numpy as np
from PIL import Image, UnidentifiedImageError

from gmic_runner.exceptions import (
    DecodeError,
    ResourceExhaustionError,
    UnsupportedOperationError,
)

logger = logging.getLogger(__name__)

DEFAULT_INPUT_NAME = "Image 1"

# Channel counts Pillow maps to L, LA, RGB and RGBA.
_SUPPORTED_CHANNELS = (1, 2, 3, 4)


@dataclass
class _OwnedImage:
    """Raster owned by the pipeline until ``release`` is called."""

    image: Image.Image
    name: str | None = None
    released: bool = field(default=False, init=False)

    def release(self) -> None:
        """Close the raster. Calling it again has no effect."""
        if self.released:
            return
        self.released = True
        self.image.close()
        logger.debug("Released image %r", self.name)

    def __enter__(self) -> "_OwnedImage":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.release()


@dataclass
class InputImage(_OwnedImage):
    """Decoded input raster tagged with a display name."""

    name: str | None = DEFAULT_INPUT_NAME


@dataclass
class OutputImage(_OwnedImage):
    """Raster produced by the engine, optionally named."""


def load_input_image(path: str | Path, name: str = DEFAULT_INPUT_NAME) -> InputImage:
    """
    Decode an image file into an owned in-memory image.

    The file handle is closed before returning; only the decoded copy is
    kept.

    Args:
        path: Path to the image file.
        name: Display name passed to the engine.

    Returns:
        The decoded, named input image.

    Raises:
        FileNotFoundError: If the file does not exist.
        PermissionError: If the file cannot be read.
        DecodeError: If the file is not a recognised image format.
        ResourceExhaustionError: If the image exceeds Pillow's size limit.
    """
    path = Path(path)
    logger.debug("Loading input image %s", path)

    try:
        with Image.open(path) as source:
            source.load()
            image = source.copy()
    except UnidentifiedImageError as exc:
        raise DecodeError(f"Cannot decode image file: {path}") from exc
    except Image.DecompressionBombError as exc:
        raise ResourceExhaustionError(f"Image is too large to load: {path}") from exc

    logger.info("Loaded %s (%sx%s, %s)", path, image.width, image.height, image.mode)
    return InputImage(image=image, name=name)


def array_to_image(array: np.ndarray) -> Image.Image:
    """
    Convert an engine raster into a Pillow image.

    Args:
        array: Array of shape ``(h, w)`` or ``(h, w, c)`` with ``c`` in 1..4.
            Values are expected in the 0..255 range and are clipped and
            rounded to 8 bits.

    Returns:
        Image in ``L``, ``LA``, ``RGB`` or ``RGBA`` mode.

    Raises:
        UnsupportedOperationError: If the shape cannot be represented.
    """
    if array.ndim == 2:
        array = array[:, :, np.newaxis]
    if array.ndim != 3 or array.shape[2] not in _SUPPORTED_CHANNELS:
        raise UnsupportedOperationError(f"Unsupported image shape for PNG output: {array.shape}")

    pixels = np.clip(np.rint(array), 0, 255).astype(np.uint8)
    if pixels.shape[2] == 1:
        pixels = pixels[:, :, 0]
    return Image.fromarray(pixels)


def encode_png(image: Image.Image) -> bytes:
    """
    Encode an image as PNG.

    Args:
        image: Image to encode.

    Returns:
        PNG file contents.
    """
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()
