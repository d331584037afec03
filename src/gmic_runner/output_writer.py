"""
Output Writer

Saves result images as PNG files named after the image, or after its
position when the image has no name.
"""

import logging
import os
import sys
import tempfile
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console

from gmic_runner.images import OutputImage, encode_png
from gmic_runner.utils.console import print_line

logger = logging.getLogger(__name__)


def program_directory() -> Path:
    """Directory containing the running program."""
    return Path(sys.argv[0]).resolve().parent


def output_file_name(image: OutputImage, index: int) -> str:
    """
    File name for a result image.

    Args:
        image: Result image.
        index: Zero-based position of the image in the result list.

    Returns:
        ``<name>.png`` when the image has a non-blank name, else ``<index>.png``.
    """
    if image.name is None or not image.name.strip():
        return f"{index}.png"
    return f"{image.name}.png"


class OutputWriter:
    """
    Write result images into an output folder.

    Args:
        output_folder: Destination folder. When empty, a new uniquely
            named folder is created under ``base_dir`` and reported.
        base_dir: Parent for the synthesized folder. Defaults to the
            directory of the running program.
        console: Console used to report the synthesized folder. Defaults
            to the shared console.
    """

    def __init__(
        self,
        output_folder: str | Path | None = None,
        base_dir: str | Path | None = None,
        console: Console | None = None,
    ) -> None:
        self.output_folder: Path | None = Path(output_folder) if output_folder else None
        self.base_dir: Path | None = Path(base_dir) if base_dir else None
        self.console: Console | None = console

    def resolve_folder(self) -> Path:
        """
        Return the output folder, creating a fresh one if none was given.

        Returns:
            Path of the folder images are written to.
        """
        if self.output_folder is None:
            base_dir = self.base_dir or program_directory()
            base_dir.mkdir(parents=True, exist_ok=True)
            self.output_folder = Path(tempfile.mkdtemp(prefix="gmic-", dir=base_dir))
            print_line(f"No output folder specified, using: {self.output_folder}", self.console)
        return self.output_folder

    def write(self, images: Sequence[OutputImage]) -> list[Path]:
        """
        Write every image as PNG.

        Args:
            images: Result images, in engine order.

        Returns:
            Paths of the written files, in the same order. Empty (and
            nothing created on disk) when ``images`` is empty.
        """
        if not images:
            logger.debug("No output images, nothing to write")
            return []

        folder = self.resolve_folder()
        folder.mkdir(parents=True, exist_ok=True)

        written: list[Path] = []
        for index, image in enumerate(images):
            path = folder / output_file_name(image, index)
            _write_atomic(path, encode_png(image.image))
            logger.info("Wrote %s", path)
            written.append(path)

        return written


def _write_atomic(path: Path, data: bytes) -> None:
    """Write ``data`` to a temporary sibling and move it over ``path``."""
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise
