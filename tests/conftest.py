"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest
from PIL import Image


@pytest.fixture
def sample_png(tmp_path: Path) -> Path:
    """An 8x6 RGB PNG on disk."""
    path = tmp_path / "input.png"
    Image.new("RGB", (8, 6), (200, 100, 50)).save(path)
    return path


@pytest.fixture
def tracked_image():
    """A real image whose ``close`` calls are counted."""

    class TrackedImage:
        def __init__(self) -> None:
            self.image = Image.new("RGB", (4, 4), (1, 2, 3))
            self.close_calls = 0
            original_close = self.image.close

            def close() -> None:
                self.close_calls += 1
                original_close()

            self.image.close = close  # type: ignore[method-assign]

    return TrackedImage()
