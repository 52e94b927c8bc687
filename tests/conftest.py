"""
Pytest configuration and shared fixtures for portrait editor tests.

This module provides shared test fixtures and test doubles used across
multiple test modules.
"""

import base64
import io
from concurrent.futures import Executor, Future

import numpy as np
import pytest
from PIL import Image

from PE_Libs.ImageEditingLib.raster_models import SourceRaster


def make_pattern(width: int, height: int) -> np.ndarray:
    """
    Build an asymmetric RGBA pattern where every pixel is distinct.

    Red encodes x, green encodes y, blue is a checker so no two pixels match.
    """
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    for y in range(height):
        for x in range(width):
            pixels[y, x] = (x * 17 % 256, y * 29 % 256, (x + 3 * y) * 7 % 256, 255)
    return pixels


def png_bytes(image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


class ManualExecutor(Executor):
    """Executor that runs submitted work only when run_all() is called."""

    def __init__(self):
        self.queue = []

    def submit(self, fn, *args, **kwargs):
        future = Future()
        self.queue.append((future, fn, args, kwargs))
        return future

    def run_all(self):
        queue, self.queue = self.queue, []
        for future, fn, args, kwargs in queue:
            try:
                result = fn(*args, **kwargs)
            except Exception as e:
                future.set_exception(e)
            else:
                future.set_result(result)


@pytest.fixture
def pattern_source():
    """A 4x3 source where every pixel has a unique color."""
    return SourceRaster.from_array(make_pattern(4, 3))


@pytest.fixture
def gray_source():
    """A uniform mid-gray 8x8 source."""
    return SourceRaster.from_image(Image.new("RGBA", (8, 8), (128, 128, 128, 255)))


@pytest.fixture
def pattern_png():
    """The 4x3 pattern encoded as PNG bytes."""
    return png_bytes(Image.fromarray(make_pattern(4, 3)))


@pytest.fixture
def pattern_data_url(pattern_png):
    """The 4x3 pattern as a base64 data URL."""
    return "data:image/png;base64," + base64.b64encode(pattern_png).decode("ascii")


@pytest.fixture
def manual_executor():
    return ManualExecutor()
