"""
Raster data models for the portrait editor.

This module defines the pixel containers that flow through the engine.

Classes:
    SourceRaster: Immutable decoded bitmap a session edits from
    OutputRaster: Derived bitmap produced by a render pass

Type Aliases:
    RgbaColor: A tuple of 4 integers representing RGBA color values (0-255)
"""

from dataclasses import dataclass
from typing import Any, Tuple

import numpy as np
from PIL import Image

from PE_Libs.constants import PIXEL_CHANNELS, PIXEL_MODE

RgbaColor = Tuple[int, int, int, int]


def _as_rgba_array(pixels: Any) -> np.ndarray:
    array = np.asarray(pixels)
    if array.ndim != 3 or array.shape[2] != PIXEL_CHANNELS:
        raise ValueError(
            f"Expected pixel array of shape (height, width, {PIXEL_CHANNELS}), got {array.shape}"
        )
    if array.dtype != np.uint8:
        raise TypeError(f"Expected uint8 pixel data, got {array.dtype}")
    return array


@dataclass(frozen=True)
class SourceRaster:
    """Immutable 8-bit RGBA bitmap.

    The pixel array is copied on construction and marked read-only, so
    nothing downstream can edit the source in place.

    Attributes:
        width: Width in pixels
        height: Height in pixels
        pixels: uint8 array of shape (height, width, 4)
    """

    width: int
    height: int
    pixels: np.ndarray

    def __post_init__(self):
        array = _as_rgba_array(self.pixels)
        if array.shape[:2] != (self.height, self.width):
            raise ValueError(
                f"Pixel array is {array.shape[1]}x{array.shape[0]}, "
                f"expected {self.width}x{self.height}"
            )
        frozen = np.array(array, dtype=np.uint8, copy=True)
        frozen.flags.writeable = False
        object.__setattr__(self, "pixels", frozen)

    @classmethod
    def from_image(cls, image: Any) -> "SourceRaster":
        """Build a source raster from a PIL Image (converted to RGBA)."""
        if not hasattr(image, "mode") or not hasattr(image, "size"):
            raise TypeError(f"Expected PIL Image, got {type(image)}")
        if image.mode != PIXEL_MODE:
            image = image.convert(PIXEL_MODE)
        width, height = image.size
        return cls(width=width, height=height, pixels=np.asarray(image, dtype=np.uint8))

    @classmethod
    def from_array(cls, pixels: Any) -> "SourceRaster":
        """Build a source raster from a (height, width, 4) uint8 array."""
        array = _as_rgba_array(pixels)
        height, width = array.shape[:2]
        return cls(width=width, height=height, pixels=array)

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def to_image(self) -> Any:
        return Image.fromarray(np.ascontiguousarray(self.pixels))


@dataclass(frozen=True)
class OutputRaster:
    """Result of one render pass.

    Attributes:
        width: Canvas width in pixels
        height: Canvas height in pixels
        pixels: uint8 array of shape (height, width, 4)
        generation: Session generation the render belongs to (0 if unbound)
    """

    width: int
    height: int
    pixels: np.ndarray
    generation: int = 0

    def __post_init__(self):
        array = _as_rgba_array(self.pixels)
        if array.shape[:2] != (self.height, self.width):
            raise ValueError(
                f"Pixel array is {array.shape[1]}x{array.shape[0]}, "
                f"expected {self.width}x{self.height}"
            )
        array.flags.writeable = False
        object.__setattr__(self, "pixels", array)

    @property
    def size(self) -> Tuple[int, int]:
        return self.width, self.height

    def getpixel(self, x: int, y: int) -> RgbaColor:
        r, g, b, a = (int(value) for value in self.pixels[y, x])
        return r, g, b, a

    def to_image(self) -> Any:
        return Image.fromarray(np.ascontiguousarray(self.pixels))

    def same_pixels(self, other: "OutputRaster") -> bool:
        """True when both rasters have identical size and pixel values."""
        return self.size == other.size and bool(np.array_equal(self.pixels, other.pixels))
