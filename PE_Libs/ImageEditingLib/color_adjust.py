"""
Brightness, contrast and saturation adjustments.

All three follow the usual filter definitions, applied in this order with a
clamp to [0, 255] after each stage:

- brightness: c' = c * b / 100
- contrast:   c' = (c - 128) * k / 100 + 128
- saturation: c' = gray + (c - gray) * s / 100, gray = Rec. 709 luminance

Values are percent integers in [0, 200]; 100 leaves a channel unchanged.
The alpha channel is passed through untouched.

Example:
    >>> adjusted = adjust_colors(raster.pixels, brightness=120, saturation=0)
"""

from typing import Any

import numpy as np

from PE_Libs.constants import (
    ADJUSTMENT_DEFAULT,
    CHANNEL_MAX,
    CHANNEL_MIN,
    LUMINANCE_WEIGHTS,
    MID_GRAY,
)

_WEIGHTS = np.array(LUMINANCE_WEIGHTS, dtype=np.float64)


def _clamp(channels: np.ndarray) -> np.ndarray:
    return np.clip(channels, CHANNEL_MIN, CHANNEL_MAX)


def apply_brightness(rgb: np.ndarray, brightness: int) -> np.ndarray:
    if brightness == ADJUSTMENT_DEFAULT:
        return rgb
    return _clamp(rgb * (brightness / 100.0))


def apply_contrast(rgb: np.ndarray, contrast: int) -> np.ndarray:
    if contrast == ADJUSTMENT_DEFAULT:
        return rgb
    return _clamp((rgb - MID_GRAY) * (contrast / 100.0) + MID_GRAY)


def apply_saturation(rgb: np.ndarray, saturation: int) -> np.ndarray:
    if saturation == ADJUSTMENT_DEFAULT:
        return rgb
    gray = (rgb @ _WEIGHTS)[..., np.newaxis]
    return _clamp(gray + (rgb - gray) * (saturation / 100.0))


def adjust_colors(
    pixels: Any,
    brightness: int = ADJUSTMENT_DEFAULT,
    contrast: int = ADJUSTMENT_DEFAULT,
    saturation: int = ADJUSTMENT_DEFAULT,
) -> np.ndarray:
    """
    Apply the color pass to an RGBA pixel array.

    Args:
        pixels: uint8 array of shape (height, width, 4)
        brightness: Percent multiplier (0-200)
        contrast: Percent spread around mid-gray (0-200)
        saturation: Percent distance from grayscale (0-200)

    Returns:
        New uint8 array of the same shape; the input is never modified

    Raises:
        ValueError: If pixels is not an RGBA array
    """
    array = np.asarray(pixels)
    if array.ndim != 3 or array.shape[2] != 4:
        raise ValueError(f"Expected RGBA pixel array, got shape {array.shape}")

    if (brightness, contrast, saturation) == (ADJUSTMENT_DEFAULT,) * 3:
        return np.array(array, dtype=np.uint8, copy=True)

    rgb = array[..., :3].astype(np.float64)
    rgb = apply_brightness(rgb, brightness)
    rgb = apply_contrast(rgb, contrast)
    rgb = apply_saturation(rgb, saturation)

    result = np.empty(array.shape, dtype=np.uint8)
    result[..., :3] = np.rint(rgb).astype(np.uint8)
    result[..., 3] = array[..., 3]
    return result
