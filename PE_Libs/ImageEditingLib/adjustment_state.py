"""
Adjustment parameters for a portrait edit.

AdjustmentState is the mutable record of color and geometric parameters a
session renders from. Every setter sanitizes its input; nothing here raises.

Classes:
    AdjustmentState: Brightness/contrast/saturation plus rotation and flips

Functions:
    clamp_adjustment: Coerce any value into the [0, 200] percent range
    normalize_rotation: Snap degrees to a quarter turn within [0, 360)
"""

import math
from dataclasses import asdict, dataclass, replace
from typing import Any, Dict

from PE_Libs.constants import (
    ADJUSTMENT_DEFAULT,
    ADJUSTMENT_MAX,
    ADJUSTMENT_MIN,
    DEFAULT_ROTATION,
    FULL_TURN,
    ROTATION_STEP,
)


def clamp_adjustment(value: Any, default: int = ADJUSTMENT_DEFAULT) -> int:
    """
    Coerce a slider value into the valid percent range.

    Args:
        value: Any number or numeric string
        default: Value used when the input cannot be read as a number

    Returns:
        Integer in [ADJUSTMENT_MIN, ADJUSTMENT_MAX]; halves round up
    """
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    if not math.isfinite(number):
        return default
    return int(max(ADJUSTMENT_MIN, min(ADJUSTMENT_MAX, math.floor(number + 0.5))))


def normalize_rotation(degrees: Any) -> int:
    """
    Snap an angle to the nearest quarter turn and fold it into [0, 360).

    Args:
        degrees: Any angle, negative or beyond a full turn

    Returns:
        One of 0, 90, 180, 270 (0 for unreadable input); an angle exactly
        between two quarter turns snaps to the clockwise one
    """
    try:
        number = float(degrees)
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_ROTATION
    if not math.isfinite(number):
        return DEFAULT_ROTATION
    quarter_turns = math.floor(number / ROTATION_STEP + 0.5)
    folded = (quarter_turns * ROTATION_STEP) % FULL_TURN
    if folded < 0:
        folded += FULL_TURN
    return folded


@dataclass
class AdjustmentState:
    """Color and geometry parameters of one edit session.

    Attributes:
        brightness: Percent multiplier, 100 = unchanged
        contrast: Percent spread around mid-gray, 100 = unchanged
        saturation: Percent distance from grayscale, 100 = unchanged
        rotation_degrees: Clockwise rotation, one of 0, 90, 180, 270
        flip_horizontal: Mirror left-right after rotating
        flip_vertical: Mirror top-bottom after rotating
    """

    brightness: int = ADJUSTMENT_DEFAULT
    contrast: int = ADJUSTMENT_DEFAULT
    saturation: int = ADJUSTMENT_DEFAULT
    rotation_degrees: int = DEFAULT_ROTATION
    flip_horizontal: bool = False
    flip_vertical: bool = False

    def __post_init__(self):
        self.brightness = clamp_adjustment(self.brightness)
        self.contrast = clamp_adjustment(self.contrast)
        self.saturation = clamp_adjustment(self.saturation)
        self.rotation_degrees = normalize_rotation(self.rotation_degrees)
        self.flip_horizontal = bool(self.flip_horizontal)
        self.flip_vertical = bool(self.flip_vertical)

    # -- color ---------------------------------------------------------------

    def set_brightness(self, value: Any) -> None:
        self.brightness = clamp_adjustment(value)

    def set_contrast(self, value: Any) -> None:
        self.contrast = clamp_adjustment(value)

    def set_saturation(self, value: Any) -> None:
        self.saturation = clamp_adjustment(value)

    # -- geometry ------------------------------------------------------------

    def rotate_left(self) -> None:
        self.rotation_degrees = normalize_rotation(self.rotation_degrees - ROTATION_STEP)

    def rotate_right(self) -> None:
        self.rotation_degrees = normalize_rotation(self.rotation_degrees + ROTATION_STEP)

    def set_rotation(self, degrees: Any) -> None:
        self.rotation_degrees = normalize_rotation(degrees)

    def toggle_flip_horizontal(self) -> None:
        self.flip_horizontal = not self.flip_horizontal

    def toggle_flip_vertical(self) -> None:
        self.flip_vertical = not self.flip_vertical

    # -- whole state ---------------------------------------------------------

    def reset(self) -> None:
        """Restore every parameter to its default."""
        defaults = AdjustmentState()
        self.brightness = defaults.brightness
        self.contrast = defaults.contrast
        self.saturation = defaults.saturation
        self.rotation_degrees = defaults.rotation_degrees
        self.flip_horizontal = defaults.flip_horizontal
        self.flip_vertical = defaults.flip_vertical

    def is_default(self) -> bool:
        return self == AdjustmentState()

    def copy(self) -> "AdjustmentState":
        return replace(self)

    @property
    def swaps_axes(self) -> bool:
        return self.rotation_degrees % 180 != 0

    def describe(self) -> Dict[str, str]:
        """Slider labels as shown next to each control."""
        return {
            "brightness": f"{self.brightness}%",
            "contrast": f"{self.contrast}%",
            "saturation": f"{self.saturation}%",
        }

    def to_css_filter(self) -> str:
        """CSS filter string equivalent to the color parameters."""
        return (
            f"brightness({self.brightness}%) "
            f"contrast({self.contrast}%) "
            f"saturate({self.saturation}%)"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AdjustmentState":
        """Create from dictionary, ignoring unknown keys and sanitizing values."""
        normalized = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**normalized)
