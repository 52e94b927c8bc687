"""
Transform planning for quarter-turn rotation and axis flips.

The planner turns (source size, rotation, flips) into an output canvas size
and the ordered list of drawing operations that place the source on it:

    1. Translate the origin to the canvas center
    2. Rotate by the rotation angle
    3. Scale by (-1, +1) / (+1, -1) for the requested flips
    4. Draw the source anchored at (-width / 2, -height / 2)

Because the flip comes after the rotation in the local frame, mirroring is
applied to the upright (already rotated) picture.

Classes:
    Translate, Rotate, Scale, DrawSource: Drawing operations
    TransformPlan: Canvas size plus operation sequence

Functions:
    plan_transform: Build the plan for a source size and geometry parameters
    canvas_size: Output canvas dimensions for a rotation
"""

import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

import numpy as np

from PE_Libs.ImageEditingLib.adjustment_state import normalize_rotation


@dataclass(frozen=True)
class Translate:
    dx: float
    dy: float

    def matrix(self) -> np.ndarray:
        return np.array([[1.0, 0.0, self.dx], [0.0, 1.0, self.dy], [0.0, 0.0, 1.0]])


@dataclass(frozen=True)
class Rotate:
    """Clockwise rotation on a y-down canvas, in radians."""

    radians: float

    def matrix(self) -> np.ndarray:
        cos_a = math.cos(self.radians)
        sin_a = math.sin(self.radians)
        return np.array([[cos_a, -sin_a, 0.0], [sin_a, cos_a, 0.0], [0.0, 0.0, 1.0]])


@dataclass(frozen=True)
class Scale:
    sx: float
    sy: float

    def matrix(self) -> np.ndarray:
        return np.array([[self.sx, 0.0, 0.0], [0.0, self.sy, 0.0], [0.0, 0.0, 1.0]])


@dataclass(frozen=True)
class DrawSource:
    """Draw the source bitmap with its top-left corner at (x, y)."""

    x: float
    y: float

    def matrix(self) -> np.ndarray:
        return Translate(self.x, self.y).matrix()


Operation = Union[Translate, Rotate, Scale, DrawSource]


@dataclass(frozen=True)
class TransformPlan:
    """Output canvas and the operations that draw the source onto it.

    Attributes:
        source_width: Width of the bitmap being drawn
        source_height: Height of the bitmap being drawn
        canvas_width: Output width
        canvas_height: Output height
        operations: Ordered drawing operations, ending with DrawSource
    """

    source_width: int
    source_height: int
    canvas_width: int
    canvas_height: int
    operations: Tuple[Operation, ...]

    def __post_init__(self):
        if not self.operations or not isinstance(self.operations[-1], DrawSource):
            raise ValueError("Transform plan must end with a DrawSource operation")

    @property
    def canvas_size(self) -> Tuple[int, int]:
        return self.canvas_width, self.canvas_height

    def matrix(self) -> np.ndarray:
        """
        Compose the operations into one affine matrix.

        Operations are applied to the drawing context in order, so the
        composite maps source-local coordinates to canvas coordinates as
        M = op1 @ op2 @ ... @ opN.
        """
        composite = np.identity(3)
        for operation in self.operations:
            composite = composite @ operation.matrix()
        return composite

    def map_point(self, x: float, y: float) -> Tuple[float, float]:
        """Map a point in source coordinates onto the canvas."""
        cx, cy, _ = self.matrix() @ np.array([x, y, 1.0])
        return float(cx), float(cy)

    def with_operations(self, operations: Sequence[Operation]) -> "TransformPlan":
        """Same canvas, different operation sequence."""
        return TransformPlan(
            source_width=self.source_width,
            source_height=self.source_height,
            canvas_width=self.canvas_width,
            canvas_height=self.canvas_height,
            operations=tuple(operations),
        )


def canvas_size(source_width: int, source_height: int, rotation_degrees: int) -> Tuple[int, int]:
    """Output canvas dimensions; width and height swap on a quarter turn."""
    if normalize_rotation(rotation_degrees) % 180 == 0:
        return source_width, source_height
    return source_height, source_width


def plan_transform(
    source_width: int,
    source_height: int,
    rotation_degrees: int = 0,
    flip_horizontal: bool = False,
    flip_vertical: bool = False,
) -> TransformPlan:
    """
    Plan how a source bitmap is drawn onto the output canvas.

    Args:
        source_width: Source width in pixels (> 0)
        source_height: Source height in pixels (> 0)
        rotation_degrees: Clockwise rotation, normalized to a quarter turn
        flip_horizontal: Mirror the rotated picture left-right
        flip_vertical: Mirror the rotated picture top-bottom

    Returns:
        TransformPlan with the canvas size and ordered operations

    Raises:
        ValueError: If either source dimension is not positive
    """
    if source_width <= 0 or source_height <= 0:
        raise ValueError(f"Source size must be positive, got {source_width}x{source_height}")

    rotation = normalize_rotation(rotation_degrees)
    width, height = canvas_size(source_width, source_height, rotation)

    operations: List[Operation] = [
        Translate(width / 2, height / 2),
        Rotate(math.radians(rotation)),
    ]
    if flip_horizontal or flip_vertical:
        operations.append(Scale(-1.0 if flip_horizontal else 1.0, -1.0 if flip_vertical else 1.0))
    operations.append(DrawSource(-source_width / 2, -source_height / 2))

    return TransformPlan(
        source_width=source_width,
        source_height=source_height,
        canvas_width=width,
        canvas_height=height,
        operations=tuple(operations),
    )
