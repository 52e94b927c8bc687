"""
Renderer: source raster + adjustment state -> output raster.

Every render starts from the unmodified SourceRaster. Parameters are
absolute, so any sequence of edits that ends in the same AdjustmentState
renders the same pixels.

Functions:
    render: Full render pass (color pass, then geometric draw)
    draw_plan: Execute a TransformPlan over an RGBA pixel array
"""

import logging
from typing import Any

import numpy as np

from PE_Libs.constants import TRANSPARENT_PIXEL
from PE_Libs.ImageEditingLib.adjustment_state import AdjustmentState
from PE_Libs.ImageEditingLib.color_adjust import adjust_colors
from PE_Libs.ImageEditingLib.raster_models import OutputRaster, SourceRaster
from PE_Libs.ImageEditingLib.transform_planner import TransformPlan, plan_transform

logger = logging.getLogger(__name__)


def draw_plan(pixels: Any, plan: TransformPlan) -> np.ndarray:
    """
    Draw an RGBA pixel array onto a new canvas following a transform plan.

    Each canvas pixel center is mapped back through the inverse plan matrix
    and takes the color of the source pixel it lands in. Canvas pixels that
    land outside the source stay transparent.

    Args:
        pixels: uint8 array of shape (source_height, source_width, 4)
        plan: TransformPlan built for the same source size

    Returns:
        uint8 array of shape (canvas_height, canvas_width, 4)

    Raises:
        ValueError: If the pixel array does not match the plan's source size
    """
    array = np.asarray(pixels)
    source_height, source_width = array.shape[:2]
    if (source_width, source_height) != (plan.source_width, plan.source_height):
        raise ValueError(
            f"Plan is for a {plan.source_width}x{plan.source_height} source, "
            f"got {source_width}x{source_height}"
        )

    width, height = plan.canvas_size
    inverse = np.linalg.inv(plan.matrix())

    rows, cols = np.mgrid[0:height, 0:width]
    centers = np.stack(
        [cols.ravel() + 0.5, rows.ravel() + 0.5, np.ones(width * height)]
    )
    local = inverse @ centers

    # Pixel (i, j) covers [i, i + 1) x [j, j + 1); snap away float noise first.
    src_x = np.floor(np.round(local[0], 6)).astype(np.int64)
    src_y = np.floor(np.round(local[1], 6)).astype(np.int64)
    inside = (src_x >= 0) & (src_x < source_width) & (src_y >= 0) & (src_y < source_height)

    canvas = np.empty((height * width, array.shape[2]), dtype=np.uint8)
    canvas[:] = TRANSPARENT_PIXEL
    canvas[inside] = array[src_y[inside], src_x[inside]]
    return canvas.reshape(height, width, array.shape[2])


def render(source: SourceRaster, state: AdjustmentState, generation: int = 0) -> OutputRaster:
    """
    Render a source raster with the given adjustments.

    Args:
        source: Immutable source bitmap
        state: Current adjustment parameters
        generation: Session generation to stamp on the output

    Returns:
        A freshly computed OutputRaster

    Raises:
        TypeError: If source is not a SourceRaster
    """
    if not isinstance(source, SourceRaster):
        raise TypeError(f"Expected SourceRaster, got {type(source)}")

    plan = plan_transform(
        source.width,
        source.height,
        state.rotation_degrees,
        state.flip_horizontal,
        state.flip_vertical,
    )
    adjusted = adjust_colors(source.pixels, state.brightness, state.contrast, state.saturation)
    canvas = draw_plan(adjusted, plan)

    logger.debug(
        f"Rendered {source.width}x{source.height} -> {plan.canvas_width}x{plan.canvas_height} "
        f"({state.to_css_filter()}, rotate {state.rotation_degrees}, "
        f"flip h={state.flip_horizontal} v={state.flip_vertical})"
    )
    return OutputRaster(
        width=plan.canvas_width,
        height=plan.canvas_height,
        pixels=canvas,
        generation=generation,
    )
