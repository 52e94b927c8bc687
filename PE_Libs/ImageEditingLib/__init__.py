"""
ImageEditingLib - Core image editing functionality

This module provides the raster models, adjustment parameters, transform
planning, rendering and export for the portrait editor.
"""

from PE_Libs.ImageEditingLib.raster_models import OutputRaster, RgbaColor, SourceRaster
from PE_Libs.ImageEditingLib.adjustment_state import (
    AdjustmentState,
    clamp_adjustment,
    normalize_rotation,
)
from PE_Libs.ImageEditingLib.transform_planner import (
    DrawSource,
    Rotate,
    Scale,
    TransformPlan,
    Translate,
    canvas_size,
    plan_transform,
)
from PE_Libs.ImageEditingLib.color_adjust import adjust_colors
from PE_Libs.ImageEditingLib.renderer import draw_plan, render
from PE_Libs.ImageEditingLib.raster_codecs import (
    decode_raster,
    encode_raster,
    normalize_format,
    resolve_source_bytes,
)
from PE_Libs.ImageEditingLib.exporter import ExportedArtifact, export_raster

__all__ = [
    "OutputRaster",
    "RgbaColor",
    "SourceRaster",
    "AdjustmentState",
    "clamp_adjustment",
    "normalize_rotation",
    "DrawSource",
    "Rotate",
    "Scale",
    "TransformPlan",
    "Translate",
    "canvas_size",
    "plan_transform",
    "adjust_colors",
    "draw_plan",
    "render",
    "decode_raster",
    "encode_raster",
    "normalize_format",
    "resolve_source_bytes",
    "ExportedArtifact",
    "export_raster",
]
