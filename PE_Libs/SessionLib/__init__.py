"""
SessionLib - Edit session lifecycle

This module handles the open / edit / commit / cancel lifecycle of the
portrait editor, including render coalescing and configuration.
"""

from PE_Libs.SessionLib.editor_config import EditorConfig
from PE_Libs.SessionLib.render_scheduler import RenderScheduler
from PE_Libs.SessionLib.edit_session import EditSession, next_generation
from PE_Libs.SessionLib.photo_editor import PhotoEditor

__all__ = [
    "EditorConfig",
    "RenderScheduler",
    "EditSession",
    "next_generation",
    "PhotoEditor",
]
