"""
Editor configuration.

Classes:
    EditorConfig: Export and rendering options for an editor instance
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from PE_Libs.constants import (
    DEFAULT_EXPORT_FORMAT,
    DEFAULT_EXPORT_QUALITY,
    DEFAULT_MAX_SOURCE_PIXELS,
    FORMAT_MIME_TYPES,
)
from PE_Libs.ImageEditingLib.raster_codecs import normalize_format


@dataclass
class EditorConfig:
    """Configuration for an editor instance.

    Attributes:
        export_format: Format of the committed artifact (PNG, JPEG, WEBP, ...)
        quality: Lossy export quality 1-100 (default: 95, JPEG/WEBP only)
        render_immediately: Render on every mutation instead of coalescing
                            until flush() (default: False)
        max_source_pixels: Largest accepted source, in pixels (None = no limit)
    """
    export_format: str = DEFAULT_EXPORT_FORMAT
    quality: int = DEFAULT_EXPORT_QUALITY
    render_immediately: bool = False
    max_source_pixels: Optional[int] = DEFAULT_MAX_SOURCE_PIXELS

    def __post_init__(self):
        self.export_format = normalize_format(self.export_format)
        if self.export_format not in FORMAT_MIME_TYPES:
            raise ValueError(f"Unsupported export format: {self.export_format}")
        self.quality = max(1, min(100, int(self.quality)))
        if self.max_source_pixels is not None and int(self.max_source_pixels) <= 0:
            raise ValueError(f"max_source_pixels must be positive, got {self.max_source_pixels}")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "EditorConfig":
        """Create from dictionary."""
        filtered = {k: v for k, v in data.items() if k in cls.__dataclass_fields__}
        return cls(**filtered)
