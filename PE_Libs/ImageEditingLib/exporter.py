"""
Exporter: OutputRaster -> portable encoded artifact.

Classes:
    ExportedArtifact: Encoded bytes plus format metadata

Functions:
    export_raster: Serialize the current output for commit or download
"""

import base64
import logging
from dataclasses import dataclass
from typing import Callable, Optional

from PE_Libs.constants import (
    DEFAULT_EXPORT_FORMAT,
    DEFAULT_EXPORT_QUALITY,
    FORMAT_MIME_TYPES,
    LOSSY_FORMATS,
)
from PE_Libs.errors import EncodeError
from PE_Libs.ImageEditingLib.raster_codecs import encode_raster, normalize_format
from PE_Libs.ImageEditingLib.raster_models import OutputRaster

logger = logging.getLogger(__name__)

EncodeFunction = Callable[..., bytes]


@dataclass(frozen=True)
class ExportedArtifact:
    """Canonical artifact handed to the host on commit.

    Attributes:
        data: Encoded image bytes
        image_format: Pillow format name (PNG, JPEG, ...)
        mime_type: MIME type matching image_format
        width: Image width in pixels
        height: Image height in pixels
    """

    data: bytes
    image_format: str
    mime_type: str
    width: int
    height: int

    def to_data_url(self) -> str:
        """Encode the artifact as a base64 data URL."""
        payload = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{payload}"


def export_raster(
    output: Optional[OutputRaster],
    image_format: str = DEFAULT_EXPORT_FORMAT,
    encode: EncodeFunction = encode_raster,
    quality: int = DEFAULT_EXPORT_QUALITY,
) -> ExportedArtifact:
    """
    Serialize an output raster.

    Args:
        output: The rendered raster (None when no preview exists yet)
        image_format: Target format, aliases like "jpg" accepted
        encode: Codec primitive, called as encode(raster, format, **kwargs)
        quality: 1-100, only passed for lossy formats

    Returns:
        ExportedArtifact holding the encoded bytes

    Raises:
        EncodeError: If there is nothing to export or encoding fails
    """
    if output is None:
        raise EncodeError("Nothing to export: no rendered image")

    target_format = normalize_format(image_format)
    save_kwargs: dict = {}
    if target_format in LOSSY_FORMATS:
        save_kwargs["quality"] = max(1, min(100, int(quality)))

    try:
        data = encode(output, target_format, **save_kwargs)
    except EncodeError:
        logger.warning(f"Encoding {output.width}x{output.height} as {target_format} failed")
        raise
    except MemoryError as e:
        raise EncodeError(f"Out of memory while encoding {target_format}") from e

    if not data:
        raise EncodeError(f"Encoder produced no data for {target_format}")

    mime_type = FORMAT_MIME_TYPES.get(target_format, "application/octet-stream")
    logger.debug(f"Exported {output.width}x{output.height} as {target_format} ({len(data)} bytes)")
    return ExportedArtifact(
        data=bytes(data),
        image_format=target_format,
        mime_type=mime_type,
        width=output.width,
        height=output.height,
    )
