"""
Default codec primitives backed by Pillow.

Hosts may supply their own decode/encode callables; these are the ones the
editor uses when none are given.

Functions:
    decode_raster: Encoded bytes -> SourceRaster (raises DecodeError)
    encode_raster: Raster -> encoded bytes (raises EncodeError)
    normalize_format: Canonical Pillow format name ("jpg" -> "JPEG")
    resolve_source_bytes: Source reference (bytes / data URI / URI) -> bytes
"""

import base64
import binascii
import io
import logging
import warnings
from typing import Any, Callable, Optional, Union
from urllib.parse import unquote_to_bytes

from PIL import Image, UnidentifiedImageError

from PE_Libs.constants import DEFAULT_EXPORT_FORMAT, DEFAULT_MAX_SOURCE_PIXELS, FORMAT_ALIASES
from PE_Libs.errors import DecodeError, EncodeError
from PE_Libs.ImageEditingLib.raster_models import SourceRaster

logger = logging.getLogger(__name__)

SourceReference = Union[bytes, bytearray, memoryview, str]
FetchFunction = Callable[[str], bytes]


def normalize_format(image_format: str) -> str:
    """Upper-case a format name and map common aliases (JPG -> JPEG)."""
    name = str(image_format or DEFAULT_EXPORT_FORMAT).strip().upper().lstrip(".")
    return FORMAT_ALIASES.get(name, name)


def decode_raster(data: bytes, max_pixels: Optional[int] = DEFAULT_MAX_SOURCE_PIXELS) -> SourceRaster:
    """
    Decode an encoded bitmap into a SourceRaster.

    Args:
        data: Encoded image bytes (any format Pillow reads)
        max_pixels: Reject images larger than this many pixels (None = no limit)

    Returns:
        SourceRaster in RGBA

    Raises:
        DecodeError: If the bytes are empty, corrupt, unsupported or too large
    """
    if not data:
        raise DecodeError("Source image is empty")

    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", Image.DecompressionBombWarning)
            image = Image.open(io.BytesIO(bytes(data)))
    except (UnidentifiedImageError, Image.DecompressionBombError) as e:
        raise DecodeError(f"Unsupported or unsafe source image: {e}") from e
    except (OSError, ValueError, SyntaxError) as e:
        raise DecodeError(f"Corrupt source image: {e}") from e

    with image:
        width, height = image.size
        if max_pixels is not None and width * height > max_pixels:
            raise DecodeError(
                f"Source image is too large: {width}x{height} exceeds {max_pixels} pixels"
            )
        try:
            image.load()
            raster = SourceRaster.from_image(image)
        except (OSError, ValueError, SyntaxError) as e:
            raise DecodeError(f"Corrupt source image: {e}") from e

    logger.debug(f"Decoded source image {raster.width}x{raster.height}")
    return raster


def encode_raster(raster: Any, image_format: str = DEFAULT_EXPORT_FORMAT, **save_kwargs: Any) -> bytes:
    """
    Encode a raster (anything with to_image()) into bytes.

    Args:
        raster: SourceRaster or OutputRaster
        image_format: Pillow format name (PNG, JPEG, WEBP, ...)
        **save_kwargs: Extra Image.save() options such as quality

    Returns:
        Encoded image bytes

    Raises:
        EncodeError: If the raster cannot be converted or serialized
    """
    if not hasattr(raster, "to_image"):
        raise EncodeError(f"Expected a raster, got {type(raster)}")

    target_format = normalize_format(image_format)
    buffer = io.BytesIO()
    try:
        image = raster.to_image()
        if target_format == "JPEG" and image.mode != "RGB":
            # JPEG has no alpha channel
            image = image.convert("RGB")
        image.save(buffer, format=target_format, **save_kwargs)
    except (KeyError, OSError, ValueError, TypeError, MemoryError) as e:
        raise EncodeError(f"Could not encode image as {target_format}: {e}") from e

    return buffer.getvalue()


def _decode_data_uri(uri: str) -> bytes:
    header, separator, payload = uri.partition(",")
    if not separator:
        raise DecodeError("Malformed data URI: missing ',' separator")
    if header.lower().endswith(";base64"):
        try:
            return base64.b64decode(payload, validate=False)
        except (binascii.Error, ValueError) as e:
            raise DecodeError(f"Malformed base64 data URI: {e}") from e
    return unquote_to_bytes(payload)


def resolve_source_bytes(reference: SourceReference, fetch: Optional[FetchFunction] = None) -> bytes:
    """
    Turn a source reference into encoded image bytes.

    Args:
        reference: Raw bytes, a data: URI, or any other URI
        fetch: Host callable used for URIs that are not data: URIs

    Returns:
        Encoded image bytes

    Raises:
        DecodeError: If the reference is malformed or cannot be fetched
    """
    if isinstance(reference, (bytes, bytearray, memoryview)):
        return bytes(reference)

    if not isinstance(reference, str):
        raise DecodeError(f"Unsupported source reference type: {type(reference).__name__}")

    uri = reference.strip()
    if not uri:
        raise DecodeError("Source reference is empty")

    if uri[:5].lower() == "data:":
        return _decode_data_uri(uri)

    if fetch is None:
        raise DecodeError(f"No fetch function available to resolve {uri!r}")

    try:
        data = fetch(uri)
    except DecodeError:
        raise
    except Exception as e:
        # Host fetchers raise whatever their transport raises.
        raise DecodeError(f"Could not fetch source image {uri!r}: {e}") from e

    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise DecodeError(f"Fetch for {uri!r} returned {type(data).__name__}, expected bytes")
    return bytes(data)
