"""
Host-facing photo editor.

PhotoEditor wires the host's source reference and codec primitives to an
EditSession. Only one session is open at a time; opening a new one cancels
the previous one, and a fresh session always starts from default
adjustments.

Decoding may run on a concurrent.futures executor. Each decode is tagged
with the session generation it was started for and is dropped if the session
has moved on by the time it completes.

Classes:
    PhotoEditor: Open / edit / save / cancel entry point for a host

Example:
    >>> editor = PhotoEditor()
    >>> session = editor.open(portrait_data_url, on_save=store_asset)
    >>> session.set_brightness(120)
    >>> session.rotate_right()
    >>> editor.save()
"""

import functools
import logging
from concurrent.futures import Executor, Future
from typing import Callable, Optional

from PE_Libs.errors import DecodeError, SessionClosedError
from PE_Libs.ImageEditingLib.exporter import EncodeFunction, ExportedArtifact
from PE_Libs.ImageEditingLib.raster_codecs import (
    FetchFunction,
    SourceReference,
    decode_raster,
    encode_raster,
    resolve_source_bytes,
)
from PE_Libs.ImageEditingLib.raster_models import SourceRaster
from PE_Libs.SessionLib.edit_session import EditSession, PreviewListener, SaveCallback
from PE_Libs.SessionLib.editor_config import EditorConfig

logger = logging.getLogger(__name__)

DecodeFunction = Callable[[bytes], SourceRaster]


class PhotoEditor:
    """
    Manage the lifecycle of edit sessions for a host application.

    Args:
        config: Export and rendering options shared by all sessions
        decode: Codec primitive bytes -> SourceRaster (default: Pillow)
        encode: Codec primitive (raster, format, **kwargs) -> bytes (default: Pillow)
        fetch: Resolves non-data URIs to bytes; the editor has no I/O of its own
        executor: Optional executor for asynchronous decoding
    """

    def __init__(
        self,
        config: Optional[EditorConfig] = None,
        decode: Optional[DecodeFunction] = None,
        encode: EncodeFunction = encode_raster,
        fetch: Optional[FetchFunction] = None,
        executor: Optional[Executor] = None,
    ):
        self.config = config or EditorConfig()
        self._decode = decode or functools.partial(
            decode_raster, max_pixels=self.config.max_source_pixels
        )
        self._encode = encode
        self._fetch = fetch
        self._executor = executor
        self._on_save: Optional[SaveCallback] = None
        self.session: Optional[EditSession] = None

    def open(
        self,
        reference: SourceReference,
        on_save: SaveCallback,
        on_preview: Optional[PreviewListener] = None,
    ) -> EditSession:
        """
        Open a new edit session on a source image.

        Args:
            reference: Encoded bytes, a data: URI, or a URI for the fetch function
            on_save: Receives the ExportedArtifact when the session is saved
            on_preview: Receives every applied preview OutputRaster

        Returns:
            The new EditSession (status 'loading' until the decode lands)
        """
        if self.session is not None and self.session.is_open:
            logger.debug(f"Superseding open session {self.session.session_id}")
            self.session.cancel()

        session = EditSession(config=self.config, encode=self._encode, on_preview=on_preview)
        self.session = session
        self._on_save = on_save
        tag = session.generation

        if self._executor is None:
            future: Future = Future()
            try:
                future.set_result(self._read_source(reference))
            except Exception as e:
                future.set_exception(e)
            self._finish_decode(session, tag, future)
        else:
            future = self._executor.submit(self._read_source, reference)
            future.add_done_callback(lambda done: self._finish_decode(session, tag, done))

        return session

    def _read_source(self, reference: SourceReference) -> SourceRaster:
        data = resolve_source_bytes(reference, self._fetch)
        return self._decode(data)

    def _finish_decode(self, session: EditSession, tag: int, future: Future) -> None:
        try:
            raster = future.result()
        except DecodeError as e:
            session.apply_decode_result(tag, error=e)
            return
        except Exception as e:
            # Done-callbacks cannot propagate; surface host decoder bugs as DecodeError.
            logger.exception(f"Decoder failed for session {session.session_id}")
            session.apply_decode_result(tag, error=DecodeError(f"Decoder failed: {e}"))
            return

        if not isinstance(raster, SourceRaster):
            session.apply_decode_result(
                tag, error=DecodeError(f"Decoder returned {type(raster).__name__}, expected SourceRaster")
            )
            return
        session.apply_decode_result(tag, raster=raster)

    def _require_session(self) -> EditSession:
        if self.session is None or not self.session.is_open:
            raise SessionClosedError("No open edit session")
        return self.session

    def save(self) -> ExportedArtifact:
        """
        Commit the open session through the save callback given to open().

        Raises:
            SessionClosedError: If no session is open
            DecodeError: If the session's source never decoded
            EncodeError: If encoding fails; the session stays open for a retry
        """
        session = self._require_session()
        artifact = session.commit(self._on_save)
        self.session = None
        self._on_save = None
        return artifact

    def cancel(self) -> None:
        """Close the open session, if any, without invoking any callback."""
        if self.session is not None:
            self.session.cancel()
        self.session = None
        self._on_save = None
