"""
Edit session: one open editor on one source image.

An EditSession owns the immutable source, the mutable AdjustmentState, the
current preview and a generation tag. It is created when the editor opens,
and destroyed on commit (the encoded artifact goes to the host's save
callback) or on cancel (nothing leaves the session).

Classes:
    EditSession: Session state plus its mutation, render and commit API

Functions:
    next_generation: Process-wide monotonically increasing generation tag
"""

import itertools
import logging
import threading
import uuid
from typing import Any, Callable, Optional

from PE_Libs.constants import (
    DECODE_ERROR_PLACEHOLDER,
    LOADING_PLACEHOLDER,
    STATUS_CLOSED,
    STATUS_ERROR,
    STATUS_LOADING,
    STATUS_READY,
)
from PE_Libs.errors import DecodeError, EditorError, EncodeError, SessionClosedError
from PE_Libs.ImageEditingLib.adjustment_state import AdjustmentState
from PE_Libs.ImageEditingLib.exporter import EncodeFunction, ExportedArtifact, export_raster
from PE_Libs.ImageEditingLib.raster_codecs import encode_raster
from PE_Libs.ImageEditingLib.raster_models import OutputRaster, SourceRaster
from PE_Libs.ImageEditingLib.renderer import render
from PE_Libs.SessionLib.editor_config import EditorConfig
from PE_Libs.SessionLib.render_scheduler import RenderScheduler

logger = logging.getLogger(__name__)

PreviewListener = Callable[[OutputRaster], None]
SaveCallback = Callable[[ExportedArtifact], Any]

_generations = itertools.count(1)
_generations_lock = threading.Lock()


def next_generation() -> int:
    with _generations_lock:
        return next(_generations)


class EditSession:
    """
    State bundle for one open editor instance.

    Mutations update the AdjustmentState and request a render; the render
    itself happens on flush() (or immediately when the config asks for it).

    Attributes:
        session_id: Unique identifier, for logging
        config: Export and rendering options
        state: Current adjustment parameters (owned by this session only)
        source: Decoded source bitmap, None while loading or after an error
        output: Latest preview, None until the first render
        generation: Tag that asynchronous decode completions must match
        status: One of 'loading', 'ready', 'error', 'closed'
        last_error: Most recent DecodeError/EncodeError, if any
    """

    def __init__(
        self,
        source: Optional[SourceRaster] = None,
        config: Optional[EditorConfig] = None,
        encode: EncodeFunction = encode_raster,
        on_preview: Optional[PreviewListener] = None,
    ):
        self.session_id = uuid.uuid4().hex[:12]
        self.config = config or EditorConfig()
        self.state = AdjustmentState()
        self.source: Optional[SourceRaster] = None
        self.output: Optional[OutputRaster] = None
        self.generation = next_generation()
        self.status = STATUS_LOADING
        self.last_error: Optional[EditorError] = None

        self._encode = encode
        self._on_preview = on_preview
        self._lock = threading.Lock()
        self._owner_thread = threading.get_ident()
        self._scheduler: RenderScheduler[OutputRaster] = RenderScheduler(
            self._render_current,
            self._apply_output,
            immediate=self.config.render_immediately,
        )

        logger.debug(f"Opened edit session {self.session_id} (generation {self.generation})")
        if source is not None:
            self.apply_decode_result(self.generation, raster=source)

    # -- status --------------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self.status != STATUS_CLOSED

    @property
    def is_ready(self) -> bool:
        return self.status == STATUS_READY

    @property
    def render_pending(self) -> bool:
        return self._scheduler.pending

    @property
    def render_count(self) -> int:
        return self._scheduler.render_count

    @property
    def placeholder_text(self) -> Optional[str]:
        """Text the host shows instead of a preview, or None when a preview exists."""
        if self.status == STATUS_LOADING:
            return LOADING_PLACEHOLDER
        if self.status == STATUS_ERROR:
            return f"{DECODE_ERROR_PLACEHOLDER}: {self.last_error}"
        return None

    @property
    def error_message(self) -> Optional[str]:
        return str(self.last_error) if self.last_error is not None else None

    # -- source loading ------------------------------------------------------

    def apply_decode_result(
        self,
        generation: int,
        raster: Optional[SourceRaster] = None,
        error: Optional[DecodeError] = None,
    ) -> bool:
        """
        Apply a finished decode if it still belongs to this session.

        May be called from a decode worker thread. Rendering always stays on
        the thread that created the session: a completion arriving on any
        other thread leaves the first render pending for the next flush().

        Args:
            generation: Tag the decode was started with
            raster: Decoded source on success
            error: DecodeError on failure

        Returns:
            True if applied, False if the completion was stale
        """
        with self._lock:
            if self.status == STATUS_CLOSED or generation != self.generation:
                logger.debug(
                    f"Session {self.session_id}: discarded stale decode "
                    f"(tag {generation}, current {self.generation})"
                )
                return False

            if error is not None or raster is None:
                self.last_error = error or DecodeError("Decoder returned no image")
                self.source = None
                self.output = None
                self.status = STATUS_ERROR
                logger.warning(f"Session {self.session_id}: {self.last_error}")
                return True

            self.source = raster
            self.status = STATUS_READY
            self.last_error = None
            logger.debug(f"Session {self.session_id}: source ready {raster.width}x{raster.height}")

        if threading.get_ident() == self._owner_thread:
            self._scheduler.request()
        else:
            # Completions from decode workers only mark the preview stale.
            self._scheduler.invalidate()
        return True

    # -- mutations -----------------------------------------------------------

    def _mutate(self, operation: str, *args: Any) -> None:
        if not self.is_open:
            logger.debug(f"Session {self.session_id} is closed; ignored {operation}")
            return
        getattr(self.state, operation)(*args)
        self._scheduler.request()

    def set_brightness(self, value: Any) -> None:
        self._mutate("set_brightness", value)

    def set_contrast(self, value: Any) -> None:
        self._mutate("set_contrast", value)

    def set_saturation(self, value: Any) -> None:
        self._mutate("set_saturation", value)

    def rotate_left(self) -> None:
        self._mutate("rotate_left")

    def rotate_right(self) -> None:
        self._mutate("rotate_right")

    def toggle_flip_horizontal(self) -> None:
        self._mutate("toggle_flip_horizontal")

    def toggle_flip_vertical(self) -> None:
        self._mutate("toggle_flip_vertical")

    def reset(self) -> None:
        self._mutate("reset")

    # -- rendering -----------------------------------------------------------

    def _render_current(self) -> Optional[OutputRaster]:
        if self.status != STATUS_READY or self.source is None:
            return None
        return render(self.source, self.state.copy(), self.generation)

    def _apply_output(self, output: OutputRaster) -> None:
        if output.generation != self.generation:
            return
        self.output = output
        if self._on_preview is not None:
            self._on_preview(output)

    def flush(self) -> bool:
        """Render the latest state if a render is pending."""
        return self._scheduler.flush()

    def preview(self) -> Optional[OutputRaster]:
        """Bring the preview up to date and return it (None while unavailable)."""
        if self.status == STATUS_ERROR:
            return None
        self.flush()
        return self.output

    # -- lifecycle -----------------------------------------------------------

    def commit(self, on_save: SaveCallback) -> ExportedArtifact:
        """
        Encode the current preview and hand it to the host.

        Args:
            on_save: Host callback receiving the ExportedArtifact

        Returns:
            The artifact passed to on_save

        Raises:
            SessionClosedError: If the session was already closed
            DecodeError: If the source never decoded
            EncodeError: If encoding fails; the session stays open
        """
        if not self.is_open:
            raise SessionClosedError(f"Session {self.session_id} is closed")
        if self.status == STATUS_ERROR and isinstance(self.last_error, DecodeError):
            raise DecodeError(str(self.last_error), self.last_error.code) from self.last_error

        self.flush()
        try:
            artifact = export_raster(
                self.output,
                image_format=self.config.export_format,
                encode=self._encode,
                quality=self.config.quality,
            )
        except EncodeError as e:
            self.last_error = e
            logger.warning(f"Session {self.session_id}: commit failed: {e}")
            raise

        on_save(artifact)
        logger.debug(
            f"Session {self.session_id}: committed {artifact.width}x{artifact.height} "
            f"{artifact.image_format}"
        )
        self._close()
        return artifact

    def cancel(self) -> None:
        """Discard the session with no external effect."""
        if not self.is_open:
            return
        logger.debug(f"Session {self.session_id}: cancelled")
        self._close()

    def _close(self) -> None:
        with self._lock:
            self._scheduler.cancel()
            self.status = STATUS_CLOSED
            self.generation = next_generation()
            self.source = None
            self.output = None
            self.state = AdjustmentState()
