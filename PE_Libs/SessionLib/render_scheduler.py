"""
Render coalescing for edit sessions.

Every parameter mutation calls request(); the host calls flush() when it is
ready to redraw (idle callback, animation frame, end of a slider drag).
Any number of requests between two flushes produce a single render of the
latest state. A render that was superseded while it ran is thrown away and
the newest state is rendered instead, so an older frame never replaces a
newer one.

Classes:
    RenderScheduler: Request/flush coalescer around a render callable
"""

import logging
import threading
from typing import Callable, Generic, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RenderScheduler(Generic[T]):
    """
    Coalesce render requests into as few render passes as possible.

    Example:
        >>> scheduler = RenderScheduler(session_render, show_preview)
        >>> scheduler.request()
        1
        >>> scheduler.request()
        2
        >>> scheduler.flush()   # one render, of the latest state
        True
    """

    def __init__(
        self,
        render: Callable[[], Optional[T]],
        apply: Callable[[T], None],
        immediate: bool = False,
    ):
        """
        Args:
            render: Produces a frame from the current state, or None when
                    there is nothing to render yet
            apply: Receives each frame that is still current
            immediate: Flush inside every request() (no coalescing)
        """
        self._render = render
        self._apply = apply
        self._immediate = immediate
        self._lock = threading.Lock()
        self._requested = 0
        self._completed = 0
        self._rendering = False
        self.render_count = 0
        self.discarded_count = 0

    @property
    def pending(self) -> bool:
        return self._requested != self._completed

    @property
    def rendering(self) -> bool:
        return self._rendering

    def invalidate(self) -> int:
        """
        Mark the current state as needing a render without rendering it.

        Safe to call from any thread; the render happens on the next flush().

        Returns:
            Token identifying this request; later requests supersede it
        """
        with self._lock:
            self._requested += 1
            return self._requested

    def request(self) -> int:
        """
        Mark the current state as needing a render.

        Returns:
            Token identifying this request; later requests supersede it
        """
        token = self.invalidate()
        if self._immediate and not self._rendering:
            self.flush()
        return token

    def flush(self) -> bool:
        """
        Render the latest requested state if a request is pending.

        Returns:
            True if at least one render pass ran

        Raises:
            Whatever the render or apply callable raises; the request stays
            pending so a later flush retries.
        """
        with self._lock:
            if not self.pending or self._rendering:
                return False
            self._rendering = True

        try:
            while True:
                with self._lock:
                    if not self.pending:
                        break
                    token = self._requested
                frame = self._render()
                self.render_count += 1

                with self._lock:
                    latest = self._requested
                if token != latest:
                    self.discarded_count += 1
                    logger.debug(f"Discarded stale render for request {token} (latest {latest})")
                    continue

                if frame is not None:
                    self._apply(frame)
                with self._lock:
                    self._completed = token
        finally:
            with self._lock:
                self._rendering = False
        return True

    def cancel(self) -> None:
        """Drop any pending request without rendering it."""
        with self._lock:
            if self.pending:
                logger.debug(f"Dropped pending render request {self._requested}")
            self._completed = self._requested
