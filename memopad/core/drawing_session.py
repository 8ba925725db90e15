"""
DrawingSession - Pointer input contract for the drawing engine

Routes pointer down/move/up events (with optional batched history samples)
into the StrokeTracker, commits finished strokes to the CompositingSurface
and requests a redraw after every change.
"""

import logging
from typing import Callable, Iterable, Optional

from PyQt6.QtCore import QPointF

from ..events.event_bus import EventBus, get_event_bus
from .compositing_surface import CompositingSurface, SurfaceSnapshot
from .pen_style import PenStyle
from .stroke_tracker import StrokeTracker, PointLike
from .style_selector import CanvasListener, StyleSelector
from ..services.png_export_service import ExportResult

logger = logging.getLogger(__name__)


class DrawingSession:
    """
    One drawing surface with its single active stroke.

    Usage:
        session = DrawingSession(redraw_callback=widget.update)
        session.resize(640, 480)
        session.pointer_down(10, 10)
        session.pointer_move(40, 40, history=[(20, 20), (30, 30)])
        session.pointer_up(50, 50)
    """

    def __init__(
        self,
        redraw_callback: Optional[Callable[[], None]] = None,
        listener: Optional[CanvasListener] = None,
        event_bus: Optional[EventBus] = None,
        tracker: Optional[StrokeTracker] = None,
        pen_style: Optional[PenStyle] = None
    ):
        self._redraw_callback = redraw_callback
        self._event_bus = event_bus or get_event_bus()
        self.tracker = tracker or StrokeTracker()
        self.surface = CompositingSurface(self.tracker, pen_style)
        self.selector = StyleSelector(self.surface, listener)

    def set_redraw_callback(self, callback: Optional[Callable[[], None]]):
        self._redraw_callback = callback

    def _request_redraw(self):
        if self._redraw_callback is not None:
            self._redraw_callback()

    # ==================== Pointer Events ====================

    def pointer_down(self, x: float, y: float):
        """Start a stroke at (x, y)."""
        self.tracker.start(QPointF(x, y))
        self._event_bus.stroke_started.emit()
        self._request_redraw()

    def pointer_move(self, x: float, y: float, history: Iterable[PointLike] = ()):
        """Extend the stroke with batched history samples, then (x, y)."""
        if not self.tracker.is_active:
            return
        self.tracker.replay(history, QPointF(x, y))
        self._request_redraw()

    def pointer_up(self, x: float, y: float, history: Iterable[PointLike] = ()):
        """Replay history, finish the stroke at (x, y) and commit it."""
        if not self.tracker.is_active:
            return
        for sample in history:
            self.tracker.extend(sample)
        stroke = self.tracker.finish(QPointF(x, y))
        if self.surface.commit_stroke(stroke):
            self._event_bus.stroke_committed.emit(len(stroke))
        self._request_redraw()

    def cancel_stroke(self):
        """Drop the in-progress stroke without committing it."""
        if self.tracker.is_active:
            self.tracker.clear()
            self._request_redraw()

    # ==================== Commands ====================

    def resize(self, width: int, height: int, device_pixel_ratio: float = 1.0):
        self.surface.resize(width, height, device_pixel_ratio)
        self._event_bus.surface_resized.emit(width, height)

    def clear(self):
        """Erase all strokes, including the one in progress."""
        self.tracker.clear()
        self.surface.clear()
        logger.info("Canvas cleared")
        self._event_bus.canvas_cleared.emit()
        self._request_redraw()

    # ==================== Style ====================

    def next_pen_color(self, count: int) -> int:
        index = self.selector.select_next_pen_color(count)
        self._notify_pen_style()
        return index

    def next_pen_size(self, count: int) -> int:
        index = self.selector.select_next_pen_size(count)
        self._notify_pen_style()
        return index

    def next_bg_color(self, count: int) -> int:
        index = self.selector.select_next_bg_color(count)
        self._notify_background()
        return index

    def apply_styles(self):
        """Apply the current option indices through the listener."""
        self.selector.apply_all()
        self._notify_pen_style()
        self._notify_background()

    def _notify_pen_style(self):
        style = self.surface.pen_style
        self._event_bus.pen_style_changed.emit(style.color, style.width)
        self._request_redraw()

    def _notify_background(self):
        self._event_bus.background_changed.emit(self.surface.background_color)
        self._request_redraw()

    # ==================== Export ====================

    def snapshot(self) -> SurfaceSnapshot:
        return self.surface.snapshot()

    def export_png_bytes(self) -> ExportResult:
        return self.surface.export_png()


__all__ = ['DrawingSession']
