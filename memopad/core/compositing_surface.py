"""
CompositingSurface - Committed raster layer plus live stroke compositing

Every frame is composed as:
    background color -> committed layer -> in-progress stroke

Finished strokes are rasterized into the committed layer with the pen style
active at commit time. Style and background changes never repaint pixels
that are already committed.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional, Tuple

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QImage, QPainter, QColor

from ..config import Config
from ..utils.color_utils import argb_to_qcolor
from .pen_style import PenStyle, stroke_path
from .stroke_tracker import FinishedStroke, StrokeTracker
from ..services.png_export_service import ExportResult, encode_snapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SurfaceSnapshot:
    """Detached copy of the state needed to export the drawing."""
    layer: Optional[QImage]
    background: QColor
    pen_style: PenStyle
    device_pixel_ratio: float = 1.0


class CompositingSurface:
    """
    Owns the committed layer, pen style and background color.

    The committed layer matches the surface size in device pixels and is
    (re)allocated transparent by resize(). Content is not carried over to the
    new size. Strokes, paint() and size() work in logical pixels.

    Usage:
        tracker = StrokeTracker()
        surface = CompositingSurface(tracker)
        surface.resize(640, 480)
        surface.commit_stroke(tracker.finish(pos))
        frame = surface.render()
    """

    LAYER_FORMAT = QImage.Format.Format_ARGB32_Premultiplied

    def __init__(
        self,
        tracker: StrokeTracker,
        pen_style: Optional[PenStyle] = None,
        background_color: int = Config.DEFAULT_BACKGROUND_COLOR
    ):
        self._tracker = tracker
        self._pen_style = pen_style or PenStyle()
        self._background = background_color
        self._layer: Optional[QImage] = None
        self._size = (0, 0)
        self._device_pixel_ratio = 1.0

    # ==================== Properties ====================

    @property
    def tracker(self) -> StrokeTracker:
        return self._tracker

    @property
    def pen_style(self) -> PenStyle:
        return self._pen_style

    @property
    def background_color(self) -> int:
        return self._background

    @property
    def has_layer(self) -> bool:
        return self._layer is not None

    def size(self) -> Tuple[int, int]:
        """Current surface size in logical pixels (0, 0 before the first resize)."""
        return self._size

    @property
    def device_pixel_ratio(self) -> float:
        return self._device_pixel_ratio

    def committed_layer(self) -> Optional[QImage]:
        """Copy of the committed layer."""
        return self._layer.copy() if self._layer is not None else None

    # ==================== Style ====================

    def set_pen_style(self, style: PenStyle):
        self._pen_style = style

    def set_pen_color(self, argb: int):
        self._pen_style = self._pen_style.with_color(argb)

    def set_pen_width(self, width: float):
        self._pen_style = self._pen_style.with_width(width)

    def set_background_color(self, argb: int):
        self._background = argb

    # ==================== Layer ====================

    def resize(self, width: int, height: int, device_pixel_ratio: float = 1.0):
        """
        Reallocate the committed layer for a new surface size.

        Existing strokes are discarded. A non-positive size releases the layer.

        Args:
            width: Logical width
            height: Logical height
            device_pixel_ratio: Device pixels per logical pixel (HiDPI screens)
        """
        if width <= 0 or height <= 0:
            logger.debug(f"Surface collapsed to {width}x{height}, releasing layer")
            self._layer = None
            self._size = (0, 0)
            return

        if device_pixel_ratio <= 0:
            device_pixel_ratio = 1.0

        if (self._layer is not None and self._size == (width, height)
                and self._device_pixel_ratio == device_pixel_ratio):
            return

        layer = QImage(
            math.ceil(width * device_pixel_ratio),
            math.ceil(height * device_pixel_ratio),
            self.LAYER_FORMAT
        )
        layer.setDevicePixelRatio(device_pixel_ratio)
        layer.fill(Qt.GlobalColor.transparent)
        if self._layer is not None:
            old_width, old_height = self._size
            logger.debug(
                f"Surface resized {old_width}x{old_height}@{self._device_pixel_ratio} -> "
                f"{width}x{height}@{device_pixel_ratio}, committed strokes discarded"
            )
        self._layer = layer
        self._size = (width, height)
        self._device_pixel_ratio = device_pixel_ratio

    def clear(self):
        """Erase all committed strokes. Style and background are kept."""
        if self._layer is not None:
            self._layer.fill(Qt.GlobalColor.transparent)

    def commit_stroke(self, stroke: FinishedStroke) -> bool:
        """
        Rasterize a finished stroke into the committed layer.

        Returns:
            True if the stroke was drawn
        """
        if stroke.is_empty:
            return False
        if self._layer is None:
            logger.warning("Stroke committed before the surface was sized, ignoring")
            return False

        painter = QPainter(self._layer)
        try:
            stroke_path(painter, stroke.to_path(), self._pen_style)
        finally:
            painter.end()
        return True

    # ==================== Rendering ====================

    def paint(self, painter: QPainter):
        """Compose background, committed layer and live stroke onto painter."""
        if self._layer is None:
            return

        width, height = self._size
        painter.fillRect(0, 0, width, height,
                         argb_to_qcolor(self._background))
        painter.drawImage(0, 0, self._layer)
        stroke_path(painter, self._tracker.current_path(), self._pen_style)

    def render(self) -> QImage:
        """
        Render one frame.

        Returns:
            ARGB32 image of the surface size in device pixels, carrying the
            surface device pixel ratio (null image before resize)
        """
        if self._layer is None:
            return QImage()

        frame = QImage(self._layer.size(), QImage.Format.Format_ARGB32)
        frame.setDevicePixelRatio(self._device_pixel_ratio)
        frame.fill(Qt.GlobalColor.transparent)
        painter = QPainter(frame)
        try:
            self.paint(painter)
        finally:
            painter.end()
        return frame

    # ==================== Export ====================

    def snapshot(self) -> SurfaceSnapshot:
        """Copy the state an export needs, detached from live state."""
        return SurfaceSnapshot(
            layer=self.committed_layer(),
            background=argb_to_qcolor(self._background),
            pen_style=self._pen_style,
            device_pixel_ratio=self._device_pixel_ratio
        )

    def export_png(self) -> ExportResult:
        """
        Flatten background and committed layer and encode as PNG.

        The in-progress stroke is not included and live state is not touched.

        Returns:
            ExportResult with data set, or an EncodeFailure
        """
        return encode_snapshot(self.snapshot())


__all__ = ['CompositingSurface', 'SurfaceSnapshot']
