"""
Pen style used for both the live stroke and committed strokes.
"""

from dataclasses import dataclass, replace

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QPainter, QPainterPath, QPen, QColor

from ..config import Config
from ..utils.color_utils import argb_to_qcolor


@dataclass(frozen=True)
class PenStyle:
    """
    Stroke appearance.

    Cap and join are always round and strokes are always anti-aliased.
    soft_edge is the feather radius around the stroke (0 disables it).
    """
    color: int = Config.DEFAULT_PEN_COLOR
    width: float = Config.DEFAULT_PEN_WIDTH
    soft_edge: float = Config.SOFT_EDGE_RADIUS

    @property
    def qcolor(self) -> QColor:
        return argb_to_qcolor(self.color)

    def with_color(self, argb: int) -> 'PenStyle':
        return replace(self, color=argb)

    def with_width(self, width: float) -> 'PenStyle':
        return replace(self, width=width)

    def create_pen(self) -> QPen:
        """Create the solid pen for this style."""
        return _round_pen(self.qcolor, self.width)

    def create_feather_pen(self) -> QPen:
        """Create the wider, fainter pen that softens the stroke edge."""
        color = self.qcolor
        color.setAlphaF(color.alphaF() * Config.SOFT_EDGE_ALPHA)
        return _round_pen(color, self.width + 2 * self.soft_edge)


def _round_pen(color: QColor, width: float) -> QPen:
    pen = QPen(color, width)
    pen.setCapStyle(Qt.PenCapStyle.RoundCap)
    pen.setJoinStyle(Qt.PenJoinStyle.RoundJoin)
    return pen


def stroke_path(painter: QPainter, path: QPainterPath, style: PenStyle):
    """
    Stroke a path onto painter with the given style.

    The painter state is saved and restored around the call.
    """
    if path.isEmpty():
        return

    painter.save()
    try:
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.setBrush(Qt.BrushStyle.NoBrush)
        if style.soft_edge > 0:
            painter.setPen(style.create_feather_pen())
            painter.drawPath(path)
        painter.setPen(style.create_pen())
        painter.drawPath(path)
    finally:
        painter.restore()


__all__ = ['PenStyle', 'stroke_path']
