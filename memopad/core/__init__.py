"""Drawing engine for MemoPad"""

from .stroke_tracker import StrokeTracker, FinishedStroke, PathSegment, SegmentKind
from .pen_style import PenStyle
from .compositing_surface import CompositingSurface, SurfaceSnapshot
from .style_selector import CanvasListener, StyleSelector
from .drawing_session import DrawingSession

__all__ = [
    'StrokeTracker',
    'FinishedStroke',
    'PathSegment',
    'SegmentKind',
    'PenStyle',
    'CompositingSurface',
    'SurfaceSnapshot',
    'CanvasListener',
    'StyleSelector',
    'DrawingSession',
]
