"""
StrokeTracker - Turns raw pointer samples into a smoothed stroke path

Samples closer than the touch tolerance to the previous accepted sample are
dropped as jitter. Accepted samples extend the path with a quadratic segment
whose control point is the previous sample and whose end point is the
midpoint between the previous and current sample, so the curve trails the
pointer by one sample.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Sequence, Tuple, Union

from PyQt6.QtCore import QPointF, QRectF
from PyQt6.QtGui import QPainterPath

from ..config import Config


PointLike = Union[QPointF, Tuple[float, float], Sequence[float]]


def to_point(value: PointLike) -> QPointF:
    """Coerce a QPointF or an (x, y) pair to QPointF."""
    if isinstance(value, QPointF):
        return QPointF(value)
    return QPointF(float(value[0]), float(value[1]))


class SegmentKind(Enum):
    """Path segment types."""
    MOVE = 0    # Start of a subpath
    LINE = 1    # Straight segment
    QUAD = 2    # Quadratic Bezier segment


@dataclass(frozen=True)
class PathSegment:
    """One element of a stroke path."""
    kind: SegmentKind
    end: QPointF
    control: Optional[QPointF] = None

    def apply_to(self, path: QPainterPath):
        """Append this segment to a QPainterPath."""
        if self.kind == SegmentKind.MOVE:
            path.moveTo(self.end)
        elif self.kind == SegmentKind.LINE:
            path.lineTo(self.end)
        elif self.kind == SegmentKind.QUAD:
            path.quadTo(self.control, self.end)


def build_path(segments: Iterable[PathSegment]) -> QPainterPath:
    """Build a QPainterPath from segments."""
    path = QPainterPath()
    for segment in segments:
        segment.apply_to(path)
    return path


@dataclass(frozen=True)
class FinishedStroke:
    """Complete geometry of a stroke, handed over for committing."""
    segments: Tuple[PathSegment, ...] = ()

    def __len__(self) -> int:
        return len(self.segments)

    @property
    def is_empty(self) -> bool:
        return not self.segments

    def to_path(self) -> QPainterPath:
        return build_path(self.segments)

    def bounding_rect(self) -> QRectF:
        """Control-point bounds of the stroke (pen width not included)."""
        return self.to_path().controlPointRect()


class StrokeTracker:
    """
    Builds the in-progress stroke from pointer samples.

    Holds at most one stroke. The previous accepted sample is None exactly
    when no stroke is active.

    Usage:
        tracker = StrokeTracker()
        tracker.start(QPointF(10, 10))
        tracker.replay([(12, 20), (15, 30)], (20, 40))
        stroke = tracker.finish(QPointF(25, 45))
    """

    def __init__(self, tolerance: float = Config.TOUCH_TOLERANCE):
        self._tolerance = tolerance
        self._segments: list = []
        self._prev: Optional[QPointF] = None

    # ==================== Properties ====================

    @property
    def tolerance(self) -> float:
        return self._tolerance

    @property
    def is_active(self) -> bool:
        return self._prev is not None

    @property
    def previous_point(self) -> Optional[QPointF]:
        return QPointF(self._prev) if self._prev is not None else None

    @property
    def segments(self) -> Tuple[PathSegment, ...]:
        return tuple(self._segments)

    @property
    def segment_count(self) -> int:
        return len(self._segments)

    def current_path(self) -> QPainterPath:
        """Path of the in-progress stroke (empty when idle)."""
        return build_path(self._segments)

    # ==================== Capture ====================

    def start(self, pos: PointLike):
        """Begin a new stroke at pos, discarding any unfinished one."""
        pos = to_point(pos)
        self.clear()
        self._segments.append(PathSegment(SegmentKind.MOVE, pos))
        # One pixel line so a tap without drag still leaves a dot
        self._segments.append(
            PathSegment(SegmentKind.LINE, QPointF(pos.x() + 1, pos.y()))
        )
        self._prev = pos

    def extend(self, pos: PointLike) -> bool:
        """
        Extend the stroke towards pos.

        Returns:
            True if a segment was appended, False if the sample was
            treated as jitter or no stroke is active
        """
        if self._prev is None:
            return False

        pos = to_point(pos)
        prev = self._prev
        if (abs(pos.x() - prev.x()) < self._tolerance
                and abs(pos.y() - prev.y()) < self._tolerance):
            return False

        midpoint = QPointF((prev.x() + pos.x()) / 2, (prev.y() + pos.y()) / 2)
        self._segments.append(PathSegment(SegmentKind.QUAD, midpoint, prev))
        self._prev = pos
        return True

    def replay(self, history: Iterable[PointLike], pos: PointLike) -> int:
        """
        Feed batched historical samples, then the live sample, through extend.

        Returns:
            Number of segments appended
        """
        appended = 0
        for sample in history:
            if self.extend(sample):
                appended += 1
        if self.extend(pos):
            appended += 1
        return appended

    def finish(self, pos: PointLike) -> FinishedStroke:
        """Close the stroke with a straight segment to pos and reset."""
        if self._prev is None:
            return FinishedStroke()

        self._segments.append(PathSegment(SegmentKind.LINE, to_point(pos)))
        stroke = FinishedStroke(tuple(self._segments))
        self.clear()
        return stroke

    def clear(self):
        """Drop the in-progress stroke."""
        self._segments = []
        self._prev = None


__all__ = [
    'SegmentKind',
    'PathSegment',
    'FinishedStroke',
    'StrokeTracker',
    'build_path',
    'to_point',
]
