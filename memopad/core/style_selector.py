"""
StyleSelector - Rotating option indices for pen color, pen size and background

The host UI owns the concrete option tables. The selector only keeps the
three current indices, and on every change asks the attached CanvasListener
for the value behind the new index and applies it to the surface.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from .compositing_surface import CompositingSurface

logger = logging.getLogger(__name__)


class CanvasListener(ABC):
    """Host-side owner of the style option tables."""

    @abstractmethod
    def pen_color_changed(self, pen_color_index: int) -> int:
        """Notify the pen color index changed and return its ARGB value."""

    @abstractmethod
    def pen_size_changed(self, pen_size_index: int) -> float:
        """Notify the pen size index changed and return the width in px."""

    @abstractmethod
    def bg_color_changed(self, bg_color_index: int) -> int:
        """Notify the background index changed and return its ARGB value."""


class StyleSelector:
    """
    Cycles the three style indices and applies the resolved values.

    All indices start at 0. Without a listener the indices still rotate
    but nothing is applied.
    """

    def __init__(self, surface: CompositingSurface, listener: Optional[CanvasListener] = None):
        self._surface = surface
        self._listener = listener
        self._pen_color_index = 0
        self._pen_size_index = 0
        self._bg_color_index = 0

    # ==================== Properties ====================

    @property
    def listener(self) -> Optional[CanvasListener]:
        return self._listener

    @property
    def pen_color_index(self) -> int:
        return self._pen_color_index

    @property
    def pen_size_index(self) -> int:
        return self._pen_size_index

    @property
    def bg_color_index(self) -> int:
        return self._bg_color_index

    def attach_listener(self, listener: CanvasListener):
        self._listener = listener

    def detach_listener(self):
        self._listener = None

    # ==================== Select Next ====================

    def select_next_pen_color(self, pen_color_count: int) -> int:
        """Advance to the next pen color and apply it. Returns the new index."""
        self._pen_color_index = _advance(self._pen_color_index, pen_color_count)
        self.apply_pen_color()
        return self._pen_color_index

    def select_next_pen_size(self, pen_size_count: int) -> int:
        """Advance to the next pen size and apply it. Returns the new index."""
        self._pen_size_index = _advance(self._pen_size_index, pen_size_count)
        self.apply_pen_size()
        return self._pen_size_index

    def select_next_bg_color(self, bg_color_count: int) -> int:
        """Advance to the next background color and apply it. Returns the new index."""
        self._bg_color_index = _advance(self._bg_color_index, bg_color_count)
        self.apply_bg_color()
        return self._bg_color_index

    # ==================== Apply ====================

    def apply_pen_color(self) -> bool:
        if self._listener is None:
            return False
        argb = self._listener.pen_color_changed(self._pen_color_index)
        self._surface.set_pen_color(argb)
        logger.debug(f"Pen color #{self._pen_color_index} -> {argb:#010x}")
        return True

    def apply_pen_size(self) -> bool:
        if self._listener is None:
            return False
        width = self._listener.pen_size_changed(self._pen_size_index)
        self._surface.set_pen_width(width)
        logger.debug(f"Pen size #{self._pen_size_index} -> {width}")
        return True

    def apply_bg_color(self) -> bool:
        if self._listener is None:
            return False
        argb = self._listener.bg_color_changed(self._bg_color_index)
        self._surface.set_background_color(argb)
        logger.debug(f"Background #{self._bg_color_index} -> {argb:#010x}")
        return True

    def apply_all(self):
        """Push all current indices through the listener (initial sync)."""
        self.apply_pen_color()
        self.apply_pen_size()
        self.apply_bg_color()


def _advance(index: int, count: int) -> int:
    if count <= 0:
        raise ValueError(f"Option count must be positive, got {count}")
    return (index + 1) % count


__all__ = ['CanvasListener', 'StyleSelector']
