"""
EventBus - Central event system for drawing state changes

Pattern: Observer/Publisher-Subscriber
"""

from typing import Optional

from PyQt6.QtCore import QObject, pyqtSignal


class EventBus(QObject):
    """
    Central event bus for decoupled communication between components

    Usage:
        event_bus = get_event_bus()
        event_bus.stroke_committed.connect(some_handler)
    """

    # Drawing events
    stroke_started = pyqtSignal()
    stroke_committed = pyqtSignal(int)  # segment count
    canvas_cleared = pyqtSignal()
    surface_resized = pyqtSignal(int, int)  # width, height

    # Style events
    pen_style_changed = pyqtSignal(object, float)  # argb (unsigned 32 bit), width
    background_changed = pyqtSignal(object)  # argb (unsigned 32 bit)

    # Export events
    export_started = pyqtSignal()
    export_finished = pyqtSignal(str)  # file path
    export_failed = pyqtSignal(str, str)  # error kind, error message

    def __init__(self):
        super().__init__()

        # State storage
        self._last_export_path: Optional[str] = None
        self._export_in_progress: bool = False

    # Getters (read current state)

    def get_last_export_path(self) -> Optional[str]:
        """Get path of the most recent successful export"""
        return self._last_export_path

    def is_export_in_progress(self) -> bool:
        """Check if an export is running"""
        return self._export_in_progress

    # Setters (update state and emit)

    def notify_export_started(self):
        self._export_in_progress = True
        self.export_started.emit()

    def notify_export_finished(self, path: str):
        self._export_in_progress = False
        self._last_export_path = path
        self.export_finished.emit(path)

    def notify_export_failed(self, kind: str, message: str):
        self._export_in_progress = False
        self.export_failed.emit(kind, message)


# Singleton instance
_event_bus_instance: Optional[EventBus] = None


def get_event_bus() -> EventBus:
    """
    Get global EventBus singleton instance

    Returns:
        Global EventBus instance
    """
    global _event_bus_instance
    if _event_bus_instance is None:
        _event_bus_instance = EventBus()
    return _event_bus_instance


__all__ = ['EventBus', 'get_event_bus']
