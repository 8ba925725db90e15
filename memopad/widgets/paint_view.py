"""
PaintView - Drawing widget backed by a DrawingSession

Translates Qt mouse, tablet and touch input into the session's pointer
contract and paints the composed surface.
"""

from typing import Optional

from PyQt6.QtWidgets import QWidget
from PyQt6.QtCore import Qt, QEvent
from PyQt6.QtGui import QPainter, QCursor, QTabletEvent, QTouchEvent, QEventPoint

from ..core.drawing_session import DrawingSession


class PaintView(QWidget):
    """
    Freehand drawing surface.

    Only one stroke is tracked at a time; additional touch points are ignored.
    """

    def __init__(self, session: Optional[DrawingSession] = None, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self._session = session or DrawingSession()
        self._session.set_redraw_callback(self.update)

        self._tablet_device_down = False
        self._touch_id: Optional[int] = None

        self._setup_view()

    def _setup_view(self):
        """Configure the widget."""
        self.setAttribute(Qt.WidgetAttribute.WA_OpaquePaintEvent, True)
        self.setAttribute(Qt.WidgetAttribute.WA_AcceptTouchEvents, True)
        self.setAttribute(Qt.WidgetAttribute.WA_TabletTracking, True)
        self.setCursor(QCursor(Qt.CursorShape.CrossCursor))
        self.setMinimumSize(64, 64)

    @property
    def session(self) -> DrawingSession:
        return self._session

    # ==================== Paint / Resize ====================

    def paintEvent(self, event):
        painter = QPainter(self)
        try:
            self._session.surface.paint(painter)
        finally:
            painter.end()

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self._session.resize(self.width(), self.height(), self.devicePixelRatioF())

    # ==================== Event Interception (Touch) ====================

    def event(self, event):
        """Handle touch events before Qt synthesizes mouse events from them."""
        event_type = event.type()

        if event_type in (QEvent.Type.TouchBegin, QEvent.Type.TouchUpdate,
                          QEvent.Type.TouchEnd, QEvent.Type.TouchCancel):
            self._handle_touch_event(event)
            return True

        return super().event(event)

    def _handle_touch_event(self, event: QTouchEvent):
        event_type = event.type()

        if event_type == QEvent.Type.TouchCancel:
            self._touch_id = None
            self._session.cancel_stroke()
            return

        for point in event.points():
            # Scene positions are window-relative for widgets
            pos = self.mapFrom(self.window(), point.scenePosition())
            state = point.state()

            if self._touch_id is None and state == QEventPoint.State.Pressed:
                self._touch_id = point.id()
                self._session.pointer_down(pos.x(), pos.y())
            elif point.id() != self._touch_id:
                continue
            elif state == QEventPoint.State.Released:
                self._session.pointer_up(pos.x(), pos.y())
                self._touch_id = None
            elif state == QEventPoint.State.Updated:
                self._session.pointer_move(pos.x(), pos.y())

        event.accept()

    # ==================== Tablet Events ====================

    def tabletEvent(self, event: QTabletEvent):
        event_type = event.type()
        pos = event.position()

        if event_type == QEvent.Type.TabletPress:
            self._tablet_device_down = True
            self._session.pointer_down(pos.x(), pos.y())
        elif event_type == QEvent.Type.TabletMove:
            if self._tablet_device_down:
                self._session.pointer_move(pos.x(), pos.y())
        elif event_type == QEvent.Type.TabletRelease:
            if self._tablet_device_down:
                self._session.pointer_up(pos.x(), pos.y())
            self._tablet_device_down = False

        event.accept()

    # ==================== Mouse Events ====================

    def mousePressEvent(self, event):
        if self._tablet_device_down:
            event.ignore()
            return

        if event.button() == Qt.MouseButton.LeftButton:
            pos = event.position()
            self._session.pointer_down(pos.x(), pos.y())
            event.accept()
        else:
            super().mousePressEvent(event)

    def mouseMoveEvent(self, event):
        if self._tablet_device_down:
            event.ignore()
            return

        if event.buttons() & Qt.MouseButton.LeftButton:
            pos = event.position()
            self._session.pointer_move(pos.x(), pos.y())
            event.accept()
        else:
            super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        if self._tablet_device_down:
            event.ignore()
            return

        if event.button() == Qt.MouseButton.LeftButton:
            pos = event.position()
            self._session.pointer_up(pos.x(), pos.y())
            event.accept()
        else:
            super().mouseReleaseEvent(event)


__all__ = ['PaintView']
