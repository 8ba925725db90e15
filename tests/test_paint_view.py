"""Tests for memopad.widgets.paint_view"""

import pytest
from PyQt6.QtCore import QEvent, QPointF, Qt
from PyQt6.QtGui import (
    QEventPoint,
    QMouseEvent,
    QPointingDevice,
    QTabletEvent,
    QTouchEvent,
)

from memopad.core.drawing_session import DrawingSession
from memopad.core.pen_style import PenStyle
from memopad.widgets.paint_view import PaintView

WHITE = 0xFFFFFFFF
BLACK = 0xFF000000

LEFT = Qt.MouseButton.LeftButton
NO_BUTTON = Qt.MouseButton.NoButton
NO_MODIFIER = Qt.KeyboardModifier.NoModifier

PRESSED = QEventPoint.State.Pressed
UPDATED = QEventPoint.State.Updated
RELEASED = QEventPoint.State.Released


def mouse_event(kind, x, y, button=LEFT, buttons=LEFT):
    pos = QPointF(x, y)
    return QMouseEvent(kind, pos, pos, button, buttons, NO_MODIFIER)


def press(x, y):
    return mouse_event(QEvent.Type.MouseButtonPress, x, y)


def move(x, y):
    return mouse_event(QEvent.Type.MouseMove, x, y, button=NO_BUTTON)


def release(x, y):
    return mouse_event(QEvent.Type.MouseButtonRelease, x, y, buttons=NO_BUTTON)


def tablet_event(kind, x, y):
    pos = QPointF(x, y)
    buttons = NO_BUTTON if kind == QEvent.Type.TabletRelease else LEFT
    return QTabletEvent(
        kind, QPointingDevice.primaryPointingDevice(), pos, pos,
        0.5, 0.0, 0.0, 0.0, 0.0, 0.0, NO_MODIFIER, LEFT, buttons
    )


def touch_event(kind, *points):
    """Build a touch event from (id, state, x, y) tuples."""
    event_points = [
        QEventPoint(point_id, state, QPointF(x, y), QPointF(x, y))
        for point_id, state, x, y in points
    ]
    return QTouchEvent(kind, QPointingDevice.primaryPointingDevice(), NO_MODIFIER, event_points)


@pytest.fixture
def session(event_bus):
    session = DrawingSession(event_bus=event_bus, pen_style=PenStyle(color=BLACK, width=6.0))
    session.resize(100, 100)
    return session


@pytest.fixture
def view(session):
    view = PaintView(session)
    yield view
    view.close()


def test_mouse_drag_commits_stroke(view, session, event_bus):
    committed = []
    event_bus.stroke_committed.connect(committed.append)

    view.mousePressEvent(press(10, 10))
    view.mouseMoveEvent(move(50, 50))
    view.mouseReleaseEvent(release(80, 80))

    assert committed == [4]
    assert not session.tracker.is_active
    assert session.surface.render().pixel(60, 60) == BLACK


def test_mouse_move_without_button_is_ignored(view, session):
    view.mousePressEvent(press(10, 10))
    view.mouseMoveEvent(move(50, 50))
    before = session.tracker.segment_count

    view.mouseMoveEvent(mouse_event(QEvent.Type.MouseMove, 90, 90, button=NO_BUTTON, buttons=NO_BUTTON))

    assert session.tracker.segment_count == before


def test_tablet_stroke_commits(view, session):
    view.tabletEvent(tablet_event(QEvent.Type.TabletPress, 10, 10))
    view.tabletEvent(tablet_event(QEvent.Type.TabletMove, 50, 50))
    view.tabletEvent(tablet_event(QEvent.Type.TabletRelease, 80, 80))

    assert not session.tracker.is_active
    assert session.surface.render().pixel(60, 60) == BLACK


def test_mouse_ignored_while_tablet_is_down(view, session):
    view.tabletEvent(tablet_event(QEvent.Type.TabletPress, 20, 20))

    mouse_press = press(70, 70)
    view.mousePressEvent(mouse_press)
    mouse_release = release(90, 90)
    view.mouseReleaseEvent(mouse_release)

    assert not mouse_press.isAccepted()
    assert not mouse_release.isAccepted()
    assert session.tracker.is_active
    assert session.tracker.previous_point == QPointF(20, 20)


def test_mouse_works_again_after_tablet_release(view, session):
    view.tabletEvent(tablet_event(QEvent.Type.TabletPress, 20, 20))
    view.tabletEvent(tablet_event(QEvent.Type.TabletRelease, 20, 20))

    view.mousePressEvent(press(70, 70))

    assert session.tracker.previous_point == QPointF(70, 70)


def test_touch_stroke_commits(view, session):
    assert view.event(touch_event(QEvent.Type.TouchBegin, (1, PRESSED, 10, 10)))
    view.event(touch_event(QEvent.Type.TouchUpdate, (1, UPDATED, 50, 50)))
    view.event(touch_event(QEvent.Type.TouchEnd, (1, RELEASED, 80, 80)))

    assert not session.tracker.is_active
    assert session.surface.render().pixel(60, 60) == BLACK


def test_second_touch_point_is_ignored(view, session, event_bus):
    committed = []
    event_bus.stroke_committed.connect(committed.append)

    view.event(touch_event(QEvent.Type.TouchBegin, (1, PRESSED, 10, 10)))
    view.event(touch_event(QEvent.Type.TouchUpdate, (1, UPDATED, 40, 40), (2, PRESSED, 90, 10)))
    view.event(touch_event(QEvent.Type.TouchUpdate, (2, UPDATED, 90, 90)))

    assert session.tracker.previous_point == QPointF(40, 40)

    view.event(touch_event(QEvent.Type.TouchUpdate, (2, RELEASED, 90, 90)))
    assert session.tracker.is_active

    view.event(touch_event(QEvent.Type.TouchEnd, (1, RELEASED, 60, 60)))

    assert committed == [4]
    frame = session.surface.render()
    assert frame.pixel(50, 50) == BLACK
    assert frame.pixel(90, 50) == WHITE


def test_new_touch_starts_after_release(view, session):
    view.event(touch_event(QEvent.Type.TouchBegin, (1, PRESSED, 10, 10)))
    view.event(touch_event(QEvent.Type.TouchEnd, (1, RELEASED, 10, 10)))
    view.event(touch_event(QEvent.Type.TouchBegin, (7, PRESSED, 70, 30)))

    assert session.tracker.previous_point == QPointF(70, 30)


def test_touch_cancel_drops_stroke_only(view, session):
    view.mousePressEvent(press(10, 10))
    view.mouseReleaseEvent(release(80, 80))
    committed_before = session.surface.committed_layer()

    view.event(touch_event(QEvent.Type.TouchBegin, (5, PRESSED, 10, 90)))
    view.event(touch_event(QEvent.Type.TouchUpdate, (5, UPDATED, 90, 10)))
    assert session.surface.render().pixel(20, 80) == BLACK

    view.event(touch_event(QEvent.Type.TouchCancel))

    assert not session.tracker.is_active
    assert session.surface.committed_layer() == committed_before
    frame = session.surface.render()
    assert frame.pixel(20, 80) == WHITE
    assert frame.pixel(50, 50) == BLACK
