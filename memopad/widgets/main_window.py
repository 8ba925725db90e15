"""
MainWindow - Host window for the drawing surface

Owns the style option tables (through PresetCanvasListener) and the
toolbar commands: next pen color, next pen size, next background,
clear and save as PNG.
"""

import logging
from typing import List, Optional

from PyQt6.QtWidgets import QMainWindow, QToolBar, QWidget
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QKeySequence

from ..config import Config
from ..core.drawing_session import DrawingSession
from ..core.style_selector import CanvasListener
from ..events.event_bus import get_event_bus
from ..services.png_export_service import PngExportService
from ..utils.color_presets import (
    PEN_COLOR_PRESETS,
    PEN_SIZE_PRESETS,
    BACKGROUND_PRESETS,
    StylePreset,
)
from .paint_view import PaintView

logger = logging.getLogger(__name__)


class PresetCanvasListener(CanvasListener):
    """Resolves style indices against the preset tables."""

    def __init__(
        self,
        pen_colors: Optional[List[StylePreset]] = None,
        pen_sizes: Optional[List[StylePreset]] = None,
        backgrounds: Optional[List[StylePreset]] = None
    ):
        self.pen_colors = PEN_COLOR_PRESETS if pen_colors is None else pen_colors
        self.pen_sizes = PEN_SIZE_PRESETS if pen_sizes is None else pen_sizes
        self.backgrounds = BACKGROUND_PRESETS if backgrounds is None else backgrounds

        if not (self.pen_colors and self.pen_sizes and self.backgrounds):
            raise ValueError("Option tables must not be empty")

        # Names of the currently selected options (for menu labels)
        self.pen_color_name = self.pen_colors[0]["name"]
        self.pen_size_name = self.pen_sizes[0]["name"]
        self.bg_color_name = self.backgrounds[0]["name"]

    def pen_color_changed(self, pen_color_index: int) -> int:
        preset = self.pen_colors[pen_color_index]
        self.pen_color_name = preset["name"]
        return preset["argb"]

    def pen_size_changed(self, pen_size_index: int) -> float:
        preset = self.pen_sizes[pen_size_index]
        self.pen_size_name = preset["name"]
        return preset["width"]

    def bg_color_changed(self, bg_color_index: int) -> int:
        preset = self.backgrounds[bg_color_index]
        self.bg_color_name = preset["name"]
        return preset["argb"]


class MainWindow(QMainWindow):
    """Application main window."""

    def __init__(self, export_service: Optional[PngExportService] = None, parent: Optional[QWidget] = None):
        super().__init__(parent)

        self._event_bus = get_event_bus()
        self._listener = PresetCanvasListener()
        self._session = DrawingSession(listener=self._listener, event_bus=self._event_bus)
        self._export_service = export_service or PngExportService(parent=self)

        self._paint_view = PaintView(self._session, self)
        self.setCentralWidget(self._paint_view)

        self.setWindowTitle(f"{Config.APP_NAME} {Config.APP_VERSION}")
        self.resize(Config.DEFAULT_WINDOW_WIDTH, Config.DEFAULT_WINDOW_HEIGHT)

        self._create_actions()
        self._create_toolbar()
        self._connect_signals()

        # Select the first option of every table
        self._session.apply_styles()
        self._update_action_labels()

    @property
    def session(self) -> DrawingSession:
        return self._session

    @property
    def paint_view(self) -> PaintView:
        return self._paint_view

    def _create_actions(self):
        self._pen_color_action = QAction(self)
        self._pen_color_action.setShortcut(QKeySequence("C"))
        self._pen_color_action.triggered.connect(self._on_next_pen_color)

        self._pen_size_action = QAction(self)
        self._pen_size_action.setShortcut(QKeySequence("S"))
        self._pen_size_action.triggered.connect(self._on_next_pen_size)

        self._bg_color_action = QAction(self)
        self._bg_color_action.setShortcut(QKeySequence("B"))
        self._bg_color_action.triggered.connect(self._on_next_bg_color)

        self._clear_action = QAction("Clear", self)
        self._clear_action.setShortcut(QKeySequence("Ctrl+Backspace"))
        self._clear_action.triggered.connect(self._session.clear)

        self._save_action = QAction("Save PNG", self)
        self._save_action.setShortcut(QKeySequence.StandardKey.Save)
        self._save_action.triggered.connect(self._on_save)

    def _create_toolbar(self):
        toolbar = QToolBar("Canvas", self)
        toolbar.setMovable(False)
        toolbar.setToolButtonStyle(Qt.ToolButtonStyle.ToolButtonTextOnly)
        for action in (self._pen_color_action, self._pen_size_action,
                       self._bg_color_action, self._clear_action, self._save_action):
            toolbar.addAction(action)
        self.addToolBar(toolbar)

    def _connect_signals(self):
        self._export_service.export_finished.connect(self._on_export_finished)
        self._export_service.export_failed.connect(self._on_export_failed)

    def _update_action_labels(self):
        self._pen_color_action.setText(f"Pen: {self._listener.pen_color_name}")
        self._pen_size_action.setText(f"Size: {self._listener.pen_size_name}")
        self._bg_color_action.setText(f"Background: {self._listener.bg_color_name}")

    # ==================== Slots ====================

    def _on_next_pen_color(self):
        self._session.next_pen_color(len(self._listener.pen_colors))
        self._update_action_labels()

    def _on_next_pen_size(self):
        self._session.next_pen_size(len(self._listener.pen_sizes))
        self._update_action_labels()

    def _on_next_bg_color(self):
        self._session.next_bg_color(len(self._listener.backgrounds))
        self._update_action_labels()

    def _on_save(self):
        self._event_bus.notify_export_started()
        self.statusBar().showMessage("Saving...")
        self._export_service.export_async(self._session.snapshot())

    def _on_export_finished(self, path: str):
        self._event_bus.notify_export_finished(path)
        self.statusBar().showMessage(f"Saved {path}", Config.STATUS_MESSAGE_TIMEOUT_MS)

    def _on_export_failed(self, kind: str, message: str):
        self._event_bus.notify_export_failed(kind, message)
        self.statusBar().showMessage(f"Could not save image: {message}",
                                     Config.STATUS_MESSAGE_TIMEOUT_MS)

    def closeEvent(self, event):
        """Let queued exports finish before the window goes away."""
        if self._export_service.pending_count:
            logger.info("Waiting for pending exports...")
            self._export_service.wait_for_done()
        super().closeEvent(event)


__all__ = ['MainWindow', 'PresetCanvasListener']
