"""UI Widgets for MemoPad"""

from .paint_view import PaintView
from .main_window import MainWindow, PresetCanvasListener
