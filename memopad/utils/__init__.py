"""Utility functions for MemoPad"""

from .color_utils import argb_to_qcolor, qcolor_to_argb, hex_to_argb, argb_to_hex
from .color_presets import (
    PEN_COLOR_PRESETS,
    PEN_SIZE_PRESETS,
    BACKGROUND_PRESETS,
    get_preset_by_name,
)
from .logging_config import LoggingConfig

__all__ = [
    'argb_to_qcolor',
    'qcolor_to_argb',
    'hex_to_argb',
    'argb_to_hex',
    'PEN_COLOR_PRESETS',
    'PEN_SIZE_PRESETS',
    'BACKGROUND_PRESETS',
    'get_preset_by_name',
    'LoggingConfig',
]
