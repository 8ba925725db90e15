"""
Style Presets - Built-in option tables for pen color, pen size and background

The drawing engine only knows option indices; these tables are owned by the
host window and map an index to a concrete value.
"""

from typing import List, Dict, Optional


# Option preset type definition
StylePreset = Dict[str, any]


# Each pen color preset has: name, argb value
PEN_COLOR_PRESETS: List[StylePreset] = [
    {"name": "Black", "argb": 0xFF000000},
    {"name": "Red", "argb": 0xFFE53935},
    {"name": "Blue", "argb": 0xFF1E88E5},
    {"name": "Green", "argb": 0xFF43A047},
    {"name": "Orange", "argb": 0xFFFB8C00},
    {"name": "White", "argb": 0xFFFFFFFF},
]

# Each pen size preset has: name, width in pixels
PEN_SIZE_PRESETS: List[StylePreset] = [
    {"name": "Medium", "width": 12.0},
    {"name": "Large", "width": 24.0},
    {"name": "Extra Large", "width": 48.0},
    {"name": "Fine", "width": 3.0},
    {"name": "Small", "width": 6.0},
]

# Each background preset has: name, argb value
BACKGROUND_PRESETS: List[StylePreset] = [
    {"name": "White", "argb": 0xFFFFFFFF},
    {"name": "Cream", "argb": 0xFFFFF8E1},
    {"name": "Gray", "argb": 0xFFE0E0E0},
    {"name": "Blackboard", "argb": 0xFF263238},
]


def get_preset_by_name(presets: List[StylePreset], name: str) -> Optional[StylePreset]:
    """
    Get a preset from a table by name.

    Args:
        presets: One of the preset tables
        name: Preset name (case-insensitive)

    Returns:
        Preset dict or None if not found
    """
    name_lower = name.lower()
    for preset in presets:
        if preset["name"].lower() == name_lower:
            return preset
    return None


__all__ = [
    'PEN_COLOR_PRESETS',
    'PEN_SIZE_PRESETS',
    'BACKGROUND_PRESETS',
    'StylePreset',
    'get_preset_by_name',
]
