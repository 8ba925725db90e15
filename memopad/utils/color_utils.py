"""Color conversion utilities

Colors cross the UI/engine boundary as 32-bit ARGB integers (0xAARRGGBB).
These helpers convert between that form, QColor and hex strings.
"""

from PyQt6.QtGui import QColor


def argb_to_qcolor(argb: int) -> QColor:
    """Convert an ARGB integer to QColor

    Args:
        argb: Color as 0xAARRGGBB

    Returns:
        QColor with matching alpha

    Example:
        >>> argb_to_qcolor(0xFFFF0000).name()
        '#ff0000'
    """
    argb &= 0xFFFFFFFF
    return QColor(
        (argb >> 16) & 0xFF,
        (argb >> 8) & 0xFF,
        argb & 0xFF,
        (argb >> 24) & 0xFF
    )


def qcolor_to_argb(color: QColor) -> int:
    """Convert QColor to an ARGB integer (0xAARRGGBB)"""
    return (
        (color.alpha() << 24)
        | (color.red() << 16)
        | (color.green() << 8)
        | color.blue()
    )


def hex_to_argb(hex_color: str) -> int:
    """
    Convert hex color to ARGB integer

    Args:
        hex_color: '#RGB', '#RRGGBB' or '#AARRGGBB' (leading '#' optional)

    Returns:
        ARGB integer; colors without alpha are fully opaque
    """
    hex_color = hex_color.lstrip('#')
    # Handle 3-digit hex codes
    if len(hex_color) == 3:
        hex_color = ''.join([c*2 for c in hex_color])
    if len(hex_color) == 6:
        hex_color = 'FF' + hex_color
    if len(hex_color) != 8:
        raise ValueError(f"Invalid hex color: #{hex_color}")
    return int(hex_color, 16)


def argb_to_hex(argb: int) -> str:
    """Convert ARGB integer to '#AARRGGBB'"""
    return '#{:08X}'.format(argb & 0xFFFFFFFF)


__all__ = [
    'argb_to_qcolor',
    'qcolor_to_argb',
    'hex_to_argb',
    'argb_to_hex',
]
