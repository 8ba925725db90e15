"""MemoPad - freehand drawing pad with PNG export"""

__version__ = "1.0.0"
