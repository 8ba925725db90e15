"""
Global configuration for MemoPad

Stroke capture constants, default pen/background values and
the on-disk locations used for logs and PNG exports.
"""

import os
import sys
from pathlib import Path
from typing import Final


class Config:
    """Central configuration class for all application settings"""

    # Application metadata
    APP_NAME: Final[str] = "MemoPad"
    APP_VERSION: Final[str] = "1.0.0"
    APP_AUTHOR: Final[str] = "zakky"

    # Paths
    APP_ROOT: Final[Path] = Path(__file__).parent

    # Stroke capture
    TOUCH_TOLERANCE: Final[float] = 4.0  # Movement below this (px, both axes) is jitter

    # Pen defaults (ARGB)
    DEFAULT_PEN_COLOR: Final[int] = 0xFF000000
    DEFAULT_PEN_WIDTH: Final[float] = 12.0
    SOFT_EDGE_RADIUS: Final[float] = 1.0
    SOFT_EDGE_ALPHA: Final[float] = 0.35  # Feather pass opacity relative to pen

    # Background default (ARGB)
    DEFAULT_BACKGROUND_COLOR: Final[int] = 0xFFFFFFFF

    # Export settings
    PNG_QUALITY: Final[int] = 100
    EXPORT_FILENAME_PREFIX: Final[str] = "image-"
    EXPORT_EXTENSION: Final[str] = "png"
    EXPORT_MAX_NAME_ATTEMPTS: Final[int] = 1000
    EXPORT_RETRY_DELAY_MS: Final[int] = 10
    EXPORT_THREAD_COUNT: Final[int] = 1
    EXPORT_DIR_ENV: Final[str] = "MEMOPAD_EXPORT_DIR"

    # Logging
    LOG_MAX_BYTES: Final[int] = 1024 * 1024
    LOG_BACKUP_COUNT: Final[int] = 3

    # Window settings
    DEFAULT_WINDOW_WIDTH: Final[int] = 800
    DEFAULT_WINDOW_HEIGHT: Final[int] = 600
    STATUS_MESSAGE_TIMEOUT_MS: Final[int] = 4000

    @classmethod
    def get_user_data_dir(cls) -> Path:
        """
        Get user data directory.

        Uses system AppData/Local (Windows), Application Support (macOS)
        or .local/share (Linux).
        """
        if sys.platform == 'win32':
            base_path = Path(os.environ.get('LOCALAPPDATA', os.path.expanduser('~')))
            user_dir = base_path / cls.APP_NAME
        elif sys.platform == 'darwin':
            user_dir = Path.home() / 'Library' / 'Application Support' / cls.APP_NAME
        else:
            user_dir = Path.home() / '.local' / 'share' / cls.APP_NAME

        user_dir.mkdir(parents=True, exist_ok=True)
        return user_dir

    @classmethod
    def get_log_dir(cls) -> Path:
        """Get log directory"""
        return cls.get_user_data_dir() / 'logs'

    @classmethod
    def get_export_dir(cls) -> Path:
        """
        Get the directory PNG exports are written to.

        Named after the application. The directory is not created here;
        the export service creates it on demand so that failures can be
        reported as export failures.

        Returns:
            MEMOPAD_EXPORT_DIR if set, otherwise ~/Pictures/MemoPad
        """
        override = os.environ.get(cls.EXPORT_DIR_ENV)
        if override:
            return Path(override)
        return Path.home() / 'Pictures' / cls.APP_NAME


# Export for convenient imports
__all__ = ['Config']
