"""
Centralized logging configuration for MemoPad

Application records go to a size-rotated log file and the console. Qt's own
diagnostics (qDebug/qWarning from the platform plugins, QPainter and image
IO) are routed into the same handlers under the "qt" logger.
"""
import logging
import logging.handlers
import sys
from pathlib import Path

from PyQt6.QtCore import QtMsgType, qInstallMessageHandler

from ..config import Config


_QT_LOG_LEVELS = {
    QtMsgType.QtDebugMsg: logging.DEBUG,
    QtMsgType.QtInfoMsg: logging.INFO,
    QtMsgType.QtWarningMsg: logging.WARNING,
    QtMsgType.QtCriticalMsg: logging.ERROR,
    QtMsgType.QtFatalMsg: logging.CRITICAL,
}


def qt_message_handler(msg_type, context, message):
    """Forward a Qt diagnostic message to the "qt" logger."""
    level = _QT_LOG_LEVELS.get(msg_type, logging.INFO)
    logging.getLogger("qt").log(level, message)


class LoggingConfig:
    """Central logging configuration"""

    _initialized = False
    _log_file_path = None
    _handlers = []
    _previous_qt_handler = None

    @classmethod
    def setup_logging(cls, log_dir: Path):
        """Setup logging system"""
        if cls._initialized:
            return

        log_dir.mkdir(parents=True, exist_ok=True)
        cls._log_file_path = log_dir / "memopad.log"

        # Root logger
        logger = logging.getLogger()
        logger.setLevel(logging.DEBUG)

        # File handler, rotated so long drawing sessions don't grow it unbounded
        file_handler = logging.handlers.RotatingFileHandler(
            cls._log_file_path,
            maxBytes=Config.LOG_MAX_BYTES,
            backupCount=Config.LOG_BACKUP_COUNT,
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_formatter = logging.Formatter(
            '%(asctime)s [%(levelname)s] %(name)s: %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        file_handler.setFormatter(file_formatter)
        logger.addHandler(file_handler)

        # Console handler (for terminal output)
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(logging.INFO)
        console_formatter = logging.Formatter('[%(levelname)s] %(message)s')
        console_handler.setFormatter(console_formatter)
        logger.addHandler(console_handler)

        cls._handlers = [file_handler, console_handler]
        cls._previous_qt_handler = qInstallMessageHandler(qt_message_handler)

        cls._initialized = True
        logger.info("Logging system initialized")

    @classmethod
    def shutdown(cls):
        """Detach the handlers installed by setup_logging and flush the log file."""
        if not cls._initialized:
            return

        qInstallMessageHandler(cls._previous_qt_handler)
        cls._previous_qt_handler = None
        root = logging.getLogger()
        for handler in cls._handlers:
            root.removeHandler(handler)
            handler.close()

        cls._handlers = []
        cls._initialized = False

    @classmethod
    def get_logger(cls, name: str):
        """Get a logger instance"""
        return logging.getLogger(name)

    @classmethod
    def get_log_file_path(cls) -> Path:
        """Get the log file path"""
        return cls._log_file_path


__all__ = ['LoggingConfig', 'qt_message_handler']
