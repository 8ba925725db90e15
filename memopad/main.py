"""
MemoPad - Main Entry Point

A freehand drawing pad with PNG export.

Usage:
    python -m memopad.main
"""

import sys

from PyQt6.QtWidgets import QApplication

from .config import Config
from .utils.logging_config import LoggingConfig


def setup_application() -> QApplication:
    """
    Initialize and configure the Qt application

    Returns:
        Configured QApplication instance
    """
    app = QApplication(sys.argv)

    # Set application metadata
    app.setApplicationName(Config.APP_NAME)
    app.setApplicationVersion(Config.APP_VERSION)
    app.setOrganizationName(Config.APP_AUTHOR)

    return app


def main():
    """
    Main entry point for MemoPad

    Creates the application, sets up the main window, and runs the event loop.
    """
    # Setup logging first
    LoggingConfig.setup_logging(Config.get_log_dir())

    logger = LoggingConfig.get_logger(__name__)
    logger.info(f"Starting {Config.APP_NAME} {Config.APP_VERSION}...")
    logger.info(f"Exports: {Config.get_export_dir()}")

    app = setup_application()

    # Create and show main window
    from .widgets.main_window import MainWindow
    window = MainWindow()
    window.show()

    logger.info("Application started successfully!")

    # Run event loop
    exit_code = app.exec()
    logger.info("Shutting down")
    LoggingConfig.shutdown()
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
