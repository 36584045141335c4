"""
Entry point for the idle timer demo application.
"""

from __future__ import annotations

import sys
from typing import Iterable

from PySide6.QtWidgets import QApplication

from core.app import APP_NAME, AppCoordinator
from idle_timer_core.idle_timer_core import logger as app_logger
from shared.options import ConfigurationError

_LOGGER = app_logger.get_logger()


def run(argv: Iterable[str]) -> int:
    """Start the Qt application and block until the event loop exits."""
    app = QApplication(list(argv))
    app.setApplicationName(APP_NAME)
    try:
        coordinator = AppCoordinator()
    except ConfigurationError as exc:
        _LOGGER.error("Invalid idle timer configuration: {}", exc)
        return 2
    app.aboutToQuit.connect(coordinator.shutdown)
    coordinator.start()
    return app.exec()


def main() -> int:
    return run(sys.argv)


if __name__ == "__main__":
    raise SystemExit(main())
