"""
Logging setup for the idle timer runtime.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Optional

from loguru import logger as _logger

_LOG_INITIALISED = False
APP_DIR_NAME = "Idle Timer"


def default_log_dir(platform: str = sys.platform, environ=None) -> Path:
    """Per-user log directory for the host platform, honouring IDLE_TIMER_LOG_DIR."""
    environ = os.environ if environ is None else environ
    override = environ.get("IDLE_TIMER_LOG_DIR")
    if override:
        return Path(override)
    home = Path.home()
    if platform.startswith("win"):
        return Path(environ.get("LOCALAPPDATA") or home / "AppData" / "Local") / APP_DIR_NAME
    if platform == "darwin":
        return home / "Library" / "Logs" / APP_DIR_NAME
    state_home = environ.get("XDG_STATE_HOME") or home / ".local" / "state"
    return Path(state_home) / "idle-timer"


LOG_DIR = default_log_dir()
DEFAULT_LOG_PATH = LOG_DIR / "idle_timer.log"


def configure(log_path: Optional[Path] = None) -> None:
    """
    Configure loguru for the application.

    Runs once per process; later calls are ignored so library modules can
    request the logger at import time without clobbering the entry point's sinks.
    """
    global _LOG_INITIALISED
    if _LOG_INITIALISED:
        return
    target = log_path or DEFAULT_LOG_PATH
    target.parent.mkdir(parents=True, exist_ok=True)

    # Keep console output and add a persistent file sink.
    _logger.remove()
    if sys.stderr is not None:
        _logger.add(sys.stderr, level="INFO", enqueue=True)
    _logger.add(
        target,
        level="DEBUG",
        rotation="10 MB",
        retention=5,
        encoding="utf-8",
        enqueue=True,
        backtrace=True,
        diagnose=False,
    )
    _LOG_INITIALISED = True


def get_logger():
    """Return the shared logger instance."""
    configure()
    return _logger
