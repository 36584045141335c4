"""
Application coordinator wiring the idle timer to Qt input, lifecycle and UI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Optional

from PySide6.QtCore import QObject, QTimer
from PySide6.QtWidgets import QApplication

from core.activity_monitor import ActivityFilter, KeyboardVisibilityWatcher
from core.idle_engine import Phase, monotonic_ms
from core.idle_timer import IdleTimer
from core.lifecycle import AppStateWatcher
from core.prompt_popup import PopupMode, PromptPopup
from core.settings import IdleTimerSettings, IdleTimerSettingsManager
from core.status_window import StatusWindow
from idle_timer_core.idle_timer_core import logger as app_logger

APP_NAME = "Idle Timer Demo"
APP_VERSION = "1.0.0"
REFRESH_INTERVAL_MS = 1000


@dataclass
class AppCoordinator(QObject):
    settings_manager: IdleTimerSettingsManager = field(default_factory=IdleTimerSettingsManager)

    def __post_init__(self) -> None:
        super().__init__()
        self._logger = app_logger.get_logger()
        self._settings: IdleTimerSettings = self.settings_manager.read_settings()
        options = self._settings.to_options()

        self._idle_timer = IdleTimer(options, self)
        self._idle_timer.idle.connect(self._on_idle)
        self._idle_timer.active.connect(self._on_active)
        self._idle_timer.prompt.connect(self._on_prompt)

        self._window = StatusWindow(options.timeout_ms, options.prompt_before_idle_ms)
        self._window.resetRequested.connect(self._idle_timer.reset)
        self._window.pauseRequested.connect(self._on_pause_requested)
        self._window.resumeRequested.connect(self._on_resume_requested)

        self._popup = PromptPopup()
        self._popup.stayActive.connect(self._idle_timer.reset)

        self._activity_filter = ActivityFilter(self._idle_timer.on_activity_pulse, options.events)
        self._keyboard_watcher = KeyboardVisibilityWatcher(self._idle_timer.on_activity_pulse, options.events)
        self._lifecycle = AppStateWatcher(self._idle_timer.on_background, self._idle_timer.on_foreground)

        self._refresh_timer = QTimer(self)
        self._refresh_timer.setInterval(REFRESH_INTERVAL_MS)
        self._refresh_timer.timeout.connect(self._refresh)

    @property
    def idle_timer(self) -> IdleTimer:
        return self._idle_timer

    def start(self) -> None:
        self._logger.info(
            "Starting {} v{} (timeout={} ms, prompt_before_idle={} ms)",
            APP_NAME,
            APP_VERSION,
            self._settings.timeout_ms,
            self._settings.prompt_before_idle_ms,
        )
        app = QApplication.instance()
        self._activity_filter.install(app)
        self._keyboard_watcher.start()
        self._lifecycle.start()
        self._refresh_timer.start()
        self._window.show()
        self._refresh()

    def shutdown(self) -> None:
        self._logger.info("Shutting down idle timer demo.")
        self._refresh_timer.stop()
        self._activity_filter.uninstall()
        self._keyboard_watcher.stop()
        self._lifecycle.stop()
        self._idle_timer.close()
        self._popup.hide()

    def _on_pause_requested(self) -> None:
        self._idle_timer.pause()
        self._popup.dismiss()
        self._refresh()

    def _on_resume_requested(self) -> None:
        self._idle_timer.resume()
        self._refresh()

    def _on_prompt(self) -> None:
        self._logger.info("User inactive; prompting before idle.")
        self._popup.show_prompt(self._idle_timer.get_remaining_time_sec())
        self._refresh()

    def _on_idle(self) -> None:
        self._logger.info("User is idle.")
        self._popup.show_idle()
        self._refresh()

    def _on_active(self) -> None:
        self._logger.info("User is active again.")
        self._popup.dismiss()
        self._refresh()

    def _refresh(self) -> None:
        snapshot = self._idle_timer.snapshot()
        self._window.show_snapshot(
            snapshot,
            _format_timestamp(snapshot.last_active_at_ms),
            _format_timestamp(snapshot.last_idle_at_ms),
        )
        if snapshot.phase is not Phase.PROMPTING:
            return
        # Resuming into the prompting window does not re-notify.
        if self._popup.mode is PopupMode.PROMPT:
            self._popup.update_countdown(snapshot.remaining_sec)
        else:
            self._popup.show_prompt(snapshot.remaining_sec)


def _format_timestamp(timestamp_ms: Optional[float]) -> str:
    """Convert a monotonic engine timestamp to local wall-clock time."""
    if timestamp_ms is None:
        return "Never"
    elapsed = timedelta(milliseconds=monotonic_ms() - timestamp_ms)
    return (datetime.now() - elapsed).strftime("%H:%M:%S")
