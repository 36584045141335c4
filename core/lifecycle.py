"""
Host application lifecycle watcher translating Qt application states into
background/foreground signals.
"""

from __future__ import annotations

from typing import Callable

from PySide6.QtCore import QObject, Qt

from idle_timer_core.idle_timer_core import logger as app_logger

_LOGGER = app_logger.get_logger()

BACKGROUND_STATES = frozenset(
    {
        Qt.ApplicationState.ApplicationHidden,
        Qt.ApplicationState.ApplicationSuspended,
    }
)


class AppStateWatcher(QObject):
    """
    Calls ``on_background`` when the application is hidden or suspended and
    ``on_foreground`` when it becomes active again.

    ``ApplicationInactive`` (a desktop window losing focus) changes nothing.
    """

    def __init__(
        self,
        on_background: Callable[[], None],
        on_foreground: Callable[[], None],
        app=None,
    ) -> None:
        super().__init__()
        self._on_background = on_background
        self._on_foreground = on_foreground
        self._app = app
        self._active = False
        self._backgrounded = False

    @property
    def is_backgrounded(self) -> bool:
        return self._backgrounded

    def start(self) -> None:
        if self._active:
            return
        if self._app is None:
            from PySide6.QtGui import QGuiApplication

            self._app = QGuiApplication.instance()
        if self._app is None:
            _LOGGER.warning("No Qt application instance; lifecycle events will not be observed.")
            return
        self._app.applicationStateChanged.connect(self._on_state_changed)  # type: ignore[arg-type]
        self._active = True

    def stop(self) -> None:
        if not self._active:
            return
        self._app.applicationStateChanged.disconnect(self._on_state_changed)  # type: ignore[arg-type]
        self._active = False

    def _on_state_changed(self, state: Qt.ApplicationState) -> None:
        if state in BACKGROUND_STATES:
            if self._backgrounded:
                return
            self._backgrounded = True
            _LOGGER.debug("Application moved to background ({}).", _state_name(state))
            self._on_background()
        elif state == Qt.ApplicationState.ApplicationActive:
            if not self._backgrounded:
                return
            self._backgrounded = False
            _LOGGER.debug("Application returned to foreground.")
            self._on_foreground()


def _state_name(state) -> str:
    return getattr(state, "name", str(state))
