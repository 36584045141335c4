"""
Qt activity sources feeding activity pulses into an idle timer.
"""

from __future__ import annotations

from typing import Callable, Optional

from PySide6.QtCore import QEvent, QObject

from idle_timer_core.idle_timer_core import logger as app_logger
from shared.options import ActivitySource, ActivitySources, KeyboardEvents

_LOGGER = app_logger.get_logger()

PulseSink = Callable[[Optional[ActivitySource]], None]

ACTIVITY_EVENT_TYPES = frozenset(
    {
        QEvent.Type.TouchBegin,
        QEvent.Type.TouchUpdate,
        QEvent.Type.TouchEnd,
        QEvent.Type.MouseButtonPress,
        QEvent.Type.MouseButtonRelease,
        QEvent.Type.MouseMove,
        QEvent.Type.Wheel,
        QEvent.Type.KeyPress,
    }
)


class ActivityFilter(QObject):
    """
    Application-wide event filter that reports touch, pointer and key input.

    Events are observed, never consumed. Input propagating through several
    widgets may report more than once; repeated pulses are harmless.
    """

    def __init__(self, sink: PulseSink, sources: ActivitySources | None = None) -> None:
        super().__init__()
        self._sink = sink
        self._sources = sources or ActivitySources()
        self._target: Optional[QObject] = None

    @property
    def is_installed(self) -> bool:
        return self._target is not None

    def install(self, target: QObject) -> None:
        """Begin observing ``target`` (normally the QApplication instance)."""
        if self._target is not None:
            return
        if not self._sources.touch:
            _LOGGER.info("Touch activity disabled; event filter not installed.")
            return
        target.installEventFilter(self)
        self._target = target

    def uninstall(self) -> None:
        if self._target is None:
            return
        self._target.removeEventFilter(self)
        self._target = None

    def eventFilter(self, watched: QObject, event: QEvent) -> bool:  # noqa: N802
        if event.type() in ACTIVITY_EVENT_TYPES:
            self._sink(ActivitySource.TOUCH)
        return False


class KeyboardVisibilityWatcher(QObject):
    """Reports on-screen keyboard show/hide transitions from a ``QInputMethod``."""

    def __init__(self, sink: PulseSink, sources: ActivitySources | None = None, input_method=None) -> None:
        super().__init__()
        self._sink = sink
        self._sources = sources or ActivitySources()
        self._input_method = input_method
        self._active = False

    @property
    def is_active(self) -> bool:
        return self._active

    def start(self) -> None:
        if self._active:
            return
        if self._sources.keyboard is KeyboardEvents.DISABLED:
            _LOGGER.info("Keyboard activity disabled; not watching input panel visibility.")
            return
        if self._input_method is None:
            from PySide6.QtGui import QGuiApplication

            self._input_method = QGuiApplication.inputMethod()
        self._input_method.visibleChanged.connect(self._on_visible_changed)  # type: ignore[arg-type]
        self._active = True

    def stop(self) -> None:
        if not self._active:
            return
        self._input_method.visibleChanged.disconnect(self._on_visible_changed)  # type: ignore[arg-type]
        self._active = False

    def _on_visible_changed(self) -> None:
        if not self._active:
            return
        if self._input_method.isVisible():
            self._sink(ActivitySource.KEYBOARD_SHOW)
        else:
            self._sink(ActivitySource.KEYBOARD_HIDE)
