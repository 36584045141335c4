"""
Single-shot deferred callback primitives used to wake the idle engine.

A scheduler holds at most one pending callback. ``schedule`` replaces
whatever was pending, ``cancel`` is idempotent, and a callback never runs
after the ``cancel`` (or replacing ``schedule``) that disarmed it.
"""

from __future__ import annotations

import asyncio
import math
from typing import Callable, Optional, Protocol

from PySide6.QtCore import QObject, Qt, QTimer

# QTimer intervals are signed 32-bit milliseconds.
MAX_QT_INTERVAL_MS = 2**31 - 1


class Scheduler(Protocol):
    def schedule(self, delay_ms: float, callback: Callable[[], None]) -> None:
        ...

    def cancel(self) -> None:
        ...

    @property
    def pending(self) -> bool:
        ...


class QtScheduler(QObject):
    """Drives callbacks from the Qt event loop with a precise single-shot QTimer."""

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        # Coarse timers may fire up to 5% early.
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._timer.timeout.connect(self._fire)  # type: ignore[arg-type]
        self._callback: Optional[Callable[[], None]] = None

    def schedule(self, delay_ms: float, callback: Callable[[], None]) -> None:
        self.cancel()
        self._callback = callback
        self._timer.start(min(MAX_QT_INTERVAL_MS, max(0, math.ceil(delay_ms))))

    def cancel(self) -> None:
        self._timer.stop()
        self._callback = None

    @property
    def pending(self) -> bool:
        return self._callback is not None

    def _fire(self) -> None:
        callback, self._callback = self._callback, None
        if callback is not None:
            callback()


class AsyncioScheduler:
    """
    Scheduler for hosts running an asyncio event loop instead of Qt.

    The loop is resolved lazily on first use when not supplied, so the
    scheduler can be created outside a running loop.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop
        self._handle: Optional[asyncio.TimerHandle] = None

    def schedule(self, delay_ms: float, callback: Callable[[], None]) -> None:
        self.cancel()
        loop = self._loop or asyncio.get_running_loop()
        self._handle = loop.call_later(max(0.0, delay_ms) / 1000.0, self._fire, callback)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def _fire(self, callback: Callable[[], None]) -> None:
        self._handle = None
        callback()
