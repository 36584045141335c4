"""
Qt facade over the idle engine for widget-based applications.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, Optional

from PySide6.QtCore import QObject, Signal

from core.idle_engine import IdleEngine, IdleTimerSnapshot, Phase, monotonic_ms
from core.scheduler import QtScheduler
from shared.options import ActivitySource, IdleTimerOptions


class IdleTimer(QObject):
    """
    Owns an ``IdleEngine`` driven by the Qt event loop.

    The option callbacks still fire; the facade additionally emits ``idle``,
    ``active`` and ``prompt`` so several widgets can listen without sharing a
    single callback slot.
    """

    idle = Signal()
    active = Signal()
    prompt = Signal()

    def __init__(
        self,
        options: IdleTimerOptions,
        parent: QObject | None = None,
        *,
        clock: Callable[[], float] = monotonic_ms,
    ) -> None:
        super().__init__(parent)
        self._user_options = options
        self._scheduler = QtScheduler(self)
        wired = replace(
            options,
            on_idle=self._handle_idle,
            on_active=self._handle_active,
            on_prompt=self._handle_prompt,
        )
        self._engine = IdleEngine(wired, self._scheduler, clock=clock)

    @property
    def engine(self) -> IdleEngine:
        return self._engine

    @property
    def options(self) -> IdleTimerOptions:
        return self._user_options

    @property
    def phase(self) -> Phase:
        return self._engine.phase

    def reset(self) -> None:
        self._engine.reset()

    def pause(self) -> None:
        self._engine.pause()

    def resume(self) -> None:
        self._engine.resume()

    def on_activity_pulse(self, source: Optional[ActivitySource] = None) -> None:
        self._engine.on_activity_pulse(source)

    def on_background(self) -> None:
        self._engine.on_background()

    def on_foreground(self) -> None:
        self._engine.on_foreground()

    def get_remaining_time_ms(self) -> float:
        return self._engine.get_remaining_time_ms()

    def get_remaining_time_sec(self) -> int:
        return self._engine.get_remaining_time_sec()

    def snapshot(self) -> IdleTimerSnapshot:
        return self._engine.snapshot()

    def close(self) -> None:
        self._engine.close()

    def _handle_idle(self) -> None:
        if self._user_options.on_idle is not None:
            self._user_options.on_idle()
        self.idle.emit()

    def _handle_active(self) -> None:
        if self._user_options.on_active is not None:
            self._user_options.on_active()
        self.active.emit()

    def _handle_prompt(self) -> None:
        if self._user_options.on_prompt is not None:
            self._user_options.on_prompt()
        self.prompt.emit()
