"""
Idle detection state machine.

The engine owns every deadline and the pause snapshot, wakes itself through a
``Scheduler`` and reports transitions through the option callbacks. All calls,
including scheduler expiry, are expected on a single event-loop thread.

Notification callbacks always run after the engine has finished mutating its
state and re-arming its scheduler, so a handler may call back into ``reset``,
``pause`` or ``resume`` safely.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from core.scheduler import Scheduler
from idle_timer_core.idle_timer_core import logger as app_logger
from shared.options import ActivitySource, ConfigurationError, IdleTimerOptions


class Phase(Enum):
    ACTIVE = "active"
    PROMPTING = "prompting"
    IDLE = "idle"
    PAUSED = "paused"


@dataclass(frozen=True)
class IdleTimerSnapshot:
    """Read-only view handed to presentation layers."""

    phase: Phase
    remaining_ms: float
    remaining_sec: int
    last_active_at_ms: Optional[float]
    last_idle_at_ms: Optional[float]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


def round_to_seconds(milliseconds: float) -> int:
    """Round half up, so 1500 ms reads as 2 s and 1499 ms as 1 s."""
    return int((milliseconds + 500) // 1000)


class IdleEngine:
    """
    Counts down toward idle, optionally passing through a prompting window.

    Phases: ACTIVE (countdown running), PROMPTING (inside the last
    ``prompt_before_idle_ms`` of the countdown), IDLE (countdown exhausted, no
    timer pending) and PAUSED (countdown frozen, remaining time captured).
    """

    def __init__(
        self,
        options: IdleTimerOptions,
        scheduler: Scheduler,
        *,
        clock: Callable[[], float] = monotonic_ms,
    ) -> None:
        if not isinstance(options, IdleTimerOptions):
            raise ConfigurationError("IdleEngine requires an IdleTimerOptions instance.")
        self._options = options
        self._scheduler = scheduler
        self._clock = clock
        self._logger = app_logger.get_logger()

        self._deadline_at_ms: Optional[float] = None
        self._prompt_at_ms: Optional[float] = None
        self._remaining_on_pause_ms: Optional[float] = None
        self._phase_before_pause = Phase.ACTIVE
        self._last_active_at_ms: Optional[float] = None
        self._last_idle_at_ms: Optional[float] = None

        if options.start_on_mount and not options.initially_paused:
            self._phase = Phase.ACTIVE
            now = self._clock()
            self._set_deadlines(now, options.timeout_ms)
            self._trace("start", now)
            self._arm(now)
        else:
            self._phase = Phase.PAUSED
            self._remaining_on_pause_ms = options.timeout_ms
            self._trace("start paused", self._clock())

    # ------------------------------------------------------------------ queries

    @property
    def options(self) -> IdleTimerOptions:
        return self._options

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def last_active_at_ms(self) -> Optional[float]:
        return self._last_active_at_ms

    @property
    def last_idle_at_ms(self) -> Optional[float]:
        return self._last_idle_at_ms

    @property
    def has_pending_callback(self) -> bool:
        return self._scheduler.pending

    def is_idle(self) -> bool:
        return self._phase is Phase.IDLE

    def get_remaining_time_ms(self) -> float:
        if self._phase is Phase.PAUSED:
            return self._remaining_on_pause_ms or 0
        if self._phase is Phase.IDLE:
            return 0
        return max(0, self._deadline_at_ms - self._clock())

    def get_remaining_time_sec(self) -> int:
        return round_to_seconds(self.get_remaining_time_ms())

    def snapshot(self) -> IdleTimerSnapshot:
        remaining = self.get_remaining_time_ms()
        return IdleTimerSnapshot(
            phase=self._phase,
            remaining_ms=remaining,
            remaining_sec=round_to_seconds(remaining),
            last_active_at_ms=self._last_active_at_ms,
            last_idle_at_ms=self._last_idle_at_ms,
        )

    # ----------------------------------------------------------------- controls

    def reset(self) -> None:
        """Mark the user active and restart the full countdown from any phase."""
        now = self._clock()
        previous = self._phase
        self._scheduler.cancel()
        self._phase = Phase.ACTIVE
        self._remaining_on_pause_ms = None
        self._last_active_at_ms = now
        self._set_deadlines(now, self._options.timeout_ms)
        self._trace("reset", now, previous=previous)
        self._arm(now)
        if previous in (Phase.IDLE, Phase.PROMPTING):
            self._notify(self._options.on_active, "on_active")

    def pause(self) -> None:
        if self._phase is Phase.PAUSED:
            return
        now = self._clock()
        self._scheduler.cancel()
        if self._phase is Phase.IDLE:
            remaining = 0
        else:
            remaining = max(0, self._deadline_at_ms - now)
        self._phase_before_pause = self._phase
        self._remaining_on_pause_ms = remaining
        self._deadline_at_ms = None
        self._prompt_at_ms = None
        self._phase = Phase.PAUSED
        self._trace("pause", now, previous=self._phase_before_pause)

    def resume(self) -> None:
        """
        Continue the countdown frozen by ``pause``.

        A snapshot inside the prompting window resumes straight into PROMPTING
        (unless the engine was idle before pausing) and an exhausted snapshot
        resumes straight into IDLE.
        """
        if self._phase is not Phase.PAUSED:
            return
        now = self._clock()
        remaining = self._remaining_on_pause_ms or 0
        before = self._phase_before_pause
        prompt_ms = self._options.prompt_before_idle_ms
        self._remaining_on_pause_ms = None

        if remaining <= 0:
            self._phase = Phase.IDLE
            self._last_idle_at_ms = now
            self._trace("resume", now, previous=before)
            if before is not Phase.IDLE:
                self._notify(self._options.on_idle, "on_idle")
            return

        self._last_active_at_ms = now
        self._set_deadlines(now, remaining)
        if self._options.prompt_enabled and remaining <= prompt_ms and before is not Phase.IDLE:
            self._phase = Phase.PROMPTING
        else:
            self._phase = Phase.ACTIVE
        self._trace("resume", now, previous=before)
        self._arm(now)

        if self._phase is Phase.PROMPTING and before is not Phase.PROMPTING:
            self._notify(self._options.on_prompt, "on_prompt")
        elif self._phase is Phase.ACTIVE and before in (Phase.IDLE, Phase.PROMPTING):
            self._notify(self._options.on_active, "on_active")

    def on_activity_pulse(self, source: Optional[ActivitySource] = None) -> None:
        """Treat a user action as activity unless paused or from a disabled source."""
        if source is not None and not self._options.events.accepts(source):
            return
        if self._phase is Phase.PAUSED:
            return
        self.reset()

    def on_background(self) -> None:
        self.pause()

    def on_foreground(self) -> None:
        self.resume()

    def close(self) -> None:
        """Tear down: no callback fires after this returns."""
        self._scheduler.cancel()
        self._trace("close", self._clock())

    # ---------------------------------------------------------------- internals

    def _set_deadlines(self, now: float, remaining_ms: float) -> None:
        self._deadline_at_ms = now + remaining_ms
        self._prompt_at_ms = now + remaining_ms - self._options.prompt_before_idle_ms

    def _arm(self, now: float) -> None:
        if self._phase is Phase.ACTIVE and self._options.prompt_enabled:
            delay = self._prompt_at_ms - now
            if delay <= 0:
                self._enter_prompting(now)
                return
        else:
            delay = self._deadline_at_ms - now
            if delay <= 0:
                self._enter_idle(now)
                return
        self._scheduler.schedule(delay, self._on_timer)
        if self._options.debug:
            self._logger.debug("Idle timer armed for {:.0f} ms (phase={})", delay, self._phase.value)

    def _on_timer(self) -> None:
        if self._phase not in (Phase.ACTIVE, Phase.PROMPTING):
            return
        now = self._clock()
        if now >= self._deadline_at_ms:
            self._enter_idle(now)
        elif self._phase is Phase.ACTIVE and self._options.prompt_enabled and now >= self._prompt_at_ms:
            self._enter_prompting(now)
        else:
            # Woke early; wait out the remainder.
            self._arm(now)

    def _enter_prompting(self, now: float) -> None:
        if now >= self._deadline_at_ms:
            # The whole prompting window elapsed before we got a chance to run.
            self._enter_idle(now)
            return
        self._phase = Phase.PROMPTING
        self._trace("prompt", now)
        self._arm(now)
        self._notify(self._options.on_prompt, "on_prompt")

    def _enter_idle(self, now: float) -> None:
        self._scheduler.cancel()
        self._phase = Phase.IDLE
        self._last_idle_at_ms = now
        self._trace("idle", now)
        self._notify(self._options.on_idle, "on_idle")

    def _notify(self, callback: Optional[Callable[[], None]], name: str) -> None:
        if callback is None:
            return
        try:
            callback()
        except Exception:
            self._logger.exception("Idle timer {} callback raised; continuing.", name)

    def _trace(self, event: str, now: float, *, previous: Optional[Phase] = None) -> None:
        if not self._options.debug:
            return
        self._logger.debug(
            "Idle timer {}: {} -> {} (deadline={}, prompt_at={}, paused_remaining={}, now={:.0f})",
            event,
            previous.value if previous else "-",
            self._phase.value,
            _fmt(self._deadline_at_ms),
            _fmt(self._prompt_at_ms),
            _fmt(self._remaining_on_pause_ms),
            now,
        )


def _fmt(value: Optional[float]) -> str:
    return "-" if value is None else f"{value:.0f}"
