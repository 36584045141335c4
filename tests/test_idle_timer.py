"""Tests for the IdleTimer Qt facade running on a real event loop."""

from PySide6.QtTest import QTest

from core.idle_engine import Phase
from core.idle_timer import IdleTimer
from shared.options import ActivitySource, ActivitySources, IdleTimerOptions


def collect(timer):
    events = []
    timer.idle.connect(lambda: events.append("idle"))
    timer.active.connect(lambda: events.append("active"))
    timer.prompt.connect(lambda: events.append("prompt"))
    return events


class TestIdleTimerSignals:
    """Engine notifications surface as Qt signals and option callbacks."""

    def test_prompt_then_idle(self, qapp):
        callbacks = []
        timer = IdleTimer(
            IdleTimerOptions(
                timeout_ms=120,
                prompt_before_idle_ms=60,
                on_idle=lambda: callbacks.append("idle"),
                on_prompt=lambda: callbacks.append("prompt"),
            )
        )
        events = collect(timer)

        QTest.qWait(400)
        assert timer.phase is Phase.IDLE
        assert events == ["prompt", "idle"]
        assert callbacks == ["prompt", "idle"]
        assert timer.get_remaining_time_ms() == 0
        assert not timer.engine.has_pending_callback

    def test_activity_reactivates(self, qapp):
        timer = IdleTimer(IdleTimerOptions(timeout_ms=40))
        events = collect(timer)

        QTest.qWait(200)
        assert timer.phase is Phase.IDLE

        timer.on_activity_pulse(ActivitySource.TOUCH)
        assert timer.phase is Phase.ACTIVE
        assert events == ["idle", "active"]
        timer.close()

    def test_disabled_source_does_not_reset(self, qapp):
        timer = IdleTimer(IdleTimerOptions(timeout_ms=10_000, events=ActivitySources(touch=False)))
        timer.pause()
        remaining = timer.get_remaining_time_ms()
        timer.resume()
        timer.on_activity_pulse(ActivitySource.TOUCH)
        assert timer.get_remaining_time_ms() <= remaining
        timer.close()

    def test_background_freezes_countdown(self, qapp):
        timer = IdleTimer(IdleTimerOptions(timeout_ms=100))
        events = collect(timer)
        timer.on_background()
        assert timer.phase is Phase.PAUSED

        QTest.qWait(250)
        assert events == []
        assert timer.phase is Phase.PAUSED

        timer.on_foreground()
        assert timer.phase is Phase.ACTIVE
        timer.close()

    def test_close_stops_pending_timer(self, qapp):
        timer = IdleTimer(IdleTimerOptions(timeout_ms=30))
        events = collect(timer)
        timer.close()

        QTest.qWait(120)
        assert events == []

    def test_options_keep_user_callbacks(self, qapp):
        def on_idle():
            pass

        options = IdleTimerOptions(timeout_ms=1_000, on_idle=on_idle)
        timer = IdleTimer(options)
        assert timer.options is options
        assert timer.engine.options.on_idle is not on_idle
        timer.close()

    def test_timeout_beyond_qt_interval_range(self, qapp):
        thirty_days_ms = 30 * 24 * 60 * 60 * 1000
        timer = IdleTimer(IdleTimerOptions(timeout_ms=thirty_days_ms))
        assert timer.phase is Phase.ACTIVE
        assert timer.engine.has_pending_callback

        timer.reset()
        assert timer.get_remaining_time_ms() > thirty_days_ms - 1_000
        timer.close()
