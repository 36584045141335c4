"""Shared fixtures: a virtual clock/scheduler pair and a headless Qt application."""

import os
import tempfile

os.environ.setdefault("IDLE_TIMER_LOG_DIR", tempfile.mkdtemp(prefix="idle-timer-logs-"))
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest  # noqa: E402

from core.idle_engine import IdleEngine  # noqa: E402
from shared.options import IdleTimerOptions  # noqa: E402


class VirtualClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def __call__(self) -> float:
        return self.now


class VirtualScheduler:
    """Single-slot scheduler whose callbacks fire as the virtual clock advances."""

    def __init__(self, clock: VirtualClock):
        self._clock = clock
        self._callback = None
        self.due_at = None
        self.delays = []

    def schedule(self, delay_ms, callback):
        assert delay_ms > 0, f"engine armed a non-positive delay: {delay_ms}"
        self.cancel()
        self._callback = callback
        self.due_at = self._clock.now + delay_ms
        self.delays.append(delay_ms)

    def cancel(self):
        self._callback = None
        self.due_at = None

    @property
    def pending(self) -> bool:
        return self._callback is not None

    def fire(self):
        """Run the pending callback now, regardless of its due time."""
        callback = self._callback
        self.cancel()
        if callback is not None:
            callback()

    def advance(self, ms: float):
        target = self._clock.now + ms
        while self._callback is not None and self.due_at <= target:
            self._clock.now = max(self._clock.now, self.due_at)
            self.fire()
        self._clock.now = target


class Recorder:
    """Collects notification callbacks in firing order."""

    def __init__(self):
        self.events = []

    def on_idle(self):
        self.events.append("idle")

    def on_active(self):
        self.events.append("active")

    def on_prompt(self):
        self.events.append("prompt")

    def count(self, name: str) -> int:
        return self.events.count(name)


@pytest.fixture
def clock():
    return VirtualClock()


@pytest.fixture
def scheduler(clock):
    return VirtualScheduler(clock)


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def make_engine(clock, scheduler, recorder):
    """Build an engine on the virtual clock with the recorder wired to every callback."""

    def factory(**overrides):
        params = {
            "timeout_ms": 10_000,
            "on_idle": recorder.on_idle,
            "on_active": recorder.on_active,
            "on_prompt": recorder.on_prompt,
        }
        params.update(overrides)
        return IdleEngine(IdleTimerOptions(**params), scheduler, clock=clock)

    return factory


@pytest.fixture(scope="session")
def qapp():
    from PySide6.QtWidgets import QApplication

    app = QApplication.instance() or QApplication([])
    yield app
