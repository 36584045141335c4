"""Tests for the Qt and asyncio single-shot schedulers."""

import asyncio

import pytest
from PySide6.QtTest import QTest

from core.scheduler import MAX_QT_INTERVAL_MS, AsyncioScheduler, QtScheduler


class TestQtScheduler:
    """Single pending callback driven by the Qt event loop."""

    def test_fires_once(self, qapp):
        scheduler = QtScheduler()
        calls = []
        scheduler.schedule(10, lambda: calls.append("fired"))
        assert scheduler.pending

        QTest.qWait(100)
        assert calls == ["fired"]
        assert not scheduler.pending

        QTest.qWait(50)
        assert calls == ["fired"]

    def test_cancel_prevents_callback(self, qapp):
        scheduler = QtScheduler()
        calls = []
        scheduler.schedule(10, lambda: calls.append("fired"))
        scheduler.cancel()
        scheduler.cancel()
        assert not scheduler.pending

        QTest.qWait(80)
        assert calls == []

    def test_schedule_replaces_previous(self, qapp):
        scheduler = QtScheduler()
        calls = []
        scheduler.schedule(10, lambda: calls.append("first"))
        scheduler.schedule(20, lambda: calls.append("second"))

        QTest.qWait(120)
        assert calls == ["second"]

    def test_fractional_delay_is_not_shortened(self, qapp):
        """Delays round up so the callback never runs before it is due."""
        scheduler = QtScheduler()
        scheduler.schedule(0.2, lambda: None)
        assert scheduler._timer.interval() == 1
        scheduler.cancel()

    def test_long_delay_is_capped(self, qapp):
        scheduler = QtScheduler()
        scheduler.schedule(30 * 24 * 60 * 60 * 1000, lambda: None)
        assert scheduler.pending
        assert scheduler._timer.interval() == MAX_QT_INTERVAL_MS
        scheduler.cancel()


class TestAsyncioScheduler:
    """Single pending callback driven by loop.call_later."""

    @pytest.mark.asyncio
    async def test_fires_once(self):
        scheduler = AsyncioScheduler()
        fired = asyncio.Event()
        scheduler.schedule(10, fired.set)
        assert scheduler.pending

        await asyncio.wait_for(fired.wait(), timeout=2.0)
        assert not scheduler.pending

    @pytest.mark.asyncio
    async def test_cancel_prevents_callback(self):
        scheduler = AsyncioScheduler()
        calls = []
        scheduler.schedule(10, lambda: calls.append("fired"))
        scheduler.cancel()
        scheduler.cancel()

        await asyncio.sleep(0.05)
        assert calls == []
        assert not scheduler.pending

    @pytest.mark.asyncio
    async def test_schedule_replaces_previous(self):
        scheduler = AsyncioScheduler()
        calls = []
        scheduler.schedule(10, lambda: calls.append("first"))
        scheduler.schedule(20, lambda: calls.append("second"))

        await asyncio.sleep(0.1)
        assert calls == ["second"]

    def test_explicit_loop(self):
        loop = asyncio.new_event_loop()
        try:
            scheduler = AsyncioScheduler(loop)
            calls = []
            scheduler.schedule(5, lambda: calls.append("fired"))
            loop.run_until_complete(asyncio.sleep(0.05))
            assert calls == ["fired"]
        finally:
            loop.close()
