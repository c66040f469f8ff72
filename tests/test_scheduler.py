"""Tests for the virtual-clock and Qt frame schedulers."""

import time

import pytest

from cruxtimer.timer.scheduler import ManualScheduler, QtFrameScheduler


# ═══════════════════════════════════════════════════════════════════════════
#  MANUAL SCHEDULER
# ═══════════════════════════════════════════════════════════════════════════


class TestManualScheduler:

    def test_starts_at_given_time(self):
        assert ManualScheduler(250).now() == 250

    def test_runs_due_callback(self, sched):
        calls = []
        sched.schedule_next(lambda: calls.append(sched.now()))
        assert sched.advance_to(40) == 1
        assert calls == [40]
        assert sched.pending_count == 0

    def test_cancel(self, sched):
        calls = []
        handle = sched.schedule_next(lambda: calls.append(1))
        sched.cancel(handle)
        sched.advance(16)
        assert calls == []

    def test_cancel_unknown_handle_is_ignored(self, sched):
        sched.cancel(999)
        sched.cancel(None)

    def test_reregistration_waits_for_next_frame(self, sched):
        calls = []

        def again():
            calls.append(sched.now())
            sched.schedule_next(again)

        sched.schedule_next(again)
        sched.advance(16)
        assert calls == [16]
        assert sched.pending_count == 1
        sched.advance(16)
        assert calls == [16, 32]

    def test_set_time_runs_nothing(self, sched):
        calls = []
        sched.schedule_next(lambda: calls.append(1))
        sched.set_time(5_000)
        assert calls == []
        assert sched.now() == 5_000

    def test_clock_cannot_go_backwards(self, sched):
        sched.set_time(100)
        with pytest.raises(ValueError):
            sched.set_time(50)

    def test_run_for_uses_frame_interval(self):
        sched = ManualScheduler(frame_ms=10)
        calls = []

        def again():
            calls.append(sched.now())
            sched.schedule_next(again)

        sched.schedule_next(again)
        frames = sched.run_for(35)
        assert calls == [10, 20, 30, 35]
        assert frames == 4


# ═══════════════════════════════════════════════════════════════════════════
#  QT SCHEDULER
# ═══════════════════════════════════════════════════════════════════════════


def _pump(qapp, predicate, timeout_s=1.0):
    deadline = time.monotonic() + timeout_s
    while not predicate() and time.monotonic() < deadline:
        qapp.processEvents()
        time.sleep(0.002)


class TestQtFrameScheduler:

    def test_callback_runs_on_event_loop(self, qapp):
        sched = QtFrameScheduler(interval_ms=1)
        calls = []
        sched.schedule_next(lambda: calls.append(1))
        assert sched.is_pending
        _pump(qapp, lambda: calls)
        assert calls == [1]
        assert not sched.is_pending

    def test_cancel_prevents_callback(self, qapp):
        sched = QtFrameScheduler(interval_ms=1)
        calls = []
        handle = sched.schedule_next(lambda: calls.append(1))
        sched.cancel(handle)
        _pump(qapp, lambda: False, timeout_s=0.05)
        assert calls == []

    def test_stale_handle_does_not_cancel_newer(self, qapp):
        sched = QtFrameScheduler(interval_ms=1)
        calls = []
        old = sched.schedule_next(lambda: calls.append("old"))
        sched.schedule_next(lambda: calls.append("new"))
        sched.cancel(old)
        _pump(qapp, lambda: calls)
        assert calls == ["new"]

    def test_now_is_monotonic_ms(self, qapp):
        sched = QtFrameScheduler()
        a = sched.now()
        time.sleep(0.01)
        assert sched.now() - a >= 9
