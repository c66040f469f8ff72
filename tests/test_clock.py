"""Tests for the deadline clock and time formatting."""

import pytest

from cruxtimer.timer.clock import (
    DeadlineClock, format_mmss, monotonic_ms, round_half_up,
)


class FakeTime:
    def __init__(self, start=0.0):
        self.t = start

    def __call__(self):
        return self.t


@pytest.fixture
def now():
    return FakeTime(1_000.0)


@pytest.fixture
def clock(now):
    return DeadlineClock(now)


# ═══════════════════════════════════════════════════════════════════════════
#  HELPERS
# ═══════════════════════════════════════════════════════════════════════════


class TestFormatting:

    @pytest.mark.parametrize("ms, text", [
        (0, "00:00"),
        (999, "00:00"),
        (1_000, "00:01"),
        (59_999, "00:59"),
        (60_000, "01:00"),
        (125_000, "02:05"),
        (20 * 60_000, "20:00"),
        (180 * 60_000, "180:00"),
    ])
    def test_format_mmss(self, ms, text):
        assert format_mmss(ms) == text

    def test_negative_clamped(self):
        assert format_mmss(-5_000) == "00:00"

    @pytest.mark.parametrize("value, expected", [
        (0.4, 0), (0.5, 1), (1.5, 2), (2.5, 3), (1999.49, 1999),
    ])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected

    def test_monotonic_ms_never_goes_back(self):
        a = monotonic_ms()
        b = monotonic_ms()
        assert b >= a


# ═══════════════════════════════════════════════════════════════════════════
#  DEADLINE CLOCK
# ═══════════════════════════════════════════════════════════════════════════


class TestDeadlineClock:

    def test_disarmed(self, clock):
        assert clock.remaining_ms() == 0
        assert clock.is_armed is False
        assert clock.is_frozen is False

    def test_arm_sets_absolute_deadline(self, clock, now):
        clock.arm(5_000)
        assert clock.deadline == 6_000.0
        assert clock.remaining_ms() == 5_000

    def test_remaining_derived_from_now(self, clock, now):
        clock.arm(5_000)
        now.t += 1_234.4
        assert clock.remaining_ms() == 3_766

    def test_remaining_never_negative(self, clock, now):
        clock.arm(1_000)
        now.t += 50_000
        assert clock.remaining_ms() == 0

    def test_negative_duration_arms_at_now(self, clock):
        clock.arm(-10)
        assert clock.remaining_ms() == 0

    def test_freeze_keeps_unrounded_snapshot(self, clock, now):
        clock.arm(5_000)
        now.t += 0.4
        snapshot = clock.freeze()
        assert snapshot == pytest.approx(4_999.6)
        assert clock.remaining_on_pause == pytest.approx(4_999.6)
        assert clock.deadline is None
        assert clock.is_frozen

    def test_frozen_clock_ignores_time(self, clock, now):
        clock.arm(5_000)
        now.t += 2_000
        clock.freeze()
        now.t += 100_000
        assert clock.remaining_ms() == 3_000

    def test_thaw_arms_fresh_deadline(self, clock, now):
        clock.arm(5_000)
        now.t += 2_000
        clock.freeze()
        now.t += 10_000
        clock.thaw()
        assert clock.deadline == now.t + 3_000
        assert clock.remaining_on_pause is None

    def test_repeated_freeze_is_stable(self, clock, now):
        clock.arm(5_000)
        now.t += 1_000
        first = clock.freeze()
        now.t += 1_000
        assert clock.freeze() == first

    def test_thaw_without_freeze_is_noop(self, clock, now):
        clock.arm(5_000)
        deadline = clock.deadline
        clock.thaw()
        assert clock.deadline == deadline

    def test_sub_millisecond_pauses_do_not_accumulate(self, clock, now):
        clock.arm(10_000)
        for _ in range(1_000):
            now.t += 0.4
            clock.freeze()
            now.t += 3.0
            clock.thaw()
        # 1000 × 0.4 ms of running time
        assert clock.remaining_ms() == 9_600

    def test_clear(self, clock):
        clock.arm(5_000)
        clock.clear()
        assert clock.remaining_ms() == 0
        assert clock.is_armed is False
