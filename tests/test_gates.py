from __future__ import annotations

from gates import DebounceGate, SingleFlightGuard
from models import TriggerKind


class FakeClock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def test_trigger_inside_window_is_suppressed_and_restamped() -> None:
    gate = DebounceGate(clock=FakeClock(0.0))

    assert gate.should_proceed(TriggerKind.SUBMIT, now=5.0) is True
    gate.mark_completed(TriggerKind.SUBMIT, now=5.0)

    assert gate.should_proceed(TriggerKind.SUBMIT, now=5.4) is False
    assert gate.last(TriggerKind.SUBMIT) == 5.4


def test_accepted_trigger_leaves_timestamp_to_caller() -> None:
    gate = DebounceGate(clock=FakeClock(0.0))

    assert gate.should_proceed(TriggerKind.REFRESH, now=3.0) is True
    assert gate.last(TriggerKind.REFRESH) == 0.0


def test_burst_keeps_window_closed_until_quiet() -> None:
    gate = DebounceGate(clock=FakeClock(0.0))
    gate.mark_completed(TriggerKind.SUBMIT, now=10.0)

    for now in (10.5, 11.2, 11.9, 12.6):
        assert gate.should_proceed(TriggerKind.SUBMIT, now=now) is False

    assert gate.should_proceed(TriggerKind.SUBMIT, now=14.0) is True


def test_exactly_one_second_is_allowed() -> None:
    gate = DebounceGate(clock=FakeClock(0.0))
    gate.mark_completed(TriggerKind.SUBMIT, now=2.0)

    assert gate.should_proceed(TriggerKind.SUBMIT, now=3.0) is True


def test_kinds_are_tracked_independently() -> None:
    gate = DebounceGate(clock=FakeClock(0.0))
    gate.mark_completed(TriggerKind.REFRESH, now=5.0)

    assert gate.should_proceed(TriggerKind.SUBMIT, now=5.2) is True
    assert gate.should_proceed(TriggerKind.REFRESH, now=5.2) is False
    assert gate.last(TriggerKind.SUBMIT) == 0.0


def test_triggers_right_after_start_are_suppressed() -> None:
    clock = FakeClock(50.0)
    gate = DebounceGate(clock=clock)

    clock.now = 50.5
    assert gate.should_proceed(TriggerKind.REFRESH) is False

    clock.now = 52.0
    assert gate.should_proceed(TriggerKind.REFRESH) is True
    gate.mark_completed(TriggerKind.REFRESH)
    assert gate.last(TriggerKind.REFRESH) == 52.0


def test_single_flight_allows_one_submit_until_reset() -> None:
    guard = SingleFlightGuard()

    assert guard.try_acquire() is True
    assert guard.count == 1
    assert guard.try_acquire() is False
    assert guard.count == 1

    guard.reset()
    assert guard.count == 0
    assert guard.try_acquire() is True
