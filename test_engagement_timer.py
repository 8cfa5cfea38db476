import pytest

from watchgate.services.engagement_timer import EngagementTimer


def test_ticks_once_per_period(clock):
    ticks = []
    timer = EngagementTimer(clock, lambda: ticks.append(clock.time()))
    timer.start()
    clock.advance(3)
    assert ticks == [1.0, 2.0, 3.0]


def test_double_start_keeps_a_single_schedule(clock):
    ticks = []
    timer = EngagementTimer(clock, lambda: ticks.append(1))
    timer.start()
    timer.start()
    assert clock.pending == 1
    clock.advance(5)
    assert len(ticks) == 5


def test_stop_is_idempotent(clock):
    ticks = []
    timer = EngagementTimer(clock, lambda: ticks.append(1))
    timer.stop()
    timer.start()
    clock.advance(2)
    timer.stop()
    timer.stop()
    assert not timer.running
    clock.advance(5)
    assert len(ticks) == 2
    assert clock.pending == 0


def test_stop_from_inside_tick_cancels_next(clock):
    ticks = []

    def on_tick():
        ticks.append(1)
        if len(ticks) == 2:
            timer.stop()

    timer = EngagementTimer(clock, on_tick)
    timer.start()
    clock.advance(10)
    assert len(ticks) == 2
    assert not timer.running


def test_restart_anchors_to_new_start(clock):
    ticks = []
    timer = EngagementTimer(clock, lambda: ticks.append(clock.time()))
    clock.advance(0.5)
    timer.start()
    clock.advance(1.2)
    timer.stop()
    timer.start()
    clock.advance(1)
    assert ticks == pytest.approx([1.5, 2.7])


def test_rejects_non_positive_period(clock):
    with pytest.raises(ValueError):
        EngagementTimer(clock, lambda: None, period=0)
