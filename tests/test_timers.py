import pytest

from neurobreak.timers import TimerRegistry


def test_repeating_timer_fires_each_interval():
    timers = TimerRegistry()
    calls = []
    timers.every(1.0, lambda: calls.append("tick"), "tick")
    timers.advance(0.5)
    assert calls == []
    timers.advance(0.5)
    assert calls == ["tick"]
    timers.advance(2.0)
    assert calls == ["tick"] * 3


def test_one_shot_fires_once_and_unregisters():
    timers = TimerRegistry()
    calls = []
    timers.after(2.0, lambda: calls.append(1), "once")
    timers.advance(1.0)
    assert "once" in timers
    timers.advance(1.5)
    timers.advance(5.0)
    assert calls == [1]
    assert "once" not in timers


def test_suspend_freezes_all_timers():
    timers = TimerRegistry()
    calls = []
    timers.every(1.0, lambda: calls.append("r"), "r")
    timers.after(1.0, lambda: calls.append("o"), "o")
    timers.advance(0.4)
    timers.suspend()
    timers.advance(10.0)
    assert calls == []
    assert timers.remaining("r") == pytest.approx(0.6)
    timers.resume()
    timers.advance(0.6)
    assert sorted(calls) == ["o", "r"]


def test_cancel_all_reports_count_and_clears():
    timers = TimerRegistry()
    calls = []
    timers.every(1.0, lambda: calls.append(1), "a")
    timers.after(1.0, lambda: calls.append(2), "b")
    assert len(timers) == 2
    assert timers.cancel_all() == 2
    timers.advance(5.0)
    assert calls == []
    assert len(timers) == 0


def test_same_name_replaces_previous():
    timers = TimerRegistry()
    calls = []
    timers.after(1.0, lambda: calls.append("old"), "job")
    timers.after(3.0, lambda: calls.append("new"), "job")
    timers.advance(2.0)
    assert calls == []
    timers.advance(1.0)
    assert calls == ["new"]


def test_callback_can_cancel_itself():
    timers = TimerRegistry()
    calls = []

    def tick():
        calls.append(1)
        if len(calls) == 2:
            timers.cancel("tick")

    timers.every(1.0, tick, "tick")
    timers.advance(10.0)
    assert calls == [1, 1]
    assert not timers.active("tick")


def test_callback_can_cancel_everything():
    timers = TimerRegistry()
    calls = []
    timers.after(1.0, lambda: timers.cancel_all(), "stop")
    timers.every(1.0, lambda: calls.append(1), "later")
    timers.advance(1.0)
    assert calls == []
    assert len(timers) == 0


def test_callback_can_schedule_follow_up():
    timers = TimerRegistry()
    calls = []
    timers.after(1.0, lambda: timers.after(1.0, lambda: calls.append("second"), "job"), "job")
    timers.advance(1.0)
    assert timers.active("job")
    timers.advance(1.0)
    assert calls == ["second"]


def test_rejects_non_positive_interval():
    with pytest.raises(ValueError):
        TimerRegistry().every(0, lambda: None, "bad")
