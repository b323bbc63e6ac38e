from pomidor.clock import QtClockSource


def test_qt_clock_repeats_until_cancelled(qtbot):
    calls = []
    clock = QtClockSource()
    clock.start(10, lambda: calls.append(1))
    assert clock.active
    qtbot.waitUntil(lambda: len(calls) >= 3, timeout=2000)

    clock.cancel()
    seen = len(calls)
    qtbot.wait(100)
    assert len(calls) == seen
    assert not clock.active


def test_restart_replaces_previous_callback(qtbot):
    first, second = [], []
    clock = QtClockSource()
    clock.start(10, lambda: first.append(1))
    clock.start(10, lambda: second.append(1))
    qtbot.waitUntil(lambda: len(second) >= 2, timeout=2000)
    assert first == []
    clock.cancel()


def test_cancel_when_idle_is_harmless(qtbot):
    clock = QtClockSource()
    clock.cancel()
    assert not clock.active
