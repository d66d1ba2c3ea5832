"""Tests for the QTimer-backed scheduler."""

from core.scheduler import QtScheduler


def noop():
    pass


class TestQtScheduler:

    def test_start_returns_distinct_handles(self):
        scheduler = QtScheduler()

        first = scheduler.start_repeating(noop)
        second = scheduler.start_repeating(noop, 500)

        assert first != second
        assert scheduler.active_count() == 2
        scheduler.cancel(first)
        scheduler.cancel(second)

    def test_cancel_stops_timer(self):
        scheduler = QtScheduler()
        handle = scheduler.start_repeating(noop)

        scheduler.cancel(handle)

        assert scheduler.active_count() == 0

    def test_cancel_unknown_handle_is_ignored(self):
        scheduler = QtScheduler()
        scheduler.cancel(42)
        assert scheduler.active_count() == 0

    def test_interval(self):
        scheduler = QtScheduler()
        handle = scheduler.start_repeating(noop, 250)

        assert scheduler._timers[handle].interval() == 250
        scheduler.cancel(handle)
