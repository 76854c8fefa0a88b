"""
Unit tests for the event log.
"""

from vrf_raffle.events import EnteredRound, EventLog, RoundCalculating, WinnerPicked


class TestEventLog:

    def test_of_type_and_last(self):
        log = EventLog()
        log.emit(EnteredRound("a", 0))
        log.emit(RoundCalculating(1))
        log.emit(EnteredRound("b", 1))
        assert log.of_type(EnteredRound) == [EnteredRound("a", 0), EnteredRound("b", 1)]
        assert log.last(RoundCalculating) == RoundCalculating(1)
        assert log.last(WinnerPicked) is None
        assert len(log) == 3

    def test_once_fires_a_single_time(self):
        """once() only sees the next matching event."""
        log = EventLog()
        seen = []
        log.once(WinnerPicked, seen.append)
        log.emit(RoundCalculating(1))
        log.emit(WinnerPicked("a"))
        log.emit(WinnerPicked("b"))
        assert seen == [WinnerPicked("a")]

    def test_unsubscribe(self):
        log = EventLog()
        seen = []
        unsubscribe = log.subscribe(seen.append)
        log.emit(RoundCalculating(1))
        unsubscribe()
        log.emit(RoundCalculating(2))
        assert seen == [RoundCalculating(1)]
