from app.services.match.escalation import EscalationTracker
from app.services.match.roster import Seat


def test_third_double_timeout_is_terminal():
    tracker = EscalationTracker(limit=3)
    first = tracker.record_double_timeout(220, 180)
    second = tracker.record_double_timeout(220, 180)
    third = tracker.record_double_timeout(220, 180)

    assert (first.count, second.count, third.count) == (1, 2, 3)
    assert not first.terminal and not second.terminal
    assert third.terminal
    assert third.leader is Seat.A
    assert 'Player 1 wins' in third.message


def test_messages_report_standing():
    tracker = EscalationTracker()
    first = tracker.record_double_timeout(200, 200)
    assert 'even' in first.message
    second = tracker.record_double_timeout(200, 200)
    assert 'draw' in second.message

    tracker.reset()
    first = tracker.record_double_timeout(150, 250)
    assert 'Player 2 leads' in first.message
    second = tracker.record_double_timeout(150, 250)
    assert 'Player 2 will win' in second.message


def test_tied_terminal_is_draw():
    tracker = EscalationTracker(limit=3)
    for _ in range(2):
        tracker.record_double_timeout(200, 200)
    final = tracker.record_double_timeout(200, 200)
    assert final.terminal
    assert final.leader is None
    assert 'draw' in final.message


def test_reset_clears_the_streak():
    tracker = EscalationTracker(limit=3)
    tracker.record_double_timeout(200, 200)
    tracker.record_double_timeout(200, 200)
    tracker.reset()
    assert tracker.consecutive_double_timeouts == 0
    assert not tracker.record_double_timeout(200, 200).terminal
