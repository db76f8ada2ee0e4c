"""Errors raised by the match services.

Each error names the outbound event used to report it to the offending
connection. Socket handlers catch ``MatchError`` and emit that event; none
of these are connection-level failures except ``SeatUnavailable``.
"""


class MatchError(Exception):
    event = 'error_message'


class SeatUnavailable(MatchError):
    """Both seats are taken; the transport should drop the connection."""


class NotSeated(MatchError):
    pass


class MatchNotActive(MatchError):
    pass


class InvalidWager(MatchError):
    event = 'invalid_wager'


class InternalConsistency(MatchError):
    """A resolution was attempted against an incomplete roster."""
