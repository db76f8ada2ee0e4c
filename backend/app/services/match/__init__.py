"""Match domain services: seats, wagers, resolution and round timers.

Everything here is transport-agnostic. Socket handlers and HTTP routes
talk to a single ``MatchController`` and never touch the roster, ledger or
timer directly.
"""

from .controller import MatchController, MatchSummary, Phase
from .errors import InternalConsistency, InvalidWager, MatchError, MatchNotActive, NotSeated, SeatUnavailable
from .roster import Seat
from .rules import MatchRules
