from dataclasses import dataclass
from typing import Optional

from .resolver import leader
from .roster import Seat


@dataclass(frozen=True)
class Escalation:
    count: int
    terminal: bool
    leader: Optional[Seat]
    message: str


class EscalationTracker:
    """Counts consecutive rounds in which neither seat wagered.

    Any round with at least one wager resets the count. Reaching ``limit``
    double timeouts in a row ends the match in favour of the higher balance.
    """

    def __init__(self, limit: int = 3):
        self.limit = limit
        self.consecutive_double_timeouts = 0

    def reset(self) -> None:
        self.consecutive_double_timeouts = 0

    def record_double_timeout(self, balance_a: int, balance_b: int) -> Escalation:
        self.consecutive_double_timeouts += 1
        count = self.consecutive_double_timeouts
        ahead = leader(balance_a, balance_b)
        remaining = self.limit - count

        if remaining <= 0:
            if ahead is None:
                message = f'Game Over. The game was a draw due to {self.limit} consecutive double timeouts.'
            else:
                message = f'Game Over. {ahead.label} wins due to {self.limit} consecutive double timeouts.'
            return Escalation(count, True, ahead, message)

        if remaining == 1:
            if ahead is None:
                outcome = 'the game will end in a draw'
            else:
                outcome = f'{ahead.label} will win the game'
            message = f'Double timeout. If the next round is a double timeout, {outcome}.'
        else:
            standing = 'Balances are even.' if ahead is None else f'{ahead.label} leads.'
            message = (
                f'Double timeout. After {self.limit} consecutive double timeouts in a row, '
                f'the player with the most units will win the game. {standing}'
            )
        return Escalation(count, False, ahead, message)
