"""Round resolution.

Pure functions over (balance, wager) pairs. Nothing here touches the
roster; the controller applies the returned balances and clears wagers.
"""
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from .roster import Seat


class Rule(Enum):
    STANDARD = 'standard'
    DISPARITY = 'disparity'
    TIMEOUT = 'timeout'
    TRIPLE_TIMEOUT = 'triple_timeout'


@dataclass(frozen=True)
class RoundOutcome:
    draw: bool
    winner: Optional[Seat]
    transfer: int
    rule: Rule
    balance_a: int
    balance_b: int
    wager_a: Optional[int] = None
    wager_b: Optional[int] = None
    capped: bool = False

    @property
    def loser(self) -> Optional[Seat]:
        return self.winner.other if self.winner else None

    def balance(self, seat: Seat) -> int:
        return self.balance_a if seat is Seat.A else self.balance_b

    def wager(self, seat: Seat) -> Optional[int]:
        return self.wager_a if seat is Seat.A else self.wager_b

    def to_dict(self) -> Dict:
        return {
            'draw': self.draw,
            'winner': self.winner.value if self.winner else None,
            'transfer': self.transfer,
            'capped': self.capped,
            'rule': self.rule.value,
            'units': {Seat.A.value: self.balance_a, Seat.B.value: self.balance_b},
        }


def leader(balance_a: int, balance_b: int) -> Optional[Seat]:
    """Seat with the strictly greater balance, or None when even."""
    if balance_a > balance_b:
        return Seat.A
    if balance_b > balance_a:
        return Seat.B
    return None


def _transfer(winner: Seat, balance_a: int, balance_b: int, stake: int):
    # The loser never pays more than they hold.
    loser_balance = balance_b if winner is Seat.A else balance_a
    amount = min(stake, loser_balance)
    if winner is Seat.A:
        return amount, balance_a + amount, balance_b - amount
    return amount, balance_a - amount, balance_b + amount


def resolve(balance_a: int, wager_a: int, balance_b: int, wager_b: int,
            disparity_multiplier: int = 4) -> RoundOutcome:
    """Resolve a round in which both seats wagered.

    Equal wagers draw. Otherwise the higher wager wins, unless it exceeds
    the lower one more than ``disparity_multiplier`` times, in which case
    the lower wager wins. The loser pays their own wager.
    """
    if wager_a == wager_b:
        return RoundOutcome(
            draw=True, winner=None, transfer=0, rule=Rule.STANDARD,
            balance_a=balance_a, balance_b=balance_b, wager_a=wager_a, wager_b=wager_b,
        )

    high, low = (Seat.A, Seat.B) if wager_a > wager_b else (Seat.B, Seat.A)
    wagers = {Seat.A: wager_a, Seat.B: wager_b}
    if wagers[high] > wagers[low] * disparity_multiplier:
        winner, rule = low, Rule.DISPARITY
    else:
        winner, rule = high, Rule.STANDARD

    stake = wagers[winner.other]
    amount, new_a, new_b = _transfer(winner, balance_a, balance_b, stake)
    return RoundOutcome(
        draw=False, winner=winner, transfer=amount, rule=rule,
        balance_a=new_a, balance_b=new_b, wager_a=wager_a, wager_b=wager_b,
        capped=amount < stake,
    )


def resolve_timeout(balance_a: int, wager_a: Optional[int], balance_b: int,
                    wager_b: Optional[int]) -> RoundOutcome:
    """Resolve a round whose timer ran out before both seats wagered.

    With one wager present its owner collects that amount from the seat that
    timed out. With none present the round is a draw and nothing moves.
    """
    if wager_a is not None and wager_b is not None:
        raise ValueError('both seats wagered; use resolve()')
    if wager_a is None and wager_b is None:
        return RoundOutcome(
            draw=True, winner=None, transfer=0, rule=Rule.TIMEOUT,
            balance_a=balance_a, balance_b=balance_b,
        )
    winner = Seat.A if wager_a is not None else Seat.B
    stake = wager_a if winner is Seat.A else wager_b
    amount, new_a, new_b = _transfer(winner, balance_a, balance_b, stake)
    return RoundOutcome(
        draw=False, winner=winner, transfer=amount, rule=Rule.TIMEOUT,
        balance_a=new_a, balance_b=new_b, wager_a=wager_a, wager_b=wager_b,
        capped=amount < stake,
    )


def resolve_triple_timeout(balance_a: int, balance_b: int) -> RoundOutcome:
    winner = leader(balance_a, balance_b)
    return RoundOutcome(
        draw=winner is None, winner=winner, transfer=0, rule=Rule.TRIPLE_TIMEOUT,
        balance_a=balance_a, balance_b=balance_b,
    )
