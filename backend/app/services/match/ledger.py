from .errors import InvalidWager
from .roster import Roster, Seat


class WagerLedger:
    """Sealed wagers for the round in play, stored on the roster's seats."""

    def __init__(self, roster: Roster, min_wager: int):
        self.roster = roster
        self.min_wager = min_wager

    def place_wager(self, seat: Seat, amount) -> bool:
        """Lock ``amount`` in for ``seat``.

        Returns True when the opposing seat has already wagered this round.
        Raises InvalidWager without touching state when the amount is not a
        whole number in [min_wager, balance] or the seat already wagered.
        """
        player = self.roster[seat]
        if player.wager is not None:
            raise InvalidWager('Your wager is already locked in for this round.')
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise InvalidWager(f'Your wager must be a whole number between {self.min_wager} and {player.balance} units.')
        if amount < self.min_wager or amount > player.balance:
            raise InvalidWager(f'Your wager must be between {self.min_wager} and {player.balance} units.')
        player.wager = amount
        return self.roster[seat.other].wager is not None

    def wager_of(self, seat: Seat):
        return self.roster[seat].wager

    def both_wagered(self) -> bool:
        return all(p.wager is not None for p in self.roster)

    def clear_wagers(self) -> None:
        for p in self.roster:
            p.wager = None
