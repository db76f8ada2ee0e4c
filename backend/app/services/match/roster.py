import secrets
import time
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from .errors import SeatUnavailable


class Seat(Enum):
    A = 'A'
    B = 'B'

    @property
    def label(self) -> str:
        return 'Player 1' if self is Seat.A else 'Player 2'

    @property
    def other(self) -> 'Seat':
        return Seat.B if self is Seat.A else Seat.A


@dataclass
class PlayerSeat:
    seat: Seat
    connection: Optional[str] = None
    session_token: Optional[str] = None
    balance: int = 0
    wager: Optional[int] = None
    held_since: Optional[float] = None

    @property
    def label(self) -> str:
        return self.seat.label

    @property
    def occupied(self) -> bool:
        return self.session_token is not None

    @property
    def held(self) -> bool:
        return self.held_since is not None

    def to_dict(self) -> Dict:
        return {
            'seat': self.seat.value,
            'name': self.label,
            'units': self.balance,
            'has_wagered': self.wager is not None,
            'connected': self.connection is not None,
        }


class Roster:
    """The two seats of a match and the connections sitting in them.

    A seat is occupied from ``claim_seat`` until ``release_seat`` (or
    ``release_held`` for a seat held for reconnection). Claiming always
    starts the seat over at ``starting_balance`` with no wager.
    """

    def __init__(self, starting_balance: int):
        self.starting_balance = starting_balance
        self.seats: Dict[Seat, PlayerSeat] = {seat: PlayerSeat(seat) for seat in Seat}

    def __getitem__(self, seat: Seat) -> PlayerSeat:
        return self.seats[seat]

    def __iter__(self):
        return iter(self.seats.values())

    @property
    def occupied_count(self) -> int:
        return sum(1 for p in self if p.occupied)

    @property
    def full(self) -> bool:
        return self.occupied_count == len(self.seats)

    def connections(self) -> List[str]:
        return [p.connection for p in self if p.connection]

    def seat_of(self, connection: str) -> Optional[Seat]:
        for p in self:
            if connection and p.connection == connection:
                return p.seat
        return None

    def claim_seat(self, connection: str) -> Seat:
        existing = self.seat_of(connection)
        if existing is not None:
            return existing
        for p in self:
            if not p.occupied:
                p.connection = connection
                p.session_token = secrets.token_urlsafe(16)
                p.balance = self.starting_balance
                p.wager = None
                p.held_since = None
                return p.seat
        raise SeatUnavailable('The game already has two players.')

    def release_seat(self, connection: str) -> Optional[Seat]:
        seat = self.seat_of(connection)
        if seat is None:
            return None
        self._clear(seat)
        return seat

    def hold_seat(self, connection: str) -> Optional[Seat]:
        """Detach ``connection`` but keep its seat for a later reclaim."""
        seat = self.seat_of(connection)
        if seat is None:
            return None
        p = self.seats[seat]
        p.connection = None
        p.held_since = time.time()
        return seat

    def reclaim_seat(self, connection: str, session_token: Optional[str]) -> Optional[Seat]:
        # tokens arrive straight from the client and may be any JSON value
        if not session_token or not isinstance(session_token, str):
            return None
        offered = session_token.encode('utf-8')
        for p in self:
            if p.held and secrets.compare_digest(p.session_token.encode('utf-8'), offered):
                p.connection = connection
                p.held_since = None
                return p.seat
        return None

    def release_held(self, seat: Seat, session_token: str) -> bool:
        p = self.seats[seat]
        if not p.held or p.session_token != session_token:
            return False
        self._clear(seat)
        return True

    def reset_balances(self) -> None:
        for p in self:
            if p.occupied:
                p.balance = self.starting_balance
            p.wager = None

    def _clear(self, seat: Seat) -> None:
        self.seats[seat] = PlayerSeat(seat)
