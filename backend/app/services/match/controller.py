import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Set

from .errors import InternalConsistency, MatchNotActive, NotSeated
from .escalation import EscalationTracker
from .ledger import WagerLedger
from .resolver import RoundOutcome, Rule, leader, resolve, resolve_timeout, resolve_triple_timeout
from .roster import PlayerSeat, Roster, Seat
from .rules import MatchRules
from .timer import RoundTimer, TimerHandle


class Phase(Enum):
    WAITING_FOR_PLAYERS = 'waiting_for_players'
    IN_PROGRESS = 'in_progress'
    MATCH_OVER = 'match_over'


@dataclass
class MatchState:
    phase: Phase = Phase.WAITING_FOR_PLAYERS
    round_number: int = 0
    rematch_ready: Set[Seat] = field(default_factory=set)
    winner: Optional[Seat] = None
    last_outcome: Optional[RoundOutcome] = None
    history: List[Dict[str, Any]] = field(default_factory=list)


@dataclass(frozen=True)
class MatchSummary:
    winner: Optional[Seat]
    reason: str
    rounds_played: int
    balance_a: int
    balance_b: int
    history: List[Dict[str, Any]]


class MatchController:
    """Lifecycle of the single match hosted by this process.

    Every public entry point and every timer callback mutates state under one
    lock. Outbound notices are queued while the lock is held and delivered
    through ``emit(event, payload, to)`` once it is released.
    """

    def __init__(self, rules: MatchRules, emit: Callable, spawn: Callable, sleep: Callable,
                 logger: Optional[logging.Logger] = None,
                 on_match_over: Optional[Callable[[MatchSummary], None]] = None):
        self.rules = rules
        self.logger = logger or logging.getLogger(__name__)
        self._emit = emit
        self._spawn = spawn
        self._sleep = sleep
        self._on_match_over = on_match_over
        self._lock = threading.Lock()
        self._outbox: Optional[List[Callable]] = None

        self.roster = Roster(rules.starting_balance)
        self.ledger = WagerLedger(self.roster, rules.min_wager)
        self.escalation = EscalationTracker(rules.double_timeout_limit)
        self.timer = RoundTimer(self._on_tick, self._on_expire, spawn=spawn, sleep=sleep)
        self.state = MatchState()

    # ---- inbound events ----

    def join(self, connection: str, session_token: Optional[str] = None) -> Seat:
        with self._transaction():
            seat = self.roster.seat_of(connection)
            if seat is not None:
                self._send('assign_name', self._assignment(self.roster[seat]), connection)
                return seat

            if self.rules.reconnect_grace > 0:
                seat = self.roster.reclaim_seat(connection, session_token)
                if seat is not None:
                    self.logger.info(f"[seat-restore] seat={seat.value} sid={connection}")
                    self._send('assign_name', self._assignment(self.roster[seat]), connection)
                    self._broadcast('seat_restored', {'seat': seat.value, 'name': seat.label})
                    if self.state.phase is Phase.IN_PROGRESS:
                        self._send('game_ready', {'players': self._players()}, connection)
                    return seat

            seat = self.roster.claim_seat(connection)
            self.logger.info(f"[seat-claim] seat={seat.value} sid={connection}")
            self._send('assign_name', self._assignment(self.roster[seat]), connection)
            self._broadcast('player_joined', {'seat': seat.value, 'name': seat.label})
            if self.roster.full and self.state.phase is Phase.WAITING_FOR_PLAYERS:
                self._begin_match()
            return seat

    def leave(self, connection: str, hold: bool = True) -> Optional[Seat]:
        """Vacate the seat of ``connection``.

        With a reconnect grace window configured and a match under way the
        seat is held for reclaiming, unless ``hold`` is False (the player
        quit on purpose).
        """
        with self._transaction():
            seat = self.roster.seat_of(connection)
            if seat is None:
                return None
            grace = self.rules.reconnect_grace
            if hold and grace > 0 and self.state.phase is not Phase.WAITING_FOR_PLAYERS:
                self.roster.hold_seat(connection)
                self.state.rematch_ready.discard(seat)
                self.logger.info(f"[seat-hold] seat={seat.value} grace={grace}s")
                self._broadcast('player_disconnected', {'seat': seat.value, 'name': seat.label, 'grace': grace})
                self._spawn(self._expire_hold, seat, self.roster[seat].session_token)
                return seat

            self.roster.release_seat(connection)
            self._vacated(seat)
            return seat

    def submit_wager(self, connection: str, amount) -> Seat:
        with self._transaction():
            seat = self._require_seat(connection)
            if self.state.phase is Phase.MATCH_OVER:
                raise MatchNotActive('The game has ended. Please start a new game.')
            if self.state.phase is Phase.WAITING_FOR_PLAYERS:
                raise MatchNotActive('Waiting for an opponent to join.')

            opponent_done = self.ledger.place_wager(seat, amount)
            self.logger.info(f"[wager] round={self.current_round} seat={seat.value} amount={amount}")
            if not opponent_done:
                opponent = self.roster[seat.other].connection
                if opponent:
                    self._send('opponent_locked_wager', {'seat': seat.value}, opponent)
                return seat

            self.timer.cancel()
            self._resolve_wagers()
            return seat

    def request_rematch(self, connection: str) -> Seat:
        with self._transaction():
            seat = self._require_seat(connection)
            if self.state.phase is Phase.WAITING_FOR_PLAYERS:
                raise MatchNotActive('Waiting for an opponent to join.')
            self.state.rematch_ready.add(seat)
            self._broadcast('rematch_requested', {'seat': seat.value})
            if self.roster.full and self.state.rematch_ready >= set(Seat):
                self._reset_match()
            return seat

    # ---- queries ----

    @property
    def phase(self) -> Phase:
        return self.state.phase

    @property
    def current_round(self) -> int:
        return self.state.round_number + 1

    def snapshot(self) -> Dict[str, Any]:
        with self._lock:
            return {
                'phase': self.state.phase.value,
                'round_number': self.state.round_number,
                'current_round': self.current_round,
                'consecutive_double_timeouts': self.escalation.consecutive_double_timeouts,
                'time_remaining': self.timer.remaining,
                'winner': self.state.winner.value if self.state.winner else None,
                'rematch_ready': sorted(s.value for s in self.state.rematch_ready),
                'seats': [p.to_dict() for p in self.roster],
                'rules': {
                    'starting_balance': self.rules.starting_balance,
                    'min_wager': self.rules.min_wager,
                    'bankruptcy_threshold': self.rules.bankruptcy_threshold,
                    'round_duration': self.rules.round_duration,
                    'disparity_multiplier': self.rules.disparity_multiplier,
                },
            }

    # ---- timer callbacks ----

    def _on_tick(self, handle: TimerHandle, remaining: int) -> None:
        with self._transaction():
            if not self.timer.is_live(handle):
                return
            self._broadcast('update_timer', {'remaining': remaining})
            hb = self.rules.heartbeat
            if hb > 0 and (handle.duration - remaining) % hb == 0:
                self.logger.info(f"[timer-heartbeat] round={self.current_round} remaining={remaining}s")

    def _on_expire(self, handle: TimerHandle) -> None:
        with self._transaction():
            if not self.timer.is_live(handle):
                self.logger.info(f"[timer-stale] round={self.current_round} handle={handle!r}")
                return
            self.timer.cancel()
            self.logger.info(f"[timer-fire] round={self.current_round}")
            self._broadcast('update_timer', {'remaining': 0})
            self._resolve_timeout()

    def _expire_hold(self, seat: Seat, session_token: str) -> None:
        self._sleep(self.rules.reconnect_grace)
        with self._transaction():
            if self.roster.release_held(seat, session_token):
                self.logger.info(f"[seat-release] seat={seat.value} grace expired")
                self._vacated(seat)

    # ---- transitions ----

    def _begin_match(self) -> None:
        self.state.phase = Phase.IN_PROGRESS
        self.logger.info("[match-start] both seats filled")
        self._broadcast('game_ready', {'players': self._players()})
        self._start_round()

    def _start_round(self) -> None:
        duration = self.rules.round_duration
        self.timer.start(duration)
        self.logger.info(f"[timer-set] round={self.current_round} duration={duration}s")
        self._broadcast('update_timer', {'remaining': duration})

    def _resolve_wagers(self) -> None:
        try:
            a, b = self._seated_pair()
        except InternalConsistency:
            self.logger.exception(f"[round-abort] round={self.current_round}")
            self.ledger.clear_wagers()
            return

        outcome = resolve(a.balance, a.wager, b.balance, b.wager, self.rules.disparity_multiplier)
        self.escalation.reset()
        number = self.current_round
        if outcome.draw:
            message = f"Round {number}: Both players wagered {a.wager} units. It's a draw!"
        else:
            note = ''
            if outcome.rule is Rule.DISPARITY:
                note = f" due to the '{self.rules.disparity_multiplier * 100}% rule'"
            message = (
                f"Round {number}: {a.label} wagered {a.wager}, {b.label} wagered {b.wager}. "
                f"{outcome.winner.label} wins{note}!"
            )
            if outcome.capped:
                message += f" {outcome.loser.label} could only pay {outcome.transfer} units."
        self._complete_round(outcome, message)

    def _resolve_timeout(self) -> None:
        try:
            a, b = self._seated_pair()
        except InternalConsistency:
            self.logger.exception(f"[round-abort] round={self.current_round} on timeout")
            self.ledger.clear_wagers()
            return

        if a.wager is None and b.wager is None:
            escalation = self.escalation.record_double_timeout(a.balance, b.balance)
            self.logger.info(f"[double-timeout] count={escalation.count} terminal={escalation.terminal}")
            if escalation.terminal:
                outcome = resolve_triple_timeout(a.balance, b.balance)
            else:
                outcome = resolve_timeout(a.balance, None, b.balance, None)
            self._complete_round(outcome, escalation.message)
            return

        outcome = resolve_timeout(a.balance, a.wager, b.balance, b.wager)
        self.escalation.reset()
        message = f"{outcome.loser.label} timed out and lost {outcome.transfer} units to {outcome.winner.label}."
        self._complete_round(outcome, message)

    def _complete_round(self, outcome: RoundOutcome, message: str) -> None:
        number = self.current_round
        self.roster[Seat.A].balance = outcome.balance_a
        self.roster[Seat.B].balance = outcome.balance_b
        self.ledger.clear_wagers()
        self.state.round_number += 1
        self.state.last_outcome = outcome
        # a restart mid-match needs agreement within one round
        self.state.rematch_ready.clear()
        self.state.history.append({
            'round': number,
            'wagers': {Seat.A.value: outcome.wager_a, Seat.B.value: outcome.wager_b},
            **outcome.to_dict(),
        })
        self.logger.info(
            f"[round-resolved] round={number} rule={outcome.rule.value} draw={outcome.draw} "
            f"winner={outcome.winner.value if outcome.winner else None} transfer={outcome.transfer}"
        )
        self._broadcast('update_game_log', {'message': message})
        self._broadcast('round_result', {'round': number, 'message': message, **outcome.to_dict()})

        if outcome.rule is Rule.TRIPLE_TIMEOUT:
            self._finish(outcome.winner, 'triple_timeout')
            return

        threshold = self.rules.bankruptcy_threshold
        bankrupt = [p.seat for p in self.roster if p.balance < threshold]
        if len(bankrupt) == 1:
            self._finish(bankrupt[0].other, 'bankruptcy')
        elif bankrupt:
            self._finish(leader(outcome.balance_a, outcome.balance_b), 'bankruptcy')
        else:
            self._start_round()

    def _finish(self, winner: Optional[Seat], reason: str) -> None:
        self.timer.cancel()
        self.state.phase = Phase.MATCH_OVER
        self.state.winner = winner
        self.state.rematch_ready.clear()
        units = self._units()
        self.logger.info(
            f"[match-over] winner={winner.value if winner else 'draw'} reason={reason} rounds={self.state.round_number}"
        )
        self._broadcast('update_timer', {'remaining': 0})
        self._broadcast('game_over', {
            'winner': winner.value if winner else None,
            'draw': winner is None,
            'reason': reason,
            'units': units,
        })
        if self._on_match_over:
            summary = MatchSummary(
                winner=winner,
                reason=reason,
                rounds_played=self.state.round_number,
                balance_a=units[Seat.A.value],
                balance_b=units[Seat.B.value],
                history=list(self.state.history),
            )
            self._outbox.append(partial(self._on_match_over, summary))

    def _reset_match(self) -> None:
        self.timer.cancel()
        self.roster.reset_balances()
        self.escalation.reset()
        self.state = MatchState()
        self.logger.info("[match-reset] both players ready")
        self._broadcast('game_reset_complete', {'units': self._units()})
        self.state.phase = Phase.IN_PROGRESS
        self._start_round()

    def _vacated(self, seat: Seat) -> None:
        self.state.rematch_ready.discard(seat)
        self._broadcast('player_left', {'seat': seat.value, 'name': seat.label})
        if self.state.phase is Phase.WAITING_FOR_PLAYERS:
            return
        self.timer.cancel()
        self.roster.reset_balances()
        self.escalation.reset()
        self.state = MatchState()
        self.logger.info(f"[match-abort] seat={seat.value} vacated")
        self._broadcast('game_reset', {'units': self._units()})

    # ---- helpers ----

    def _require_seat(self, connection: str) -> Seat:
        seat = self.roster.seat_of(connection)
        if seat is None:
            raise NotSeated('You are not part of this game.')
        return seat

    def _seated_pair(self):
        a, b = self.roster[Seat.A], self.roster[Seat.B]
        if not (a.occupied and b.occupied):
            raise InternalConsistency(f'round {self.current_round} resolved with an empty seat')
        return a, b

    def _units(self) -> Dict[str, int]:
        return {p.seat.value: p.balance for p in self.roster if p.occupied}

    def _players(self) -> Dict[str, Dict[str, Any]]:
        return {p.seat.value: {'name': p.label, 'units': p.balance} for p in self.roster if p.occupied}

    @staticmethod
    def _assignment(player: PlayerSeat) -> Dict[str, Any]:
        return {
            'name': player.label,
            'seat': player.seat.value,
            'id': player.connection,
            'session_token': player.session_token,
        }

    def _send(self, event: str, payload: Dict[str, Any], to: str) -> None:
        self._outbox.append(partial(self._emit, event, payload, to))

    def _broadcast(self, event: str, payload: Dict[str, Any]) -> None:
        for connection in self.roster.connections():
            self._send(event, payload, connection)

    @contextmanager
    def _transaction(self):
        with self._lock:
            self._outbox = []
            try:
                yield
            finally:
                pending, self._outbox = self._outbox, None
        for deliver in pending:
            deliver()
