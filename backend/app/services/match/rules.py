from dataclasses import dataclass
from typing import Any, Mapping


@dataclass(frozen=True)
class MatchRules:
    """Constants that govern one match. Built once from the Flask config."""

    starting_balance: int = 200
    min_wager: int = 10
    bankruptcy_threshold: int = 20
    round_duration: int = 60
    disparity_multiplier: int = 4
    double_timeout_limit: int = 3
    reconnect_grace: float = 0.0
    heartbeat: int = 0

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> 'MatchRules':
        defaults = cls()
        return cls(
            starting_balance=int(config.get('STARTING_BALANCE', defaults.starting_balance)),
            min_wager=int(config.get('MIN_WAGER', defaults.min_wager)),
            bankruptcy_threshold=int(config.get('BANKRUPTCY_THRESHOLD', defaults.bankruptcy_threshold)),
            round_duration=int(config.get('ROUND_DURATION_SEC', defaults.round_duration)),
            disparity_multiplier=int(config.get('DISPARITY_MULTIPLIER', defaults.disparity_multiplier)),
            double_timeout_limit=int(config.get('DOUBLE_TIMEOUT_LIMIT', defaults.double_timeout_limit)),
            reconnect_grace=float(config.get('RECONNECT_GRACE_SEC', defaults.reconnect_grace)),
            heartbeat=int(config.get('TIMER_HEARTBEAT_SEC', defaults.heartbeat)),
        )
