from __future__ import annotations

from enum import Enum


class RaffleState(Enum):
    OPEN = 0
    CALCULATING = 1


def is_upkeep_needed(
    state: RaffleState,
    last_timestamp: float,
    now: float,
    pool_balance: int,
    participant_count: int,
    interval: float,
) -> bool:
    """
    True when a round may be settled. Every clause gates on its own:
    the round is open, the interval has elapsed, the pool holds funds
    and at least one player has entered.
    """
    is_open = state is RaffleState.OPEN
    time_passed = (now - last_timestamp) >= interval
    has_balance = pool_balance > 0
    has_players = participant_count > 0
    return is_open and time_passed and has_balance and has_players
