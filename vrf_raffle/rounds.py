"""
Round State
Raffle state machine values and the admission predicate for closing a round
"""

from dataclasses import dataclass
from enum import IntEnum


class RaffleState(IntEnum):
    OPEN = 0
    CALCULATING = 1


@dataclass
class Round:
    """Mutable state of the active round, owned by one raffle instance"""

    round_start_time: int
    state: RaffleState = RaffleState.OPEN
    round_number: int = 1

    @property
    def is_open(self):
        return self.state == RaffleState.OPEN


def upkeep_needed(round_, ledger, interval, now):
    """
    Decide whether the active round may be closed

    All four conditions are required:
    1. the round is OPEN
    2. at least `interval` seconds passed since the round started
    3. the round has at least one player
    4. the pool holds value

    Pure read: never mutates the round or the ledger.
    """
    time_passed = (now - round_.round_start_time) >= interval
    has_players = ledger.num_players > 0
    has_balance = ledger.pool_balance > 0
    return round_.is_open and time_passed and has_players and has_balance
