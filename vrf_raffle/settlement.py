"""
Settlement
Winner selection from a fulfilled random word, payout and round reset
"""

import logging
from dataclasses import dataclass

from .exceptions import TransferFailed
from .rounds import RaffleState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecentWinner:
    winner: str
    timestamp: int
    round_number: int
    winner_index: int
    prize: int
    random_word: int
    total_participants: int
    request_id: int


def pick_winner_index(random_word, num_players):
    """Map a random word onto the ordered entries of the round"""
    if num_players <= 0:
        raise ValueError("Cannot pick a winner from an empty round")
    return random_word % num_players


def settle(chain, raffle_address, round_, ledger, random_word, now, request_id):
    """
    Pay the winner and reopen the round

    The payout runs first. If the winner rejects it, TransferFailed is raised
    and nothing has changed: the round stays CALCULATING with the pool intact.
    The state flip back to OPEN is the last write.

    Args:
        chain: LocalChain holding the raffle's funds
        raffle_address: Account paying the prize
        round_: Round to reset
        ledger: Ledger of the round being settled
        random_word: Fulfilled random value
        now: Settlement timestamp
        request_id: Randomness request that produced the word

    Returns:
        RecentWinner: Audit record of the draw
    """
    num_players = ledger.num_players
    winner_index = pick_winner_index(random_word, num_players)
    winner = ledger.get_player(winner_index)
    prize = ledger.pool_balance

    if not chain.transfer(raffle_address, winner, prize):
        logger.error(f"❌ Payout of {prize} wei to {winner} failed, round {round_.round_number} stays closed")
        raise TransferFailed(winner, prize)

    recent = RecentWinner(
        winner=winner,
        timestamp=now,
        round_number=round_.round_number,
        winner_index=winner_index,
        prize=prize,
        random_word=random_word,
        total_participants=num_players,
        request_id=request_id,
    )

    ledger.clear()
    round_.round_start_time = now
    round_.round_number += 1
    round_.state = RaffleState.OPEN

    logger.info(f"🎉 Winner of round {recent.round_number}: {winner} (entry #{winner_index} of {num_players})")
    logger.info(f"   Prize: {prize} wei")
    return recent
