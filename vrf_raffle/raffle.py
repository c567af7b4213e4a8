"""
Raffle Contract
Self-operating lottery: entries during an open window, automated closing,
verifiable randomness and payout to a single winner per round
"""

import logging
import threading

from . import events
from .exceptions import (
    InsufficientFunds,
    InsufficientPayment,
    InvalidConfig,
    OnlyCoordinatorCanFulfill,
    RoundNotOpen,
    UpkeepNotNeeded,
)
from .config import NUM_WORDS, REQUEST_CONFIRMATIONS
from .ledger import Ledger
from .randomness import RandomnessBridge
from .rounds import RaffleState, Round, upkeep_needed
from .settlement import settle

logger = logging.getLogger(__name__)


class Raffle:
    """
    Raffle contract deployed on a LocalChain

    Mutating entry points run one at a time to completion under the instance
    lock. Closing a round and receiving its random word are separate calls:
    perform_upkeep() issues the request and returns at once, the coordinator
    later calls raw_fulfill_random_words() with the result.
    """

    def __init__(self, chain, config, coordinator):
        """
        Deploy a raffle

        Args:
            chain: LocalChain the raffle lives on
            config: RaffleConfig (immutable)
            coordinator: VRF coordinator serving randomness requests
        """
        if coordinator.address != config.vrf_coordinator:
            raise InvalidConfig(
                f"Coordinator {coordinator.address} does not match configured {config.vrf_coordinator}"
            )

        self.chain = chain
        self.config = config
        self.address = chain.create_account(label="Raffle")
        self.events = events.EventLog(chain, self.address)

        self._lock = threading.RLock()
        self._round = Round(round_start_time=chain.timestamp)
        self._ledger = Ledger()
        self._bridge = RandomnessBridge(coordinator, config, self.address)
        self._recent_winner = None

        logger.info(
            f"🎟️ Raffle deployed at {self.address} "
            f"(fee: {config.entrance_fee} wei, interval: {config.interval}s)"
        )

    # ============ Entry ============

    def enter_raffle(self, sender, value):
        """
        Buy one entry in the current round

        Overpayment is kept in the pool. The same address may enter any number
        of times; each entry is a separate chance.

        Raises:
            InsufficientPayment: value below the entrance fee
            RoundNotOpen: the round is calculating a winner
            InsufficientFunds: sender cannot cover value
        """
        with self._lock:
            if value < self.config.entrance_fee:
                raise InsufficientPayment(value, self.config.entrance_fee)
            if not self._round.is_open:
                raise RoundNotOpen(self._round.state)
            if not self.chain.transfer(sender, self.address, value):
                raise InsufficientFunds(sender, value)

            self._ledger.record_entry(sender, value)
            logger.debug(f"{sender} entered round {self._round.round_number} with {value} wei")
            self.events.emit(events.ENTERED_ROUND, player=sender, value=value, round_number=self._round.round_number)

    # ============ Automation ============

    def is_ready(self):
        """True when the active round may be closed now"""
        with self._lock:
            return upkeep_needed(self._round, self._ledger, self.config.interval, self.chain.timestamp)

    def check_upkeep(self, check_data=b""):
        """
        Automation-facing form of is_ready()

        Returns:
            tuple: (upkeep_needed, perform_data)
        """
        return self.is_ready(), b""

    def perform_upkeep(self, perform_data=b""):
        """
        Close the round and request a random word

        The admission predicate is evaluated again here; an earlier
        check_upkeep() result is never trusted.

        Returns:
            int: Request id of the randomness request

        Raises:
            UpkeepNotNeeded: the predicate is false at commit time
        """
        with self._lock:
            if not upkeep_needed(self._round, self._ledger, self.config.interval, self.chain.timestamp):
                raise UpkeepNotNeeded(self._ledger.pool_balance, self._ledger.num_players, self._round.state)

            self._round.state = RaffleState.CALCULATING
            try:
                request_id = self._bridge.issue_request(self._round.round_number, self.chain.timestamp)
            except Exception:
                self._round.state = RaffleState.OPEN
                raise

            logger.info(f"🔒 Round {self._round.round_number} closed with {self._ledger.num_players} entries")
            self.events.emit(events.CLOSING_REQUESTED, request_id=request_id, round_number=self._round.round_number)
            return request_id

    # ============ Randomness callback ============

    def raw_fulfill_random_words(self, request_id, random_words, sender):
        """
        Callback entry point used by the VRF coordinator

        Raises:
            OnlyCoordinatorCanFulfill: sender is not the configured coordinator
            UnknownRequest: request_id is not the pending request
            InvalidRandomWords: no usable random word
            TransferFailed: winner rejected the payout (round stays calculating)
        """
        if sender != self.config.vrf_coordinator:
            raise OnlyCoordinatorCanFulfill(sender, self.config.vrf_coordinator)
        return self._fulfill_random_words(request_id, random_words)

    def _fulfill_random_words(self, request_id, random_words):
        with self._lock:
            random_word = self._bridge.validate(request_id, random_words)
            recent = settle(
                self.chain,
                self.address,
                self._round,
                self._ledger,
                random_word,
                self.chain.timestamp,
                request_id=request_id,
            )
            self._bridge.consume()
            self._recent_winner = recent

            self.events.emit(
                events.WINNER_PICKED,
                winner=recent.winner,
                round_number=recent.round_number,
                request_id=request_id,
                winner_index=recent.winner_index,
                prize=recent.prize,
                random_word=recent.random_word,
                total_participants=recent.total_participants,
            )
            return recent

    # ============ Views ============

    def get_entrance_fee(self):
        return self.config.entrance_fee

    def get_interval(self):
        return self.config.interval

    def get_raffle_state(self):
        return self._round.state

    def get_player(self, index):
        return self._ledger.get_player(index)

    def get_players(self):
        return self._ledger.players

    def get_number_of_players(self):
        return self._ledger.num_players

    def get_pool_balance(self):
        return self._ledger.pool_balance

    def get_recent_winner(self):
        """Address of the last winner, or None before the first settlement"""
        return self._recent_winner.winner if self._recent_winner else None

    def get_recent_draw(self):
        return self._recent_winner

    def get_latest_timestamp(self):
        return self._round.round_start_time

    def get_round_number(self):
        return self._round.round_number

    def get_pending_request_id(self):
        pending = self._bridge.pending
        return pending.request_id if pending else None

    def get_win_probability(self, player):
        return self._ledger.win_probability(player)

    @staticmethod
    def get_num_words():
        return NUM_WORDS

    @staticmethod
    def get_request_confirmations():
        return REQUEST_CONFIRMATIONS
