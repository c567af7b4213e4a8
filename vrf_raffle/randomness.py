"""
Randomness Bridge
Issues randomness requests to the VRF coordinator and validates the matching fulfillment
"""

import logging
from dataclasses import dataclass

from .config import NUM_WORDS, REQUEST_CONFIRMATIONS
from .exceptions import InvalidRandomWords, PendingRequestExists, UnknownRequest

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PendingRequest:
    request_id: int
    round_number: int
    issued_at: int


class RandomnessBridge:
    """
    Holds the single outstanding randomness request of a raffle

    A request and its fulfillment are two independent calls correlated only by
    the request id stored here. Nothing blocks waiting for the oracle.
    """

    def __init__(self, coordinator, config, consumer):
        self.coordinator = coordinator
        self.config = config
        self.consumer = consumer
        self._pending = None

    @property
    def pending(self):
        return self._pending

    def issue_request(self, round_number, now):
        """
        Ask the coordinator for random words

        Returns:
            int: Request id returned by the coordinator
        """
        if self._pending is not None:
            raise PendingRequestExists(self._pending.request_id)

        request_id = self.coordinator.request_random_words(
            key_hash=self.config.gas_lane,
            sub_id=self.config.subscription_id,
            minimum_confirmations=REQUEST_CONFIRMATIONS,
            callback_gas_limit=self.config.callback_gas_limit,
            num_words=NUM_WORDS,
            sender=self.consumer,
        )
        self._pending = PendingRequest(request_id=request_id, round_number=round_number, issued_at=now)
        logger.info(f"🎲 Requested randomness for round {round_number} (request {request_id})")
        return request_id

    def validate(self, request_id, random_words):
        """
        Check an incoming fulfillment against the pending request

        Does not consume the request; the caller consumes it once the
        settlement it feeds has fully committed.

        Returns:
            int: The random word to settle with
        """
        pending = self._pending
        if pending is None or pending.request_id != request_id:
            logger.warning(
                f"Rejected fulfillment for request {request_id} "
                f"(pending: {pending.request_id if pending else None})"
            )
            raise UnknownRequest(request_id, pending.request_id if pending else None)

        if not random_words:
            raise InvalidRandomWords(f"Fulfillment for request {request_id} carried no random words")

        word = random_words[0]
        if not isinstance(word, int) or isinstance(word, bool) or word < 0:
            raise InvalidRandomWords(f"Random word must be a non-negative integer, got {word!r}")

        return word

    def consume(self):
        pending, self._pending = self._pending, None
        return pending
