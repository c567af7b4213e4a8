"""
VRF Coordinator Mock
Local randomness oracle used on development chains: subscriptions, requests
and on-demand fulfillment through the consumer's callback
"""

import logging
import threading
from dataclasses import dataclass, field

from utils.provably_fair import generate_random_words

from . import events
from .config import to_wei
from .exceptions import (
    InsufficientBalance,
    InvalidConsumer,
    InvalidSubscription,
    NonexistentRequest,
    RaffleError,
)

logger = logging.getLogger(__name__)

# Premium charged per request
BASE_FEE = to_wei("0.25")
# Price of one unit of callback gas, in LINK juels
GAS_PRICE_LINK = 10 ** 9

MAX_NUM_WORDS = 500


@dataclass
class Subscription:
    sub_id: int
    owner: str
    balance: int = 0
    consumers: set = field(default_factory=set)


@dataclass(frozen=True)
class RandomnessRequest:
    request_id: int
    sub_id: int
    key_hash: str
    callback_gas_limit: int
    num_words: int
    sender: str
    block_number: int


@dataclass(frozen=True)
class Fulfillment:
    request_id: int
    words: tuple
    payment: int
    success: bool
    server_seed: str = None
    error: str = None


class VRFCoordinatorMock:
    """Randomness oracle stand-in (mirrors VRFCoordinatorV2Mock)"""

    def __init__(self, chain, base_fee=BASE_FEE, gas_price_link=GAS_PRICE_LINK, server_seed=None):
        """
        Args:
            chain: LocalChain the coordinator is deployed on
            base_fee: Flat premium per fulfilled request
            gas_price_link: Price per unit of callback gas
            server_seed: Fixed seed for derived words (None = fresh secure seed per request)
        """
        self.chain = chain
        self.base_fee = base_fee
        self.gas_price_link = gas_price_link
        self.server_seed = server_seed
        self.address = chain.create_account(label="VRFCoordinatorV2Mock")
        self.events = events.EventLog(chain, self.address)

        self._lock = threading.RLock()
        self._subscriptions = {}
        self._requests = {}
        self._next_sub_id = 1
        self._next_request_id = 1

        logger.info(f"🧪 VRF coordinator mock deployed at {self.address}")

    # ============ Subscriptions ============

    def create_subscription(self, owner):
        with self._lock:
            sub_id = self._next_sub_id
            self._next_sub_id += 1
            self._subscriptions[sub_id] = Subscription(sub_id=sub_id, owner=owner)
        self.events.emit(events.SUBSCRIPTION_CREATED, sub_id=sub_id, owner=owner)
        return sub_id

    def fund_subscription(self, sub_id, amount):
        with self._lock:
            subscription = self._get_subscription(sub_id)
            old_balance = subscription.balance
            subscription.balance += amount
        self.events.emit(events.SUBSCRIPTION_FUNDED, sub_id=sub_id, old_balance=old_balance,
                         new_balance=old_balance + amount)

    def add_consumer(self, sub_id, consumer):
        with self._lock:
            self._get_subscription(sub_id).consumers.add(consumer)

    def remove_consumer(self, sub_id, consumer):
        with self._lock:
            subscription = self._get_subscription(sub_id)
            if consumer not in subscription.consumers:
                raise InvalidConsumer(sub_id, consumer)
            subscription.consumers.discard(consumer)

    def get_subscription(self, sub_id):
        with self._lock:
            return self._get_subscription(sub_id)

    def _get_subscription(self, sub_id):
        subscription = self._subscriptions.get(sub_id)
        if subscription is None:
            raise InvalidSubscription(sub_id)
        return subscription

    # ============ Requests ============

    def request_random_words(self, key_hash, sub_id, minimum_confirmations, callback_gas_limit, num_words, sender):
        """
        Record a randomness request

        Returns:
            int: Request id, unique and increasing from 1
        """
        if num_words < 1 or num_words > MAX_NUM_WORDS:
            raise ValueError(f"num_words must be between 1 and {MAX_NUM_WORDS}, got {num_words}")

        with self._lock:
            subscription = self._get_subscription(sub_id)
            if sender not in subscription.consumers:
                raise InvalidConsumer(sub_id, sender)

            request_id = self._next_request_id
            self._next_request_id += 1
            self._requests[request_id] = RandomnessRequest(
                request_id=request_id,
                sub_id=sub_id,
                key_hash=key_hash,
                callback_gas_limit=callback_gas_limit,
                num_words=num_words,
                sender=sender,
                block_number=self.chain.block_number,
            )

        self.events.emit(
            events.RANDOM_WORDS_REQUESTED,
            key_hash=key_hash,
            request_id=request_id,
            sub_id=sub_id,
            minimum_confirmations=minimum_confirmations,
            callback_gas_limit=callback_gas_limit,
            num_words=num_words,
            sender=sender,
        )
        return request_id

    def pending_request_ids(self):
        with self._lock:
            return sorted(self._requests)

    def fulfill_random_words(self, request_id, consumer, words=None):
        """
        Deliver random words to the consumer that asked for them

        The request is consumed and the subscription charged before the
        callback runs. A RaffleError raised by the consumer does not undo the
        fulfillment: it is reported through `success=False`, the way the real
        coordinator reports a reverted callback.

        Args:
            request_id: Request to fulfill
            consumer: Contract object exposing raw_fulfill_random_words()
            words: Explicit words to deliver (None = derive them)

        Returns:
            Fulfillment: Outcome of the delivery

        Raises:
            NonexistentRequest: unknown or already fulfilled request
            InsufficientBalance: subscription cannot pay for the callback
        """
        with self._lock:
            request = self._requests.get(request_id)
            if request is None:
                raise NonexistentRequest(request_id)

            subscription = self._get_subscription(request.sub_id)
            payment = self.base_fee + request.callback_gas_limit * self.gas_price_link
            if subscription.balance < payment:
                raise InsufficientBalance(request.sub_id, subscription.balance, payment)

            server_seed = None
            if words is None:
                derived = generate_random_words(request_id, request.num_words, self.server_seed)
                words = derived['words']
                server_seed = derived['server_seed']

            del self._requests[request_id]
            subscription.balance -= payment

        success = True
        error = None
        try:
            consumer.raw_fulfill_random_words(request_id, list(words), sender=self.address)
        except RaffleError as e:
            success = False
            error = str(e)
            logger.warning(f"Consumer callback for request {request_id} failed: {e}", exc_info=True)

        fulfillment = Fulfillment(
            request_id=request_id,
            words=tuple(words),
            payment=payment,
            success=success,
            server_seed=server_seed,
            error=error,
        )
        self.events.emit(
            events.RANDOM_WORDS_FULFILLED,
            request_id=request_id,
            output_seed=words[0] if words else None,
            payment=payment,
            success=success,
        )
        return fulfillment
