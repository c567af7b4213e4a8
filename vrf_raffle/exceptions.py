"""
Raffle Exceptions
All errors raised by the raffle contract, the local chain and the VRF mock
"""


class RaffleError(Exception):
    """Base class for every error the raffle contract raises"""
    pass


# ============ Rejected input (caller can retry with corrected input) ============

class RejectedInput(RaffleError):
    """Caller input rejected, no state change"""
    pass


class InsufficientPayment(RejectedInput):
    """Payment below the entrance fee (Raffle__notEnoughEth)"""
    def __init__(self, value, entrance_fee):
        self.value = value
        self.entrance_fee = entrance_fee
        super().__init__(f"Raffle__notEnoughEth: sent {value} wei, entrance fee is {entrance_fee} wei")


class RoundNotOpen(RejectedInput):
    """Entry attempted while the round is calculating a winner (Raffle__Notopen)"""
    def __init__(self, raffle_state):
        self.raffle_state = raffle_state
        super().__init__(f"Raffle__Notopen: raffle state is {raffle_state.name}")


class InsufficientFunds(RejectedInput):
    """Sender cannot cover the value attached to the call"""
    def __init__(self, address, value):
        self.address = address
        self.value = value
        super().__init__(f"Account {address} cannot cover {value} wei")


# ============ Invariant guards (stale read or misbehaving caller) ============

class InvariantGuard(RaffleError):
    """Stale read or unsolicited message, no state change"""
    pass


class UpkeepNotNeeded(InvariantGuard):
    """Closing action attempted while the admission predicate is false"""
    def __init__(self, current_balance, num_players, raffle_state):
        self.current_balance = current_balance
        self.num_players = num_players
        self.raffle_state = raffle_state
        super().__init__(
            f"Raffle__UpkeepNotNeeded(balance={current_balance}, players={num_players}, "
            f"state={int(raffle_state)})"
        )


class UnknownRequest(InvariantGuard):
    """Fulfillment for a request id that is not the pending one"""
    def __init__(self, request_id, pending_request_id=None):
        self.request_id = request_id
        self.pending_request_id = pending_request_id
        super().__init__(f"Unknown randomness request {request_id}")


class InvalidRandomWords(InvariantGuard):
    """Fulfillment carried no usable random value"""
    pass


class OnlyCoordinatorCanFulfill(InvariantGuard):
    """Fulfillment sent by someone other than the configured coordinator"""
    def __init__(self, have, want):
        self.have = have
        self.want = want
        super().__init__(f"OnlyCoordinatorCanFulfill(have={have}, want={want})")


# ============ Fatal commit ============

class FatalCommit(RaffleError):
    """Settlement aborted as a whole, round stays calculating"""
    pass


class TransferFailed(FatalCommit):
    """Winner rejected the payout (Raffle__TransferFailed)"""
    def __init__(self, winner, amount):
        self.winner = winner
        self.amount = amount
        super().__init__(f"Raffle__TransferFailed: payout of {amount} wei to {winner} rejected")


# ============ Programming invariants ============

class PendingRequestExists(RuntimeError):
    """A second randomness request was issued while one is outstanding"""
    def __init__(self, request_id):
        self.request_id = request_id
        super().__init__(f"Randomness request {request_id} is still pending")


# ============ Configuration / wiring ============

class InvalidConfig(RaffleError):
    """Construction parameters out of range"""
    pass


class UnsupportedNetwork(RaffleError):
    """Network has no local deployment path"""
    def __init__(self, network):
        self.network = network
        super().__init__(f"Network '{network}' is not a development chain")


# ============ VRF coordinator ============

class CoordinatorError(Exception):
    """Base class for errors raised by the VRF coordinator mock"""
    pass


class NonexistentRequest(CoordinatorError):
    def __init__(self, request_id):
        self.request_id = request_id
        super().__init__(f"nonexistent request: {request_id}")


class InvalidSubscription(CoordinatorError):
    def __init__(self, sub_id):
        self.sub_id = sub_id
        super().__init__(f"InvalidSubscription: {sub_id}")


class InvalidConsumer(CoordinatorError):
    def __init__(self, sub_id, consumer):
        self.sub_id = sub_id
        self.consumer = consumer
        super().__init__(f"InvalidConsumer: {consumer} is not registered on subscription {sub_id}")


class InsufficientBalance(CoordinatorError):
    def __init__(self, sub_id, balance, payment):
        self.sub_id = sub_id
        self.balance = balance
        self.payment = payment
        super().__init__(f"InsufficientBalance: subscription {sub_id} holds {balance}, needs {payment}")
