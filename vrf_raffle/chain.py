"""
Local Chain
In-process execution environment: accounts, native value transfers and a block clock
"""

import hashlib
import logging
import threading
import time
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass
class Account:
    address: str
    balance: int = 0
    accepts_value: bool = True
    label: str = None


class LocalChain:
    """
    Minimal stand-in for the chain the raffle is deployed on

    Every mined block advances the timestamp by one second, the way a local
    development node does when blocks are produced on demand.
    """

    def __init__(self, genesis_timestamp=None):
        self._lock = threading.RLock()
        self._accounts = {}
        self._next_account = 0
        self.timestamp = int(genesis_timestamp if genesis_timestamp is not None else time.time())
        self.block_number = 0

    # accounts

    def create_account(self, balance=0, accepts_value=True, label=None):
        """
        Create a new account

        Args:
            balance: Starting balance in wei
            accepts_value: False to model a recipient that rejects incoming value
            label: Optional human readable label (also seeds the address)

        Returns:
            str: Account address
        """
        with self._lock:
            seed = f"{label or 'account'}:{self._next_account}"
            self._next_account += 1
            address = "0x" + hashlib.sha256(seed.encode()).hexdigest()[:40]
            self._accounts[address] = Account(address, balance, accepts_value, label)
            return address

    def get_account(self, address):
        account = self._accounts.get(address)
        if account is None:
            raise KeyError(f"Unknown account {address}")
        return account

    def balance_of(self, address):
        account = self._accounts.get(address)
        return account.balance if account else 0

    def set_accepts_value(self, address, accepts_value):
        self.get_account(address).accepts_value = accepts_value

    def transfer(self, sender, recipient, amount):
        """
        Move native value between two accounts

        Returns:
            bool: False (and no state change) when the sender lacks funds or the
            recipient rejects value
        """
        if amount < 0:
            raise ValueError(f"Transfer amount must be >= 0, got {amount}")

        with self._lock:
            source = self._accounts.get(sender)
            target = self._accounts.get(recipient)
            if source is None or target is None:
                logger.warning(f"Transfer between unknown accounts {sender} -> {recipient}")
                return False
            if source.balance < amount:
                logger.debug(f"Transfer of {amount} wei from {sender} failed: balance {source.balance}")
                return False
            if not target.accepts_value:
                logger.debug(f"Transfer of {amount} wei to {recipient} rejected by recipient")
                return False

            source.balance -= amount
            target.balance += amount
            return True

    # clock

    def increase_time(self, seconds):
        if seconds < 0:
            raise ValueError("Cannot move the clock backwards")
        with self._lock:
            self.timestamp += int(seconds)

    def mine(self, blocks=1):
        with self._lock:
            for _ in range(blocks):
                self.block_number += 1
                self.timestamp += 1
