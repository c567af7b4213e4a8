"""
Event Log
Ordered, append-only record of contract notifications with listener hooks
"""

import logging
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

# Raffle notifications
ENTERED_ROUND = "EnteredRound"
CLOSING_REQUESTED = "ClosingRequested"
WINNER_PICKED = "WinnerPicked"

# Coordinator notifications
SUBSCRIPTION_CREATED = "SubscriptionCreated"
SUBSCRIPTION_FUNDED = "SubscriptionFunded"
RANDOM_WORDS_REQUESTED = "RandomWordsRequested"
RANDOM_WORDS_FULFILLED = "RandomWordsFulfilled"


@dataclass(frozen=True)
class Event:
    name: str
    emitter: str
    args: dict = field(default_factory=dict)
    block_number: int = 0
    timestamp: int = 0

    def __getitem__(self, key):
        return self.args[key]


class EventLog:
    """Collects events emitted by one contract and notifies listeners"""

    def __init__(self, chain, emitter):
        self.chain = chain
        self.emitter = emitter
        self._events = []
        self._listeners = {}

    def emit(self, name, **args):
        """
        Append an event and run listeners registered for it

        Listeners run synchronously, in registration order, after the event is
        recorded. One-shot listeners are removed before they run. A listener
        that raises is logged and skipped; the emitting call still succeeds.
        """
        event = Event(
            name=name,
            emitter=self.emitter,
            args=args,
            block_number=self.chain.block_number,
            timestamp=self.chain.timestamp,
        )
        self._events.append(event)
        logger.debug(f"{self.emitter} emitted {name} {args}")

        listeners = self._listeners.get(name, [])
        self._listeners[name] = [(cb, once) for cb, once in listeners if not once]
        for callback, _ in listeners:
            try:
                callback(event)
            except Exception as e:
                logger.error(f"❌ Listener for {self.emitter} {name} failed: {e}", exc_info=True)

        return event

    def on(self, name, callback):
        """Register a listener called for every future event with this name"""
        self._listeners.setdefault(name, []).append((callback, False))

    def once(self, name, callback):
        """Register a listener called for the next event with this name only"""
        self._listeners.setdefault(name, []).append((callback, True))

    def off(self, name, callback):
        self._listeners[name] = [(cb, once) for cb, once in self._listeners.get(name, []) if cb != callback]

    def filter(self, name=None):
        """Return recorded events, optionally only those with the given name"""
        if name is None:
            return list(self._events)
        return [e for e in self._events if e.name == name]

    def last(self, name):
        matching = self.filter(name)
        return matching[-1] if matching else None

    def __len__(self):
        return len(self._events)

    def __iter__(self):
        return iter(list(self._events))
