"""
Deferred recompute queue.

One queue per transaction. Owners are collected while the transaction is
open and drained exactly once after it commits:

    IDLE --enqueue--> COLLECTING --drain--> DRAINING --> IDLE

Nothing can be enqueued while DRAINING, and a drain started from inside the
queue's own persist step is a no-op.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)


def default_identity(obj) -> Any:
    """Identity of an ORM-like object (None while unsaved)."""
    return getattr(obj, "pk", None)


def owner_key(owner, identity: Callable[[Any], Any] = default_identity) -> tuple:
    """Deduplication key: (type, identity), or object identity while unsaved."""
    value = identity(owner)
    if value is None:
        return ("unsaved", id(owner))
    return (type(owner), value)


class QueueState(str, Enum):
    IDLE = "idle"
    COLLECTING = "collecting"
    DRAINING = "draining"


@dataclass(frozen=True)
class Recomputed:
    """An owner whose derived value changed during a drain."""

    owner: Any
    previous: Any
    current: Any


class RecomputeQueue:
    """
    Deduplicated set of owners awaiting recomputation.

    Args:
        value_attr: Name of the owner attribute holding the derived value
        identity: Returns an owner's stable identity, None while unsaved
    """

    def __init__(
        self,
        value_attr: str = "derived_value",
        identity: Callable[[Any], Any] = default_identity,
    ):
        self.value_attr = value_attr
        self.identity = identity
        self._queued: dict[tuple, Any] = {}
        self._discarded: set[tuple] = set()
        self._draining = False

    def __len__(self) -> int:
        return len(self._queued)

    def __contains__(self, owner) -> bool:
        return owner_key(owner, self.identity) in self._queued

    @property
    def owners(self) -> list:
        return list(self._queued.values())

    @property
    def state(self) -> QueueState:
        if self._draining:
            return QueueState.DRAINING
        if self._queued:
            return QueueState.COLLECTING
        return QueueState.IDLE

    def enqueue(self, owner) -> bool:
        """
        Schedule owner for recomputation.

        Returns:
            True if the owner was added, False if it was already queued,
            discarded in this transaction, or the queue is draining
        """
        if self._draining:
            logger.debug("Queue is draining, %r not scheduled", owner)
            return False
        key = owner_key(owner, self.identity)
        if key in self._discarded or key in self._queued:
            return False
        self._queued[key] = owner
        return True

    def discard(self, owner) -> None:
        """Drop an owner that is being deleted and keep it out for this transaction."""
        key = owner_key(owner, self.identity)
        self._queued.pop(key, None)
        self._discarded.add(key)

    def clear(self) -> None:
        self._queued.clear()
        self._discarded.clear()

    def drain_and_recompute(
        self,
        recompute_fn: Callable[[Any], Any],
        persist_fn: Callable[[list], Any],
        current_fn: Callable[[Any], Any] | None = None,
    ) -> list[Recomputed]:
        """
        Recompute every queued owner and persist the changed ones in one call.

        Owners without identity (deleted before ever being persisted) are
        skipped. current_fn returns the stored value to compare against;
        by default the owner's in-memory attribute is used. A recompute_fn
        failure propagates and nothing is persisted. The queue is cleared in
        every case.

        Returns:
            List of Recomputed for owners whose value changed
        """
        if self._draining:
            logger.debug("Nested drain ignored while persisting")
            return []

        self._draining = True
        try:
            changes = []
            for owner in list(self._queued.values()):
                if self.identity(owner) is None:
                    logger.debug("Skipping %r: no identity", owner)
                    continue

                if current_fn is None:
                    current = getattr(owner, self.value_attr)
                else:
                    current = current_fn(owner)
                new_value = recompute_fn(owner)
                if new_value != current:
                    setattr(owner, self.value_attr, new_value)
                    changes.append(Recomputed(owner, current, new_value))

            if changes:
                persist_fn([change.owner for change in changes])
            return changes
        finally:
            self._draining = False
            self.clear()
