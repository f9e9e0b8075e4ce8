"""
Tallyman lifetime core - deferred, deduplicated recomputation of derived values.

ORM-agnostic. The host persistence layer feeds PendingMutations to a
ChangeClassifier before commit and drains a RecomputeQueue after commit.
The Django binding lives in tallyman.listeners.

Usage:
    from tallyman.lifetime import ChangeClassifier, RecomputeQueue

    classifier = ChangeClassifier(status_fn)
    classifier.register_primary(Order, owner_field="customer",
                                value_fields={"customer", "subtotal_value"})

    queue = RecomputeQueue(value_attr="lifetime")
    for owner in classifier.classify(mutations):
        queue.enqueue(owner)

    # after commit
    queue.drain_and_recompute(recompute_fn, persist_fn)
"""

from tallyman.lifetime.mutations import ChangeKind, PendingMutation
from tallyman.lifetime.classifier import ChangeClassifier, RelatedRole
from tallyman.lifetime.queue import QueueState, Recomputed, RecomputeQueue

__all__ = [
    "ChangeKind",
    "PendingMutation",
    "ChangeClassifier",
    "RelatedRole",
    "QueueState",
    "Recomputed",
    "RecomputeQueue",
]
