"""
Change classifier - decides which owners a batch of mutations affects.

Rules:
    PRIMARY (order-like)
        insert / delete  -> owner always scheduled
        update           -> scheduled only when a value-affecting field changed;
                            a moved owner reference schedules old and new owner
    SECONDARY (payment-like)
        insert / update  -> parent resolved, parent's owner scheduled when the
                            status function reports the terminal status
        delete           -> ignored
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterable

from tallyman.lifetime.mutations import ChangeKind, PendingMutation
from tallyman.lifetime.queue import default_identity, owner_key

logger = logging.getLogger(__name__)


class RelatedRole(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"


@dataclass(frozen=True)
class _Binding:
    role: RelatedRole
    owner_field: str
    value_fields: frozenset[str] = frozenset()
    resolve_parent: Callable[[Any], Any] | None = None


class ChangeClassifier:
    """
    Classify PendingMutations into the owners that need recomputation.

    Entity roles are registered once per type; a mutation is dispatched by
    walking the entity type's MRO, so subclasses share their base's role.
    The classifier holds no per-transaction state and can be shared.
    """

    def __init__(
        self,
        status_fn: Callable[[Any, list], Any] | None = None,
        full_status: Any = "full",
        identity: Callable[[Any], Any] = default_identity,
    ):
        self.status_fn = status_fn
        self.full_status = full_status
        self.identity = identity
        self._bindings: dict[type, _Binding] = {}

    # ======================================================================
    # Registration
    # ======================================================================

    def register_primary(
        self,
        entity_type: type,
        owner_field: str,
        value_fields: Iterable[str],
    ) -> None:
        """Register an entity type whose rows feed the owner's value directly."""
        self._bindings[entity_type] = _Binding(
            role=RelatedRole.PRIMARY,
            owner_field=owner_field,
            value_fields=frozenset(value_fields),
        )

    def register_secondary(
        self,
        entity_type: type,
        resolve_parent: Callable[[Any], Any],
        owner_field: str,
    ) -> None:
        """
        Register an entity type that settles a primary parent.

        Args:
            entity_type: Secondary entity class
            resolve_parent: Returns the parent primary entity, or None when it
                cannot be found
            owner_field: Attribute of the parent that references the owner
        """
        if self.status_fn is None:
            raise ValueError("A status function is required for secondary entities")
        self._bindings[entity_type] = _Binding(
            role=RelatedRole.SECONDARY,
            owner_field=owner_field,
            resolve_parent=resolve_parent,
        )

    def role_of(self, entity_type: type) -> RelatedRole | None:
        binding = self._binding_for(entity_type)
        return binding.role if binding else None

    def handles(self, entity_type: type) -> bool:
        return self._binding_for(entity_type) is not None

    def _binding_for(self, entity_type: type) -> _Binding | None:
        for klass in entity_type.__mro__:
            binding = self._bindings.get(klass)
            if binding is not None:
                return binding
        return None

    # ======================================================================
    # Classification
    # ======================================================================

    def classify(self, mutations: Iterable[PendingMutation], **context) -> list:
        """
        Return the owners to recompute for a batch of mutations.

        Extra keyword arguments are passed to resolve_parent (e.g. the
        database alias the mutation was written to).

        The result is deduplicated by owner identity (unsaved owners by
        object identity) and keeps first-seen order.
        """
        owners: dict[Any, Any] = {}
        for mutation in mutations:
            binding = self._binding_for(type(mutation.entity))
            if binding is None:
                continue
            if binding.role is RelatedRole.PRIMARY:
                found = self._classify_primary(mutation, binding)
            else:
                found = self._classify_secondary(mutation, binding, context)
            for owner in found:
                owners.setdefault(owner_key(owner, self.identity), owner)
        return list(owners.values())

    def _classify_primary(self, mutation: PendingMutation, binding: _Binding) -> list:
        entity = mutation.entity
        current = _owner_of(entity, binding.owner_field)

        if mutation.kind is ChangeKind.DELETE:
            if self.identity(entity) is None:
                # Never persisted, nothing to take out of the aggregate
                return []
            return _present(current)

        if mutation.kind is ChangeKind.INSERT:
            return _present(current)

        changed = mutation.changed_fields & binding.value_fields
        if not changed:
            return []

        owners = []
        if binding.owner_field in changed:
            owners.extend(_present(_owner_of(mutation.previous, binding.owner_field)))
            owners.extend(_present(current))
        if changed - {binding.owner_field}:
            owners.extend(_present(current))
        return owners

    def _classify_secondary(
        self, mutation: PendingMutation, binding: _Binding, context: dict
    ) -> list:
        if mutation.kind is ChangeKind.DELETE:
            return []

        parent = binding.resolve_parent(mutation.entity, **context)
        if parent is None:
            logger.debug(
                "Parent of %r not found, mutation ignored", mutation.entity
            )
            return []

        status = self.status_fn(parent, [mutation.entity])
        if status != self.full_status:
            return []
        return _present(_owner_of(parent, binding.owner_field))


def _owner_of(entity, owner_field: str):
    if entity is None:
        return None
    # Django raises RelatedObjectDoesNotExist (an AttributeError) for unset FKs
    return getattr(entity, owner_field, None)


def _present(owner) -> list:
    return [] if owner is None else [owner]
