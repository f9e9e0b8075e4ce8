"""Pending mutation records handed over by the host before commit."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ChangeKind(str, Enum):
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class PendingMutation:
    """
    A change recorded by the host, awaiting commit.

    entity is the in-memory object being written. For updates, previous is
    the last committed snapshot of the same row, and changed_fields holds
    the names of the fields that differ between the two.
    """

    entity: Any
    kind: ChangeKind
    changed_fields: frozenset[str] = field(default_factory=frozenset)
    previous: Any = None

    @classmethod
    def insert(cls, entity) -> "PendingMutation":
        return cls(entity, ChangeKind.INSERT)

    @classmethod
    def delete(cls, entity) -> "PendingMutation":
        return cls(entity, ChangeKind.DELETE)

    @classmethod
    def update(cls, entity, changed_fields, previous=None) -> "PendingMutation":
        return cls(entity, ChangeKind.UPDATE, frozenset(changed_fields), previous)
