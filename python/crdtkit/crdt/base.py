"""
CRDT base classes.

CRDTs (Conflict-free Replicated Data Types) allow concurrent modifications
to shared state without coordination. Every type here is state-based:
replicas exchange full snapshots and fold them in with ``merge``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

T = TypeVar("T")
C = TypeVar("C", bound="CRDT[Any]")


class InvalidArgumentError(ValueError):
    """Raised when a local mutation is given an argument it cannot accept."""


class CRDT(ABC, Generic[T]):
    """
    Abstract base class for all CRDT types.

    Subclasses must implement:
    - merge: Merge another replica of the same type into this one
    - value: Get the current resolved value
    """

    @abstractmethod
    def merge(self: C, other: C) -> C:
        """
        Merge another replica into this one.

        Mutates the receiver only and returns it, so merges can be chained.
        Must be commutative, associative and idempotent.
        """
        ...

    @abstractmethod
    def value(self) -> T:
        """Get the current resolved value."""
        ...

    def _check_peer(self, other: Any) -> None:
        """Reject merging replicas of a different CRDT type."""
        if not isinstance(other, type(self)):
            raise TypeError(
                f"Cannot merge {type(other).__name__} into {type(self).__name__}"
            )


class StateCRDT(CRDT[T]):
    """
    Base class for state-based CRDTs.

    State-based CRDTs transmit the full state as a JSON-compatible
    snapshot and merge using a join-semilattice operation.
    """

    @abstractmethod
    def to_json(self) -> dict[str, Any]:
        """Get the full CRDT state for transmission or storage."""
        ...

    @classmethod
    @abstractmethod
    def from_json(cls: type[C], data: dict[str, Any]) -> C:
        """Reconstruct a CRDT from a snapshot produced by ``to_json``."""
        ...

    def copy(self: C) -> C:
        """Return an independent structural copy of this replica."""
        return type(self).from_json(self.to_json())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return NotImplemented
        return self.to_json() == other.to_json()
