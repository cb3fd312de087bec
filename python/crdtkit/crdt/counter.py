"""
Counter CRDT implementation.

PN-Counter: Positive-Negative counter (increment and decrement)
"""

from __future__ import annotations

import logging
from typing import Any

from ..protocol import CounterSnapshot
from .base import StateCRDT

logger = logging.getLogger(__name__)


def _merge_max(target: dict[str, int], source: dict[str, int]) -> bool:
    """Raise each entry of target to at least source's. Returns True on change."""
    changed = False
    for node_id, count in source.items():
        current = target.get(node_id, 0)
        if node_id not in target or count > current:
            target[node_id] = max(current, count)
            changed = True
    return changed


class PNCounter(StateCRDT[int]):
    """
    Positive-Negative Counter (PN-Counter).

    Each replica keeps its own tally of increments and decrements. Tallies
    only ever grow, and merging takes the maximum of each replica's tally.
    The value is the difference between the two sums.

    Example:
        counter = PNCounter("node-1")
        counter.increment().increment().decrement()
        print(counter.get_count())  # 1
    """

    def __init__(
        self,
        local_node_id: str,
        increments: dict[str, int] | None = None,
        decrements: dict[str, int] | None = None,
    ):
        self.local_node_id = local_node_id
        self.increments: dict[str, int] = dict(increments or {})  # Increment counts per node
        self.decrements: dict[str, int] = dict(decrements or {})  # Decrement counts per node

    def increment(self) -> "PNCounter":
        """Add one to this replica's increment tally."""
        current = self.increments.get(self.local_node_id, 0)
        self.increments[self.local_node_id] = current + 1
        return self

    def decrement(self) -> "PNCounter":
        """Add one to this replica's decrement tally."""
        current = self.decrements.get(self.local_node_id, 0)
        self.decrements[self.local_node_id] = current + 1
        return self

    def merge(self, other: "PNCounter") -> "PNCounter":
        """Merge another counter by taking max of each node's counts."""
        self._check_peer(other)

        changed = _merge_max(self.increments, other.increments)
        changed = _merge_max(self.decrements, other.decrements) or changed

        if changed:
            logger.debug(
                f"Counter {self.local_node_id!r} merged state from "
                f"{other.local_node_id!r}, count is now {self.get_count()}"
            )
        return self

    def get_count(self) -> int:
        """Get the current counter value (increments - decrements)."""
        pos = sum(self.increments.values())
        neg = sum(self.decrements.values())
        return pos - neg

    def value(self) -> int:
        """Get the current counter value."""
        return self.get_count()

    def to_json(self) -> dict[str, Any]:
        """Get the full state for transmission."""
        return {
            "localNodeId": self.local_node_id,
            "increments": dict(self.increments),
            "decrements": dict(self.decrements),
        }

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "PNCounter":
        """Reconstruct counter from transmitted state."""
        snapshot = CounterSnapshot.model_validate(data)
        return cls(
            snapshot.local_node_id,
            increments=snapshot.increments,
            decrements=snapshot.decrements,
        )

    def __repr__(self) -> str:
        return f"PNCounter(local_node_id={self.local_node_id!r}, count={self.get_count()})"
