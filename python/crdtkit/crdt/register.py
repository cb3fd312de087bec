"""
LWW-Register (Last-Writer-Wins Register) CRDT implementation.

A register holds a single value. Concurrent writes are resolved by
comparing wall-clock timestamps, an explicit write counter and finally
the node ID.
"""

from __future__ import annotations

import logging
import time
from copy import deepcopy
from typing import Any, TypeVar

from ..protocol import RegisterSnapshot
from .base import StateCRDT

T = TypeVar("T")

logger = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class LWWRegister(StateCRDT[T]):
    """
    Last-Writer-Wins Register.

    Stores a single value. When two replicas disagree, the winner is chosen
    by these rules, in order:

    1. If the timestamps are more than ``STALE_THRESHOLD_MS`` apart, the
       later timestamp wins regardless of counter or node ID.
    2. If the timestamps are within ``COUNTER_WINDOW_MS`` of each other,
       clocks are not trusted to order the writes and the higher
       ``counter`` wins.
    3. Outside the counter window, the later timestamp wins.
    4. Otherwise the lexicographically greater ``node_id`` wins.

    Both thresholds are class attributes read at comparison time, so
    changing them affects every register in the process.

    Two states with the same timestamp, counter and node ID are treated
    as the same write, and each side keeps its own value. Writers must
    never reuse a ``(node_id, counter)`` pair for different values.

    Values are deep-copied when taken from another replica and when
    snapshotted, so no register shares a mutable value with another.

    Example:
        a = LWWRegister("draft", node_id="node-a", counter=1)
        b = LWWRegister("final", node_id="node-b", counter=2)
        a.competition(b)
        print(a.value())  # "final"
    """

    STALE_THRESHOLD_MS: int = 30 * 60 * 1000
    COUNTER_WINDOW_MS: int = 30 * 1000

    def __init__(
        self,
        value: T,
        node_id: str = "",
        counter: int = 0,
        timestamp: int | None = None,
    ):
        self._value = value
        self.node_id = node_id
        self.counter = counter
        self.timestamp = _now_ms() if timestamp is None else timestamp

    def set(self, value: T, counter: int | None = None, timestamp: int | None = None) -> "LWWRegister[T]":
        """
        Record a local write.

        Args:
            value: The new value
            counter: Logical write sequence number (default: current + 1)
            timestamp: Write time in ms since epoch (default: now)
        """
        self._value = value
        self.counter = self.counter + 1 if counter is None else counter
        self.timestamp = _now_ms() if timestamp is None else timestamp
        return self

    def wins_over(self, other: "LWWRegister[T]") -> bool:
        """Check if this register's state should replace ``other``'s."""
        delta = self.timestamp - other.timestamp

        if abs(delta) > self.STALE_THRESHOLD_MS:
            return delta > 0

        if abs(delta) <= self.COUNTER_WINDOW_MS:
            if self.counter != other.counter:
                return self.counter > other.counter
        elif delta != 0:
            return delta > 0

        return self.node_id > other.node_id

    def competition(self, other: "LWWRegister[T]") -> "LWWRegister[T]":
        """
        Compete against another register, keeping the winner's state.

        ``other`` is only read. Competing against an identical or losing
        state leaves this register unchanged.
        """
        self._check_peer(other)

        if other.wins_over(self):
            logger.debug(
                f"Register {self.node_id!r}@{self.timestamp} replaced by "
                f"{other.node_id!r}@{other.timestamp} (counter {other.counter})"
            )
            self._value = deepcopy(other._value)
            self.timestamp = other.timestamp
            self.counter = other.counter
            self.node_id = other.node_id

        return self

    def merge(self, other: "LWWRegister[T]") -> "LWWRegister[T]":
        """Merge another register into this one (same as ``competition``)."""
        return self.competition(other)

    def value(self) -> T:
        """Get the current value."""
        return self._value

    def to_json(self) -> dict[str, Any]:
        """Get the full state for transmission."""
        return {
            "value": deepcopy(self._value),
            "timestamp": self.timestamp,
            "counter": self.counter,
            "nodeId": self.node_id,
        }

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "LWWRegister[Any]":
        """Reconstruct register from transmitted state."""
        snapshot = RegisterSnapshot.model_validate(data)
        return cls(
            deepcopy(snapshot.value),
            node_id=snapshot.node_id,
            counter=snapshot.counter,
            timestamp=snapshot.timestamp,
        )

    def __repr__(self) -> str:
        return (
            f"LWWRegister(value={self._value!r}, node_id={self.node_id!r}, "
            f"counter={self.counter}, timestamp={self.timestamp})"
        )
