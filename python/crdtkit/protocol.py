"""
Snapshot schemas for crdtkit.

Defines the JSON-compatible snapshot shape of every CRDT using Pydantic
models, so state received from a peer or loaded from storage is validated
and defaulted before it is rehydrated.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Union

from pydantic import BaseModel, ConfigDict, Field, NonNegativeInt, field_validator

# Maximum lengths for string fields
MAX_NODE_ID_LENGTH = 256
MAX_ID_LENGTH = MAX_NODE_ID_LENGTH + 32


class SnapshotKind(str, Enum):
    """The CRDT types a snapshot can describe."""

    REGISTER = "register"
    COUNTER = "counter"
    TEXT = "text"


class _Snapshot(BaseModel):
    # Accept both the wire names (camelCase) and the Python attribute names.
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


# =============================================================================
# Register
# =============================================================================


class RegisterSnapshot(_Snapshot):
    """Snapshot of an LWW register."""

    value: Any
    timestamp: int
    counter: int = 0
    node_id: str = Field("", alias="nodeId", max_length=MAX_NODE_ID_LENGTH)


# =============================================================================
# Counter
# =============================================================================


class CounterSnapshot(_Snapshot):
    """Snapshot of a PN-Counter. Tallies can never be negative."""

    local_node_id: str = Field(..., alias="localNodeId", max_length=MAX_NODE_ID_LENGTH)
    increments: Dict[str, NonNegativeInt] = Field(default_factory=dict)
    decrements: Dict[str, NonNegativeInt] = Field(default_factory=dict)


# =============================================================================
# Text
# =============================================================================


class TextEntrySnapshot(_Snapshot):
    """A single character slot in a text snapshot."""

    char: str = Field(..., min_length=1, max_length=1)
    deleted: bool = False


class TextSnapshot(_Snapshot):
    """Snapshot of a text RGA."""

    local_node_id: str = Field(..., alias="localNodeId", max_length=MAX_NODE_ID_LENGTH)
    local_counter: NonNegativeInt = Field(0, alias="localCounter")
    entries: Dict[str, TextEntrySnapshot] = Field(default_factory=dict)
    order: List[str] = Field(default_factory=list)

    @field_validator("entries")
    @classmethod
    def validate_entry_ids(
        cls, v: Dict[str, TextEntrySnapshot]
    ) -> Dict[str, TextEntrySnapshot]:
        for entry_id in v:
            if len(entry_id) > MAX_ID_LENGTH:
                raise ValueError(f"Entry id too long ({len(entry_id)} chars, max {MAX_ID_LENGTH})")
        return v

    @field_validator("order")
    @classmethod
    def validate_order_ids(cls, v: List[str]) -> List[str]:
        for entry_id in v:
            if len(entry_id) > MAX_ID_LENGTH:
                raise ValueError(f"Order id too long ({len(entry_id)} chars, max {MAX_ID_LENGTH})")
        return v


# =============================================================================
# Snapshot Parsing
# =============================================================================


def parse_snapshot(kind: Union[str, SnapshotKind], data: Dict[str, Any]) -> Any:
    """
    Rehydrate a CRDT of the given kind from a raw snapshot dictionary.

    Raises:
        ValueError: If the kind is unknown or the snapshot is invalid.
    """
    from .crdt import LWWRegister, PNCounter, TextRGA

    type_map = {
        SnapshotKind.REGISTER: LWWRegister,
        SnapshotKind.COUNTER: PNCounter,
        SnapshotKind.TEXT: TextRGA,
    }

    try:
        snapshot_kind = SnapshotKind(kind)
    except ValueError:
        raise ValueError(f"Unknown snapshot kind: {kind}") from None

    return type_map[snapshot_kind].from_json(data)


__all__ = [
    "MAX_NODE_ID_LENGTH",
    "MAX_ID_LENGTH",
    "SnapshotKind",
    "RegisterSnapshot",
    "CounterSnapshot",
    "TextEntrySnapshot",
    "TextSnapshot",
    "parse_snapshot",
]
