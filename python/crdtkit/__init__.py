"""
crdtkit - Conflict-free replicated data types for offline-first applications.
"""

from crdtkit.crdt import (
    CRDT,
    StateCRDT,
    InvalidArgumentError,
    LWWRegister,
    PNCounter,
    TextRGA,
    TextEntry,
    TextObserver,
    InsertInfo,
    DeleteInfo,
)

# Snapshot schemas
from crdtkit.protocol import (
    SnapshotKind,
    RegisterSnapshot,
    CounterSnapshot,
    TextEntrySnapshot,
    TextSnapshot,
    parse_snapshot,
)

__version__ = "0.1.0"

__all__ = [
    # CRDT types
    "CRDT",
    "StateCRDT",
    "LWWRegister",
    "PNCounter",
    "TextRGA",
    # Text helpers
    "TextEntry",
    "TextObserver",
    "InsertInfo",
    "DeleteInfo",
    # Errors
    "InvalidArgumentError",
    # Snapshots
    "SnapshotKind",
    "RegisterSnapshot",
    "CounterSnapshot",
    "TextEntrySnapshot",
    "TextSnapshot",
    "parse_snapshot",
]
