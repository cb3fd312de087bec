"""
CRDT (Conflict-free Replicated Data Types) module.

Provides data structures that can be replicated across multiple nodes
and merged automatically without conflicts.
"""

from .base import (
    CRDT,
    InvalidArgumentError,
    StateCRDT,
)
from .register import LWWRegister
from .counter import PNCounter
from .text import (
    DeleteInfo,
    InsertInfo,
    TextEntry,
    TextObserver,
    TextRGA,
)

__all__ = [
    # Base classes
    "CRDT",
    "StateCRDT",
    "InvalidArgumentError",
    # CRDT types
    "LWWRegister",
    "PNCounter",
    "TextRGA",
    # Text helpers
    "TextEntry",
    "TextObserver",
    "InsertInfo",
    "DeleteInfo",
]
