"""
Text RGA (Replicated Growable Array) CRDT implementation.

Each character gets a globally unique id ``"<node_id>:<counter>"``.
Characters are never removed, only tombstoned, and merging two replicas
unions their characters and sorts the ids, so every replica holding the
same characters shows the same text.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping

from ..protocol import TextSnapshot
from .base import InvalidArgumentError, StateCRDT

logger = logging.getLogger(__name__)


@dataclass
class TextEntry:
    """A character slot. Once ``deleted`` is set it is never cleared."""
    char: str
    deleted: bool = False


@dataclass(frozen=True)
class InsertInfo:
    """Notification for a locally inserted character."""
    index: int
    id: str
    char: str


@dataclass(frozen=True)
class DeleteInfo:
    """Notification for a locally deleted character."""
    index: int
    id: str


InsertCallback = Callable[[InsertInfo], None]
DeleteCallback = Callable[[DeleteInfo], None]


class TextObserver:
    """
    Listener for local edits on a TextRGA.

    Override either method. Both are called synchronously after the
    mutation has been applied, and never for changes arriving via merge.
    """

    def on_insert(self, info: InsertInfo) -> None:
        pass

    def on_delete(self, info: DeleteInfo) -> None:
        pass


def _copy_entry(entry: TextEntry | Mapping[str, Any]) -> TextEntry:
    if isinstance(entry, TextEntry):
        return TextEntry(char=entry.char, deleted=entry.deleted)
    return TextEntry(char=entry["char"], deleted=bool(entry.get("deleted", False)))


class TextRGA(StateCRDT[str]):
    """
    State-based text CRDT.

    ``order`` holds every id, live and tombstoned. Local inserts splice new
    ids into it by visible position; merges replace it with the sorted
    union of both replicas' ids.

    Example:
        doc = TextRGA("node-a")
        doc.insert_at(0, "H")
        doc.insert_at(1, "i")
        print(doc.get_text())  # "Hi"
    """

    def __init__(
        self,
        local_node_id: str,
        local_counter: int = 0,
        entries: Mapping[str, TextEntry | Mapping[str, Any]] | None = None,
        order: Iterable[str] | None = None,
        on_insert: InsertCallback | None = None,
        on_delete: DeleteCallback | None = None,
    ):
        self.local_node_id = local_node_id
        self.local_counter = local_counter
        self.entries: dict[str, TextEntry] = {
            entry_id: _copy_entry(entry) for entry_id, entry in (entries or {}).items()
        }
        self.order: list[str] = list(order or [])
        # Callbacks are local wiring, not replicated state
        self.on_insert = on_insert
        self.on_delete = on_delete

    def attach(self, observer: TextObserver) -> "TextRGA":
        """Route local insert and delete notifications to an observer."""
        self.on_insert = observer.on_insert
        self.on_delete = observer.on_delete
        return self

    def _next_id(self) -> str:
        """
        Allocate a new globally unique id for this replica.

        Skips ids already present, which a snapshot whose ``localCounter``
        lags behind its own entries would otherwise hand out again.
        """
        taken = set(self.entries).union(self.order)
        self.local_counter += 1
        while f"{self.local_node_id}:{self.local_counter}" in taken:
            self.local_counter += 1
        return f"{self.local_node_id}:{self.local_counter}"

    def _is_visible(self, entry_id: str) -> bool:
        entry = self.entries.get(entry_id)
        return entry is not None and not entry.deleted

    def visible_ids(self) -> list[str]:
        """Ids of the non-tombstoned characters, in document order."""
        return [entry_id for entry_id in self.order if self._is_visible(entry_id)]

    def insert_at(self, index: int, char: str) -> str:
        """
        Insert a single character at a position among visible characters.

        Out-of-range indices are clamped to the nearest end of the text.

        Args:
            index: 0-based index over visible characters
            char: Single-character string

        Returns the id of the inserted character.

        Raises:
            InvalidArgumentError: If char is not exactly one character.
        """
        if not isinstance(char, str) or len(char) != 1:
            raise InvalidArgumentError(
                f"TextRGA.insert_at expects a single character string, got {char!r}"
            )

        visible = self.visible_ids()
        index = max(0, min(index, len(visible)))
        entry_id = self._next_id()

        if index == len(visible):
            self.order.append(entry_id)
        else:
            # Tombstones ahead of the target slot stay ahead of the new id
            self.order.insert(self.order.index(visible[index]), entry_id)

        self.entries[entry_id] = TextEntry(char=char)

        if self.on_insert is not None:
            self.on_insert(InsertInfo(index=index, id=entry_id, char=char))

        return entry_id

    def insert_text(self, index: int, text: str) -> list[str]:
        """
        Insert a string at a visible position, one character at a time.

        Returns the ids of the inserted characters in order.
        """
        if not isinstance(text, str):
            raise InvalidArgumentError(
                f"TextRGA.insert_text expects a string, got {type(text).__name__}"
            )

        index = max(0, min(index, len(self)))
        return [self.insert_at(index + offset, char) for offset, char in enumerate(text)]

    def delete_at(self, index: int) -> None:
        """
        Tombstone the character at a position among visible characters.

        An out-of-range index is ignored.
        """
        visible = self.visible_ids()

        if index < 0 or index >= len(visible):
            logger.debug(
                f"Ignoring delete at {index} on {self.local_node_id!r} "
                f"(visible length {len(visible)})"
            )
            return

        entry_id = visible[index]
        self.entries[entry_id].deleted = True

        if self.on_delete is not None:
            self.on_delete(DeleteInfo(index=index, id=entry_id))

    def delete_range(self, index: int, count: int) -> int:
        """
        Tombstone up to ``count`` visible characters starting at ``index``.

        Returns the number of characters deleted.
        """
        if index < 0:
            return 0

        deleted = 0
        while deleted < count and index < len(self):
            self.delete_at(index)
            deleted += 1
        return deleted

    def merge(self, other: "TextRGA") -> "TextRGA":
        """
        Merge another replica into this one.

        Characters are unioned and deletion wins. The resulting order is
        the union of all known ids sorted by id string, which is the same on
        every replica holding the same characters.
        """
        self._check_peer(other)

        added = 0
        for entry_id, remote in other.entries.items():
            local = self.entries.get(entry_id)
            if local is None:
                self.entries[entry_id] = TextEntry(char=remote.char, deleted=remote.deleted)
                added += 1
            else:
                local.deleted = local.deleted or remote.deleted

        self.order = sorted(set(self.order) | set(other.order) | set(self.entries))

        # Only guards against reusing our own ids seen from another branch
        self.local_counter = max(self.local_counter, other.local_counter)

        logger.debug(
            f"Text {self.local_node_id!r} merged {added} new entries from "
            f"{other.local_node_id!r} ({len(self.order)} total)"
        )
        return self

    def get_text(self) -> str:
        """Materialize the current visible text."""
        return "".join(self.entries[entry_id].char for entry_id in self.visible_ids())

    def value(self) -> str:
        """Get the current visible text."""
        return self.get_text()

    def to_json(self) -> dict[str, Any]:
        """Get the full state for transmission. Callbacks are not included."""
        return {
            "localNodeId": self.local_node_id,
            "localCounter": self.local_counter,
            "entries": {
                entry_id: {"char": entry.char, "deleted": entry.deleted}
                for entry_id, entry in self.entries.items()
            },
            "order": list(self.order),
        }

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> "TextRGA":
        """
        Reconstruct text from transmitted state.

        Callbacks must be re-attached by the caller.
        """
        snapshot = TextSnapshot.model_validate(data)
        return cls(
            snapshot.local_node_id,
            local_counter=snapshot.local_counter,
            entries={
                entry_id: TextEntry(char=entry.char, deleted=entry.deleted)
                for entry_id, entry in snapshot.entries.items()
            },
            order=snapshot.order,
        )

    def __len__(self) -> int:
        return len(self.visible_ids())

    def __str__(self) -> str:
        return self.get_text()

    def __repr__(self) -> str:
        return f"TextRGA(local_node_id={self.local_node_id!r}, text={self.get_text()!r})"
