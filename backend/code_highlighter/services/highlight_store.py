"""
Highlight Store Module

This module owns every highlight record. Highlights are kept per file path in
insertion (creation) order; a file whose last highlight goes away is dropped
from the mapping entirely.

The store only works in memory and never fails: operations on unknown files
return empty results. Saving is the job of HighlightPersistence, and callers
learn about mutations through subscribe()/unsubscribe().
"""

import logging
import random
import string
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable

from ..config import DEFAULT_COLOR
from ..models.highlight_types import Highlight, Position, Range

# Configure logger for this module
logger = logging.getLogger(__name__)

_ID_ALPHABET = string.digits + string.ascii_lowercase


class ChangeKind(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    CLEARED = "cleared"
    COMMENT = "comment"
    RECONCILED = "reconciled"
    IMPORTED = "imported"


@dataclass(frozen=True)
class HighlightChangeEvent:
    """Fired after each successful mutation; file_path is None for store-wide changes"""

    kind: ChangeKind
    file_path: str | None = None


HighlightListener = Callable[[HighlightChangeEvent], None]


def _epoch_millis() -> int:
    return int(time.time() * 1000)


def generate_highlight_id(timestamp: int) -> str:
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"{timestamp}-{suffix}"


class HighlightStore:
    """
    In-memory mapping from file path to an ordered list of highlights.

    Lookups that can match several overlapping highlights resolve to the
    first one in insertion order.
    """

    def __init__(
        self,
        clock: Callable[[], int] | None = None,
        id_factory: Callable[[int], str] | None = None,
    ):
        """
        Args:
            clock: Returns the current time in epoch milliseconds
            id_factory: Builds a unique id from the creation timestamp
        """
        self._highlights: dict[str, list[Highlight]] = {}
        self._listeners: list[HighlightListener] = []
        self._clock = clock or _epoch_millis
        self._id_factory = id_factory or generate_highlight_id
        self._last_timestamp = 0

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, listener: HighlightListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: HighlightListener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def _fire(self, kind: ChangeKind, file_path: str | None = None) -> None:
        event = HighlightChangeEvent(kind=kind, file_path=file_path)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.error(
                    f"Highlight listener {listener!r} failed for {event}",
                    exc_info=True,
                )

    def notify_changed(self, file_path: str) -> None:
        """Signal that highlights of ``file_path`` were updated in place."""
        self._fire(ChangeKind.RECONCILED, file_path)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _next_timestamp(self) -> int:
        # Strictly increasing, so newest-first ordering never ties within a process
        timestamp = max(self._clock(), self._last_timestamp + 1)
        self._last_timestamp = timestamp
        return timestamp

    def add(
        self,
        file_path: str,
        range: Range,
        text: str,
        comment: str | None = None,
        color: str = DEFAULT_COLOR,
    ) -> Highlight:
        """
        Create a highlight and append it to the file's list.

        The range is not checked against the document; the caller guarantees it.
        """
        timestamp = self._next_timestamp()
        highlight = Highlight(
            id=self._id_factory(timestamp),
            file_path=file_path,
            range=range,
            text=text,
            comment=comment,
            color=color,
            timestamp=timestamp,
        )
        self._highlights.setdefault(file_path, []).append(highlight)
        logger.info(
            f"Highlight added: ID={highlight.id}, "
            f"Total highlights for file: {len(self._highlights[file_path])}"
        )
        self._fire(ChangeKind.ADDED, file_path)
        return highlight

    def extend(self, highlights: Iterable[Highlight]) -> int:
        """
        Append ready-made highlights (e.g. imported ones) keeping their ids.

        Duplicated ids are kept as separate entries.

        Returns:
            int: Number of highlights appended
        """
        added = 0
        for highlight in highlights:
            self._highlights.setdefault(highlight.file_path, []).append(highlight)
            self._last_timestamp = max(self._last_timestamp, highlight.timestamp)
            added += 1
        if added:
            self._fire(ChangeKind.IMPORTED)
        return added

    def replace(self, mapping: dict[str, list[Highlight]]) -> None:
        """Swap the whole content for ``mapping`` (empty lists are dropped)."""
        self._highlights = {
            file_path: list(highlights)
            for file_path, highlights in mapping.items()
            if highlights
        }
        for highlights in self._highlights.values():
            for highlight in highlights:
                self._last_timestamp = max(self._last_timestamp, highlight.timestamp)
        self._fire(ChangeKind.IMPORTED)

    def _drop_if_empty(self, file_path: str) -> None:
        if not self._highlights.get(file_path):
            self._highlights.pop(file_path, None)

    def remove(self, file_path: str, position: Position) -> bool:
        """
        Remove the first highlight of ``file_path`` that contains ``position``.

        Returns:
            bool: True if a highlight was removed
        """
        highlight = self.find_at_position(file_path, position)
        if highlight is None:
            return False

        highlights = self._highlights[file_path]
        index = next(i for i, h in enumerate(highlights) if h is highlight)
        del highlights[index]
        self._drop_if_empty(file_path)
        logger.info(f"Highlight removed: ID={highlight.id}")
        self._fire(ChangeKind.REMOVED, file_path)
        return True

    def remove_in_range(self, file_path: str, range: Range) -> int:
        """
        Remove every highlight of ``file_path`` intersecting ``range``.

        Returns:
            int: Number of highlights removed
        """
        highlights = self._highlights.get(file_path)
        if not highlights:
            return 0

        kept = [h for h in highlights if not h.range.intersects(range)]
        removed = len(highlights) - len(kept)
        if removed == 0:
            return 0

        self._highlights[file_path] = kept
        self._drop_if_empty(file_path)
        logger.info(f"Removed {removed} highlights in range {range.describe()}")
        self._fire(ChangeKind.REMOVED, file_path)
        return removed

    def clear(self, file_path: str | None = None) -> None:
        """Clear one file's highlights, or the whole store when no file is given."""
        if file_path is None:
            self._highlights.clear()
            logger.info("All highlights cleared")
        else:
            self._highlights.pop(file_path, None)
            logger.info(f"Highlights cleared for {file_path}")
        self._fire(ChangeKind.CLEARED, file_path)

    def set_comment(
        self, highlight_id: str, file_path: str, comment: str | None
    ) -> Highlight | None:
        """
        Set the comment of the highlight ``highlight_id`` in place.

        Returns:
            Highlight | None: The updated highlight, or None if not found
        """
        highlight = self.find_by_id(file_path, highlight_id)
        if highlight is None:
            return None

        highlight.comment = comment or None
        self._fire(ChangeKind.COMMENT, file_path)
        return highlight

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_at_position(self, file_path: str, position: Position) -> Highlight | None:
        for highlight in self._highlights.get(file_path, []):
            if highlight.range.contains(position):
                return highlight
        return None

    def find_intersecting(self, file_path: str, range: Range) -> list[Highlight]:
        return [
            highlight
            for highlight in self._highlights.get(file_path, [])
            if highlight.range.intersects(range)
        ]

    def find_by_id(self, file_path: str, highlight_id: str) -> Highlight | None:
        for highlight in self._highlights.get(file_path, []):
            if highlight.id == highlight_id:
                return highlight
        return None

    def highlights_for(self, file_path: str) -> list[Highlight]:
        """Highlights of one file in insertion order (a new list each call)."""
        return list(self._highlights.get(file_path, []))

    def files(self) -> list[str]:
        return list(self._highlights)

    def all(self) -> list[Highlight]:
        """Every highlight, most recent first."""
        flattened = [h for highlights in self._highlights.values() for h in highlights]
        return sorted(flattened, key=lambda h: h.timestamp, reverse=True)

    def to_mapping(self) -> dict[str, list[Highlight]]:
        return {
            file_path: list(highlights)
            for file_path, highlights in self._highlights.items()
        }

    def __contains__(self, file_path: object) -> bool:
        return file_path in self._highlights

    def __len__(self) -> int:
        return sum(len(highlights) for highlights in self._highlights.values())

    def dispose(self) -> None:
        self._listeners.clear()
