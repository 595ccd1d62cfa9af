"""
Change Reconciler Module

Keeps stored highlights in line with edits made to their document. For every
highlight of the edited file an edit is classified as:

1. entirely before the highlight: the highlight moves by the edit's net line
   delta (columns are left alone)
2. at or after the highlight's end: nothing to do
3. overlapping the highlight: the cached text is re-read from the live
   document under the unchanged range

Overlapping edits never resize a highlight; only its text snapshot follows.
"""

import logging
import re
from typing import Iterable

from ..models.highlight_types import Position, Range, TextChange
from .highlight_store import HighlightStore

# Configure logger for this module
logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"\r\n|\n")


class TextDocument:
    """Read-only view of a document's current text addressed by (line, character)."""

    def __init__(self, text: str):
        self._lines = _LINE_BREAK.split(text)
        self._breaks = _LINE_BREAK.findall(text)

    def _clamp(self, position: Position) -> tuple[int, int]:
        if position.line >= len(self._lines):
            last = len(self._lines) - 1
            return last, len(self._lines[last])
        return position.line, min(position.character, len(self._lines[position.line]))

    def get_text(self, span: Range) -> str:
        """Text under ``span``; positions past the end are clamped."""
        start_line, start_char = self._clamp(span.start)
        end_line, end_char = self._clamp(span.end)

        if start_line == end_line:
            return self._lines[start_line][start_char:end_char]

        parts = [self._lines[start_line][start_char:], self._breaks[start_line]]
        for line in range(start_line + 1, end_line):
            parts.append(self._lines[line])
            parts.append(self._breaks[line])
        parts.append(self._lines[end_line][:end_char])
        return "".join(parts)


class ChangeReconciler:
    """Applies document edits to the highlights of one file at a time."""

    def __init__(self, store: HighlightStore):
        self._store = store

    def reconcile(
        self, file_path: str, changes: Iterable[TextChange], document: TextDocument
    ) -> bool:
        """
        Update highlights of ``file_path`` for ``changes``, applied in order.

        Args:
            file_path: The edited file; other files are never touched
            changes: Content changes of one edit event
            document: The document text after the edit

        Returns:
            bool: True if at least one highlight changed
        """
        highlights = self._store.highlights_for(file_path)
        if not highlights:
            return False

        changed = False
        for change in changes:
            delta = change.line_delta
            for highlight in highlights:
                if change.range.end.is_before(highlight.range.start):
                    if delta != 0:
                        highlight.range = highlight.range.shift_lines(delta)
                        changed = True
                elif change.range.start.is_after_or_equal(highlight.range.end):
                    continue
                else:
                    new_text = document.get_text(highlight.range)
                    if new_text != highlight.text:
                        highlight.text = new_text
                        changed = True

        if changed:
            logger.info(f"Reconciled highlights of {file_path} after edit")
            self._store.notify_changed(file_path)
        return changed
