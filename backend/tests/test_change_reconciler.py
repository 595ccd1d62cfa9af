"""
Unit tests for ChangeReconciler and TextDocument.

Tests cover:
- Edits before a highlight shift its lines only
- Edits after a highlight leave it alone
- Overlapping edits refresh the cached text without resizing
- Other files are never touched
- Change notifications
"""

import pytest

from code_highlighter.models.highlight_types import Range, TextChange
from code_highlighter.services.change_reconciler import ChangeReconciler, TextDocument
from code_highlighter.services.highlight_store import ChangeKind, HighlightStore

FILE = "/work/f.py"
OTHER = "/work/other.py"


@pytest.fixture
def store():
    return HighlightStore()


@pytest.fixture
def reconciler(store):
    return ChangeReconciler(store)


def change(start_line, start_char, end_line, end_char, text):
    return TextChange(
        range=Range.from_coordinates(start_line, start_char, end_line, end_char),
        text=text,
    )


class TestTextDocument:
    """Test reading text by range"""

    def test_single_line(self):
        doc = TextDocument("hello world\nsecond")
        assert doc.get_text(Range.from_coordinates(0, 6, 0, 11)) == "world"

    def test_multi_line_keeps_line_breaks(self):
        doc = TextDocument("one\r\ntwo\nthree")
        assert doc.get_text(Range.from_coordinates(0, 1, 2, 2)) == "ne\r\ntwo\nth"

    def test_out_of_bounds_is_clamped(self):
        doc = TextDocument("abc\ndef")
        assert doc.get_text(Range.from_coordinates(1, 1, 9, 0)) == "ef"
        assert doc.get_text(Range.from_coordinates(0, 2, 0, 99)) == "c"


class TestEditBeforeHighlight:
    """Edits that end before the highlight starts"""

    def test_two_inserted_lines_shift_by_two(self, store, reconciler):
        highlight = store.add(FILE, Range.from_coordinates(5, 3, 6, 7), "target")
        doc = TextDocument("\n" * 10)

        changed = reconciler.reconcile(FILE, [change(1, 0, 1, 0, "a\nb\n")], doc)

        assert changed is True
        assert highlight.range == Range.from_coordinates(7, 3, 8, 7)
        assert highlight.text == "target"

    def test_deleted_lines_shift_up(self, store, reconciler):
        highlight = store.add(FILE, Range.from_coordinates(10, 0, 10, 4), "text")

        reconciler.reconcile(FILE, [change(2, 0, 5, 0, "")], TextDocument(""))

        assert highlight.range == Range.from_coordinates(7, 0, 7, 4)

    def test_same_line_edit_before_does_not_move_columns(self, store, reconciler):
        highlight = store.add(FILE, Range.from_coordinates(3, 10, 3, 20), "text")

        changed = reconciler.reconcile(
            FILE, [change(3, 0, 3, 2, "longer text")], TextDocument("")
        )

        assert changed is False
        assert highlight.range == Range.from_coordinates(3, 10, 3, 20)


class TestEditAfterHighlight:
    """Edits starting at or after the highlight's end"""

    def test_no_change(self, store, reconciler):
        highlight = store.add(FILE, Range.from_coordinates(1, 0, 1, 5), "hello")

        changed = reconciler.reconcile(
            FILE, [change(1, 5, 1, 5, "\n\n\n")], TextDocument("hello\n\n\n")
        )

        assert changed is False
        assert highlight.range == Range.from_coordinates(1, 0, 1, 5)
        assert highlight.text == "hello"


class TestOverlappingEdit:
    """Edits inside or across the highlight"""

    def test_text_refreshed_range_unchanged(self, store, reconciler):
        highlight = store.add(FILE, Range.from_coordinates(0, 0, 0, 5), "hello")
        doc = TextDocument("HEllo world")

        changed = reconciler.reconcile(FILE, [change(0, 0, 0, 2, "HE")], doc)

        assert changed is True
        assert highlight.text == "HEllo"
        assert highlight.range == Range.from_coordinates(0, 0, 0, 5)

    def test_insert_at_highlight_start_counts_as_overlap(self, store, reconciler):
        highlight = store.add(FILE, Range.from_coordinates(2, 0, 2, 3), "abc")
        doc = TextDocument("\n\nXabc")

        reconciler.reconcile(FILE, [change(2, 0, 2, 0, "X")], doc)

        assert highlight.range == Range.from_coordinates(2, 0, 2, 3)
        assert highlight.text == "Xab"

    def test_identical_text_is_not_a_change(self, store, reconciler):
        store.add(FILE, Range.from_coordinates(0, 0, 0, 5), "hello")

        changed = reconciler.reconcile(
            FILE, [change(0, 1, 0, 2, "e")], TextDocument("hello")
        )

        assert changed is False


class TestScope:
    """Reconciliation only touches the edited file"""

    def test_other_files_untouched(self, store, reconciler):
        other = store.add(OTHER, Range.from_coordinates(5, 0, 5, 1), "x")
        store.add(FILE, Range.from_coordinates(5, 0, 5, 1), "x")

        reconciler.reconcile(FILE, [change(0, 0, 0, 0, "\n")], TextDocument("\n"))

        assert other.range == Range.from_coordinates(5, 0, 5, 1)

    def test_file_without_highlights(self, reconciler):
        assert reconciler.reconcile(FILE, [change(0, 0, 0, 0, "\n")], TextDocument("")) is False

    def test_notifies_once_when_changed(self, store, reconciler):
        store.add(FILE, Range.from_coordinates(5, 0, 5, 1), "a")
        store.add(FILE, Range.from_coordinates(8, 0, 8, 1), "b")
        events = []
        store.subscribe(events.append)

        reconciler.reconcile(FILE, [change(0, 0, 0, 0, "\n")], TextDocument("\n"))

        assert len(events) == 1
        assert events[0].kind == ChangeKind.RECONCILED
        assert events[0].file_path == FILE

    def test_no_notification_without_change(self, store, reconciler):
        store.add(FILE, Range.from_coordinates(0, 0, 0, 1), "a")
        events = []
        store.subscribe(events.append)

        reconciler.reconcile(FILE, [change(3, 0, 3, 0, "\n")], TextDocument(""))

        assert events == []

    def test_changes_applied_in_order(self, store, reconciler):
        highlight = store.add(FILE, Range.from_coordinates(4, 0, 4, 2), "ab")

        reconciler.reconcile(
            FILE,
            [change(0, 0, 0, 0, "\n\n"), change(1, 0, 2, 0, "")],
            TextDocument(""),
        )

        assert highlight.range == Range.from_coordinates(5, 0, 5, 2)
