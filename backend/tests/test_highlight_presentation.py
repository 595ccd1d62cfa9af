"""
Unit tests for the read-side presentation helpers.
"""

import pytest

from code_highlighter.models.highlight_types import Range
from code_highlighter.services.highlight_presentation import (
    HighlightTreeModel,
    color_choices,
    color_name,
    decorations_for_file,
    file_counts,
    file_name,
    quick_pick_entries,
    text_preview,
)
from code_highlighter.services.highlight_store import HighlightStore


@pytest.fixture
def store():
    return HighlightStore()


class TestTextPreview:
    def test_short_text_unchanged(self):
        assert text_preview("short") == "short"

    def test_long_text_truncated_with_ellipsis(self):
        text = "x" * 60
        assert text_preview(text) == "x" * 50 + "..."

    def test_exactly_fifty_characters_has_no_ellipsis(self):
        assert text_preview("y" * 50) == "y" * 50

    def test_newlines_collapsed(self):
        assert text_preview("a\nb\nc") == "a b c"

    def test_crlf_collapsed_to_single_space(self):
        assert text_preview("a\r\nb\r\nc") == "a b c"

    def test_crlf_cut_by_truncation_leaves_no_carriage_return(self):
        text = "x" * 49 + "\r\n" + "y"
        assert text_preview(text) == "x" * 49 + " ..."

    def test_newlines_kept_when_asked(self):
        assert text_preview("a\nb", collapse_newlines=False) == "a\nb"


class TestColors:
    def test_known_color(self):
        assert color_name("#FFFF0066") == "Yellow"

    def test_lookup_is_case_insensitive(self):
        assert color_name("#ffa50066") == "Orange"

    def test_unknown_color_passes_through(self):
        assert color_name("#123456") == "#123456"

    def test_choices_append_custom_colors(self):
        choices = color_choices(["#FFFF0066", "#123456"])

        assert [c.label for c in choices] == [
            "Yellow",
            "Green",
            "Pink",
            "Cyan",
            "Orange",
            "#123456",
        ]


class TestListing:
    def test_file_name_handles_both_separators(self):
        assert file_name("/home/me/src/app.py") == "app.py"
        assert file_name("C:\\work\\main.ts") == "main.ts"

    def test_file_counts(self, store):
        store.add("/a.py", Range.from_coordinates(0, 0, 0, 1), "a")
        store.add("/a.py", Range.from_coordinates(1, 0, 1, 1), "b")
        store.add("/b.py", Range.from_coordinates(0, 0, 0, 1), "c")

        assert file_counts(store.all()) == {"/a.py": 2, "/b.py": 1}

    def test_quick_pick_entries(self, store):
        highlight = store.add(
            "/src/app.py", Range.from_coordinates(9, 0, 9, 5), "hello", comment="check"
        )
        plain = store.add("/src/app.py", Range.from_coordinates(0, 0, 0, 5), "world")

        entries = quick_pick_entries([highlight, plain])

        assert entries[0].label == "app.py:10"
        assert entries[0].description == "hello"
        assert entries[0].detail == "check"
        assert entries[0].highlight is highlight
        assert entries[1].detail == "(no comment)"

    def test_decorations_grouped_by_color(self, store):
        store.add("/a.py", Range.from_coordinates(0, 0, 0, 1), "a", color="#FFFF0066")
        store.add(
            "/a.py", Range.from_coordinates(1, 0, 1, 1), "b", comment="c", color="#00FF0066"
        )
        store.add("/a.py", Range.from_coordinates(2, 0, 2, 1), "c", color="#FFFF0066")

        groups = decorations_for_file(store.highlights_for("/a.py"))

        assert [g.color for g in groups] == ["#FFFF0066", "#00FF0066"]
        assert len(groups[0].decorations) == 2
        assert groups[1].decorations[0].hover_message == "**Comment:** c"
        assert groups[0].decorations[0].hover_message is None


class TestTreeModel:
    def test_revision_bumps_on_store_change(self, store):
        tree = HighlightTreeModel(store)

        store.add("/a.py", Range.from_coordinates(0, 0, 0, 1), "a")
        store.clear()

        assert tree.revision == 2

    def test_dispose_unsubscribes(self, store):
        tree = HighlightTreeModel(store)
        tree.dispose()

        store.add("/a.py", Range.from_coordinates(0, 0, 0, 1), "a")

        assert tree.revision == 0

    def test_file_nodes_sorted_by_label(self, store):
        tree = HighlightTreeModel(store)
        store.add("/z/zeta.py", Range.from_coordinates(0, 0, 0, 1), "a")
        store.add("/a/alpha.py", Range.from_coordinates(0, 0, 0, 1), "b")
        store.add("/a/alpha.py", Range.from_coordinates(1, 0, 1, 1), "c")

        nodes = tree.file_nodes()

        assert [n.label for n in nodes] == ["alpha.py (2)", "zeta.py (1)"]
        assert nodes[0].tooltip == "/a/alpha.py"

    def test_highlight_nodes(self, store):
        tree = HighlightTreeModel(store)
        store.add(
            "/a.py", Range.from_coordinates(4, 0, 5, 0), "line\nnext", color="#00FFFF66"
        )
        store.add("/a.py", Range.from_coordinates(7, 0, 7, 3), "abc", comment="why")

        plain, commented = tree.highlight_nodes("/a.py")

        assert plain.label == "line next"
        assert plain.description == "Cyan"
        assert plain.icon == "circle-filled"
        assert plain.tooltip == "Line 5\n\nText: line\nnext"
        assert commented.icon == "comment"
        assert commented.tooltip == "Line 8\n\nComment: why\n\nText: abc"

    def test_unknown_file_has_no_nodes(self, store):
        assert HighlightTreeModel(store).highlight_nodes("/nope.py") == []
