"""
Highlight Presentation Module

Read-side derivations for the editor: text previews, color names, the
"list all highlights" picker entries, per-color decorations and the
files/highlights tree. Nothing here mutates highlight records.
"""

import logging
import ntpath
from collections import Counter
from typing import Iterable

from ..models.command_types import (
    ColorChoice,
    ColorDecorations,
    Decoration,
    FileNode,
    HighlightNode,
    QuickPickEntry,
)
from ..models.highlight_types import Highlight
from .highlight_store import HighlightChangeEvent, HighlightStore

# Configure logger for this module
logger = logging.getLogger(__name__)

PREVIEW_LENGTH = 50

# Named palette; keys are upper-case #RRGGBBAA
COLOR_NAMES = {
    "#FFFF0066": "Yellow",
    "#00FF0066": "Green",
    "#FF00FF66": "Pink",
    "#00FFFF66": "Cyan",
    "#FFA50066": "Orange",
}

COLORS_BY_NAME = {name.lower(): color for color, name in COLOR_NAMES.items()}


def color_name(color: str) -> str:
    """Label of a palette color; unknown colors are returned as given."""
    return COLOR_NAMES.get(color.upper(), color)


def color_choices(colors: Iterable[str]) -> list[ColorChoice]:
    """Picker entries for the configured ``colors``, named palette first."""
    choices = [ColorChoice(label=name, color=color) for color, name in COLOR_NAMES.items()]
    known = set(COLOR_NAMES)
    for color in colors:
        if color.upper() not in known:
            choices.append(ColorChoice(label=color, color=color))
            known.add(color.upper())
    return choices


def file_name(file_path: str) -> str:
    # Handles both "/" and "\" separators regardless of the host OS
    return ntpath.basename(file_path) or file_path


def text_preview(text: str, collapse_newlines: bool = True) -> str:
    preview = text[:PREVIEW_LENGTH]
    if collapse_newlines:
        # A CRLF cut in half by the truncation leaves a lone "\r"
        preview = preview.replace("\r\n", " ").replace("\n", " ").replace("\r", " ")
    return preview + ("..." if len(text) > PREVIEW_LENGTH else "")


def file_counts(highlights: Iterable[Highlight]) -> dict[str, int]:
    """Number of highlights per file path."""
    return dict(Counter(highlight.file_path for highlight in highlights))


def quick_pick_entries(highlights: Iterable[Highlight]) -> list[QuickPickEntry]:
    return [
        QuickPickEntry(
            label=f"{file_name(h.file_path)}:{h.range.start.line + 1}",
            description=text_preview(h.text, collapse_newlines=False),
            detail=h.comment or "(no comment)",
            highlight=h,
        )
        for h in highlights
    ]


def decorations_for_file(highlights: Iterable[Highlight]) -> list[ColorDecorations]:
    """Group the ranges of one file's highlights by color."""
    grouped: dict[str, list[Decoration]] = {}
    for highlight in highlights:
        hover = f"**Comment:** {highlight.comment}" if highlight.comment else None
        grouped.setdefault(highlight.color, []).append(
            Decoration(range=highlight.range, hover_message=hover)
        )
    return [
        ColorDecorations(color=color, decorations=decorations)
        for color, decorations in grouped.items()
    ]


def highlight_node(highlight: Highlight) -> HighlightNode:
    line = highlight.range.start.line + 1
    if highlight.comment:
        tooltip = f"Line {line}\n\nComment: {highlight.comment}\n\nText: {highlight.text}"
    else:
        tooltip = f"Line {line}\n\nText: {highlight.text}"

    return HighlightNode(
        label=text_preview(highlight.text),
        description=color_name(highlight.color),
        tooltip=tooltip,
        icon="comment" if highlight.comment else "circle-filled",
        icon_color="charts.yellow" if highlight.comment else "charts.blue",
        highlight=highlight,
    )


class HighlightTreeModel:
    """
    Files/highlights tree for the side panel.

    Subscribes to the store on construction and bumps ``revision`` on every
    store change so that clients know when to re-fetch.
    """

    def __init__(self, store: HighlightStore):
        self._store = store
        self.revision = 0
        self._store.subscribe(self._on_highlights_changed)

    def _on_highlights_changed(self, event: HighlightChangeEvent) -> None:
        self.refresh()

    def refresh(self) -> None:
        self.revision += 1

    def file_nodes(self) -> list[FileNode]:
        nodes = []
        for file_path, count in file_counts(self._store.all()).items():
            nodes.append(
                FileNode(
                    label=f"{file_name(file_path)} ({count})",
                    file_path=file_path,
                    tooltip=file_path,
                    count=count,
                )
            )
        return sorted(nodes, key=lambda node: node.label.casefold())

    def highlight_nodes(self, file_path: str) -> list[HighlightNode]:
        return [highlight_node(h) for h in self._store.highlights_for(file_path)]

    def dispose(self) -> None:
        self._store.unsubscribe(self._on_highlights_changed)
