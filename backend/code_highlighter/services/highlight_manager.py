"""
Highlight Manager Module

This module provides the commands the editor invokes: toggle/add/remove/clear
highlights, list them, edit comments, export/import and jump to a highlight,
plus the document-change hook that keeps ranges in sync.

Prompts happen on the editor's side before a command is sent. A prompt the
user dismissed arrives as ``None`` and the command returns ``cancelled``
without touching the store. Every command that mutates the store saves it
right after the mutation.
"""

import logging
from pathlib import Path
from typing import Any, Iterable

from ..config import Settings
from ..models.command_types import (
    ColorChoice,
    ColorDecorations,
    CommandResult,
    FileNode,
    HighlightNode,
    RevealTarget,
)
from ..models.export_types import ImportMode
from ..models.highlight_types import Highlight, Position, Range, TextChange
from .change_reconciler import ChangeReconciler, TextDocument
from .highlight_persistence import HighlightPersistence
from .highlight_presentation import (
    COLORS_BY_NAME,
    HighlightTreeModel,
    color_choices,
    decorations_for_file,
    quick_pick_entries,
)
from .highlight_store import HighlightStore
from .workspace_state_service import WorkspaceStateService

# Configure logger for this module
logger = logging.getLogger(__name__)


class HighlightManager:
    """
    Owns the highlight store for the lifetime of the service.

    Constructed once at startup (loading saved highlights) and disposed at
    shutdown.
    """

    def __init__(
        self,
        settings: Settings,
        store: HighlightStore | None = None,
        persistence: HighlightPersistence | None = None,
    ):
        """
        Initialize the manager and load saved highlights.

        Args:
            settings: Colors and storage configuration
            store: Store to manage, a new one by default
            persistence: Storage adapter, SQLite at ``settings.db_path`` by default
        """
        logger.info("HighlightManager constructor called")
        self.settings = settings
        self.store = store or HighlightStore()
        self.persistence = persistence or HighlightPersistence(
            WorkspaceStateService(settings.db_path), key=settings.state_key
        )
        self.reconciler = ChangeReconciler(self.store)
        self.tree = HighlightTreeModel(self.store)

        saved = self.persistence.load()
        if saved:
            self.store.replace(saved)
        logger.info("HighlightManager initialized successfully")

    def _save(self) -> None:
        self.persistence.save(self.store)

    def _resolve_color(self, color: str | None) -> str:
        return color or self.settings.default_color

    # ------------------------------------------------------------------
    # Highlight commands
    # ------------------------------------------------------------------

    def add_highlight(
        self,
        file_path: str,
        selection: Range,
        text: str,
        comment: str | None = None,
        color: str | None = None,
    ) -> CommandResult:
        """
        Highlight ``selection`` of ``file_path``.

        Args:
            file_path: Identity of the file
            selection: Selected range, must not be empty
            text: The selected text
            comment: Optional comment, an empty string means no comment
            color: Highlight color, the configured default when omitted
        """
        logger.info(
            f"addHighlight called: file={file_path}, selection={selection.describe()}, "
            f"hasComment={bool(comment)}, color={color}"
        )
        if selection.is_empty:
            logger.info("Empty selection, skipping highlight")
            return CommandResult.warning("Please select some text to highlight")

        highlight = self.store.add(
            file_path,
            selection,
            text,
            comment=comment or None,
            color=self._resolve_color(color),
        )
        self._save()
        return CommandResult.info("Highlight added!", highlight=highlight)

    def add_highlight_with_color(
        self, color_label: str, file_path: str, selection: Range, text: str
    ) -> CommandResult:
        """Shortcut commands: add a highlight in a named palette color."""
        color = COLORS_BY_NAME.get(color_label.lower())
        if color is None:
            return CommandResult.warning(f"Unknown highlight color: {color_label}")
        return self.add_highlight(file_path, selection, text, color=color)

    def toggle_highlight(
        self, file_path: str, selection: Range, text: str, color: str | None = None
    ) -> CommandResult:
        """
        Remove every highlight overlapping ``selection``, or add one if none does.
        """
        logger.info(f"toggleHighlight called: file={file_path}")
        if selection.is_empty:
            logger.info("Empty selection, skipping toggle")
            return CommandResult.warning("Please select some text to highlight")

        overlapping = self.store.find_intersecting(file_path, selection)
        if overlapping:
            logger.info(
                f"Found {len(overlapping)} overlapping highlights, removing them"
            )
            removed = self.store.remove_in_range(file_path, selection)
            self._save()
            return CommandResult.info(f"Removed {removed} highlight(s)", count=removed)

        logger.info("No overlapping highlights, adding new highlight")
        return self.add_highlight(file_path, selection, text, color=color)

    def remove_highlight(self, file_path: str, position: Position) -> CommandResult:
        logger.info(
            f"removeHighlight called: file={file_path}, "
            f"position={position.line}:{position.character}"
        )
        if not self.store.remove(file_path, position):
            return CommandResult.warning("No highlight at cursor position")

        self._save()
        return CommandResult.info("Highlight removed")

    def delete_highlight_from_tree(
        self, file_path: str, highlight_id: str
    ) -> CommandResult:
        """Delete from the tree view: removes at the highlight's start position."""
        highlight = self.store.find_by_id(file_path, highlight_id)
        if highlight is None:
            return CommandResult.warning("Highlight not found")
        return self.remove_highlight(file_path, highlight.range.start)

    def clear_highlights(self, file_path: str | None = None) -> CommandResult:
        """Clear one file's highlights, or all of them when no file is given."""
        self.store.clear(file_path)
        self._save()
        return CommandResult.info("All highlights cleared")

    def edit_comment(
        self, file_path: str, position: Position, comment: str | None
    ) -> CommandResult:
        """
        Set the comment of the highlight under the cursor.

        Args:
            comment: New comment; ``None`` means the prompt was cancelled and an
                     empty string removes the comment
        """
        highlight = self.store.find_at_position(file_path, position)
        if highlight is None:
            return CommandResult.warning("No highlight at cursor position")

        if comment is None:
            logger.info("Comment edit cancelled")
            return CommandResult.cancelled()

        updated = self.store.set_comment(highlight.id, file_path, comment)
        self._save()
        return CommandResult.info("Comment updated", highlight=updated)

    # ------------------------------------------------------------------
    # Listing and navigation
    # ------------------------------------------------------------------

    def list_highlights(self) -> CommandResult:
        highlights = self.store.all()
        if not highlights:
            return CommandResult.info("No highlights found", entries=[])
        return CommandResult.info(
            entries=quick_pick_entries(highlights), count=len(highlights)
        )

    def highlights_for_file(self, file_path: str) -> list[Highlight]:
        return self.store.highlights_for(file_path)

    def jump_to(self, file_path: str, highlight_id: str) -> CommandResult:
        highlight = self.store.find_by_id(file_path, highlight_id)
        if highlight is None:
            return CommandResult.warning("Highlight not found")
        return CommandResult.info(
            target=RevealTarget(file_path=highlight.file_path, selection=highlight.range),
            highlight=highlight,
        )

    def decorations(self, file_path: str) -> list[ColorDecorations]:
        return decorations_for_file(self.store.highlights_for(file_path))

    def color_choices(self) -> list[ColorChoice]:
        return color_choices(self.settings.colors)

    def tree_files(self) -> list[FileNode]:
        return self.tree.file_nodes()

    def tree_highlights(self, file_path: str) -> list[HighlightNode]:
        return self.tree.highlight_nodes(file_path)

    # ------------------------------------------------------------------
    # Export / import
    # ------------------------------------------------------------------

    def export_highlights(self, destination: str | Path | None = None) -> CommandResult:
        """
        Build the export document, and write it when ``destination`` is given.
        """
        highlights = self.store.all()
        if not highlights:
            return CommandResult.warning("No highlights to export")

        document = self.persistence.build_export(highlights)
        if destination is not None:
            self.persistence.write_export(destination, document)
        return CommandResult.info(
            f"Exported {len(highlights)} highlights",
            count=len(highlights),
            document=document.to_document(),
        )

    def import_highlights(
        self, payload: Any, mode: ImportMode | None
    ) -> CommandResult:
        """
        Merge or replace the store with the highlights of an export document.

        The document is validated completely before the store is touched.

        Args:
            payload: Decoded export document or its JSON text
            mode: merge/replace; ``None`` means the choice was cancelled

        Raises:
            HighlightImportError: If the document is malformed
        """
        highlights = self.persistence.parse_import(payload)
        if mode is None:
            logger.info("Import cancelled")
            return CommandResult.cancelled()
        return self._apply_import(highlights, mode)

    def import_highlights_from_file(
        self, source: str | Path, mode: ImportMode | None
    ) -> CommandResult:
        highlights = self.persistence.read_import(source)
        if mode is None:
            return CommandResult.cancelled()
        return self._apply_import(highlights, mode)

    def _apply_import(
        self, highlights: Iterable[Highlight], mode: ImportMode
    ) -> CommandResult:
        highlights = list(highlights)
        if mode == ImportMode.REPLACE:
            grouped: dict[str, list[Highlight]] = {}
            for highlight in highlights:
                grouped.setdefault(highlight.file_path, []).append(highlight)
            self.store.replace(grouped)
        else:
            self.store.extend(highlights)
        self._save()
        logger.info(f"Imported {len(highlights)} highlights ({mode.value})")
        return CommandResult.info(
            f"Imported {len(highlights)} highlights", count=len(highlights)
        )

    # ------------------------------------------------------------------
    # Document events
    # ------------------------------------------------------------------

    def handle_document_change(
        self, file_path: str, changes: Iterable[TextChange], document_text: str
    ) -> bool:
        """
        Reconcile ``file_path`` after an edit and save if anything moved.

        Returns:
            bool: True if highlights of the file changed
        """
        changed = self.reconciler.reconcile(
            file_path, changes, TextDocument(document_text)
        )
        if changed:
            self._save()
        return changed

    def dispose(self) -> None:
        self.tree.dispose()
        self.store.dispose()
        logger.info("HighlightManager disposed")
