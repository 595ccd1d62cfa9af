"""
Services Package

This package contains the highlight engine: the in-memory store, the change
reconciler, persistence to the workspace state database, read-side
presentation helpers and the manager that exposes the editor commands.
"""

from .base_database_service import BaseDatabaseService
from .change_reconciler import ChangeReconciler, TextDocument
from .highlight_manager import HighlightManager
from .highlight_persistence import (
    HighlightError,
    HighlightImportError,
    HighlightPersistence,
)
from .highlight_store import ChangeKind, HighlightChangeEvent, HighlightStore
from .workspace_state_service import WorkspaceStateService

__all__ = [
    "BaseDatabaseService",
    "ChangeKind",
    "ChangeReconciler",
    "HighlightChangeEvent",
    "HighlightError",
    "HighlightImportError",
    "HighlightManager",
    "HighlightPersistence",
    "HighlightStore",
    "TextDocument",
    "WorkspaceStateService",
]
