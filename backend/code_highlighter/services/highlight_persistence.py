"""
Highlight Persistence Module

This module saves the highlight store to the durable workspace state slot and
converts highlights to and from the export document
``{version, exportDate, highlights: [...]}``.

Persisted layout under the state key:
    { "<filePath>": [Highlight, ...], ... }
"""

import json
import logging
from pathlib import Path
from typing import Any, Iterable

from pydantic import ValidationError

from ..models.export_types import EXPORT_VERSION, ExportDocument
from ..models.highlight_types import Highlight
from .highlight_store import HighlightStore
from .workspace_state_service import WorkspaceStateService

# Configure logger for this module
logger = logging.getLogger(__name__)


class HighlightError(Exception):
    """Base class for highlight errors surfaced to the user"""


class HighlightImportError(HighlightError):
    """The import document does not match the export format"""


class HighlightPersistence:
    """
    Reads and writes the highlight store.

    ``save`` writes the complete mapping in one statement, so calling it again
    while nothing changed is harmless.
    """

    def __init__(self, state_service: WorkspaceStateService, key: str = "highlights"):
        """
        Args:
            state_service: Durable key/value storage
            key: Slot the mapping is stored under
        """
        self._state = state_service
        self.key = key

    def save(self, store: HighlightStore) -> None:
        data = {
            file_path: [highlight.to_record() for highlight in highlights]
            for file_path, highlights in store.to_mapping().items()
        }
        self._state.update(self.key, data)

    def load(self) -> dict[str, list[Highlight]]:
        """
        Read the saved mapping.

        Malformed records are skipped and logged; no saved data gives an
        empty mapping.
        """
        logger.info(f"Loading saved highlights from '{self.key}'")
        data = self._state.get(self.key)
        if data is None:
            logger.info("No saved highlights found")
            return {}
        if not isinstance(data, dict):
            logger.warning(
                f"Saved highlights under '{self.key}' are not a mapping, ignoring them"
            )
            return {}

        mapping: dict[str, list[Highlight]] = {}
        skipped = 0
        for file_path, records in data.items():
            if not isinstance(records, list):
                logger.warning(f"Skipping saved highlights for {file_path}: not a list")
                continue
            highlights = []
            for record in records:
                try:
                    highlights.append(Highlight.model_validate(record))
                except ValidationError as e:
                    skipped += 1
                    logger.warning(
                        f"Skipping malformed saved highlight in {file_path}: {e}"
                    )
            if highlights:
                mapping[file_path] = highlights

        total = sum(len(highlights) for highlights in mapping.values())
        logger.info(
            f"Loaded {total} highlights from {len(mapping)} files"
            + (f" ({skipped} skipped)" if skipped else "")
        )
        return mapping

    # ------------------------------------------------------------------
    # Export / import
    # ------------------------------------------------------------------

    def build_export(
        self, highlights: Iterable[Highlight], export_date: str | None = None
    ) -> ExportDocument:
        return ExportDocument(
            version=EXPORT_VERSION,
            export_date=export_date or self._state.get_current_timestamp_iso(),
            highlights=list(highlights),
        )

    def export_json(self, document: ExportDocument) -> str:
        return json.dumps(document.to_document(), indent=2, ensure_ascii=False)

    def write_export(self, destination: str | Path, document: ExportDocument) -> Path:
        """Write ``document`` as UTF-8 JSON to ``destination``."""
        path = Path(destination)
        path.write_text(self.export_json(document), encoding="utf-8")
        logger.info(f"Exported {len(document.highlights)} highlights to {path}")
        return path

    def parse_import(self, payload: Any) -> list[Highlight]:
        """
        Validate an import document and return its highlights.

        Ids are kept exactly as they appear in the document.

        Args:
            payload: The decoded document, or its JSON text

        Raises:
            HighlightImportError: If the document or any of its records is malformed
        """
        if isinstance(payload, (str, bytes)):
            try:
                payload = json.loads(payload)
            except json.JSONDecodeError as e:
                raise HighlightImportError(f"Invalid JSON: {e}") from e

        if not isinstance(payload, dict) or not isinstance(
            payload.get("highlights"), list
        ):
            raise HighlightImportError("Invalid highlights file format")

        highlights = []
        for index, record in enumerate(payload["highlights"]):
            try:
                highlights.append(Highlight.model_validate(record))
            except ValidationError as e:
                raise HighlightImportError(
                    f"Invalid highlight at position {index}: {e}"
                ) from e
        return highlights

    def read_import(self, source: str | Path) -> list[Highlight]:
        """Read and validate a UTF-8 export document from ``source``."""
        try:
            text = Path(source).read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            raise HighlightImportError(f"Import file is not UTF-8: {e}") from e
        return self.parse_import(text)
