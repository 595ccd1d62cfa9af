"""
Export/Import Type Models

Pydantic models for the highlight interchange document:
``{version, exportDate, highlights: [...]}``.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .highlight_types import Highlight

EXPORT_VERSION = "1.0.0"


class ImportMode(str, Enum):
    """How imported highlights are combined with the existing store"""

    MERGE = "merge"
    REPLACE = "replace"


class ExportDocument(BaseModel):
    """Versioned export document written as UTF-8 JSON"""

    model_config = ConfigDict(populate_by_name=True)

    version: str = EXPORT_VERSION
    export_date: str = Field(alias="exportDate")  # ISO 8601
    highlights: list[Highlight]

    def to_document(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
