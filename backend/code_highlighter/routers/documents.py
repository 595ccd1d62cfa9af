import logging
from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..models.command_types import ColorDecorations
from ..models.highlight_types import TextChange
from ..services.highlight_manager import HighlightManager
from .dependencies import (
    command_failed,
    get_highlight_manager,
    require_trusted_origin,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/documents",
    tags=["documents"],
    dependencies=[Depends(require_trusted_origin)],
)


class DocumentChangeRequest(BaseModel):
    file_path: str
    changes: List[TextChange]
    document_text: str  # Full text after the edit


class DocumentChangeResponse(BaseModel):
    changed: bool
    decorations: List[ColorDecorations] | None = None  # Only sent when changed


@router.post("/changes", response_model=DocumentChangeResponse)
async def document_changed(
    payload: DocumentChangeRequest,
    manager: HighlightManager = Depends(get_highlight_manager),
):
    """
    Keep highlights of an edited document in place.

    When any highlight moved or its text changed, the new decorations for that
    file are returned so the editor can repaint it.
    """
    try:
        changed = manager.handle_document_change(
            payload.file_path, payload.changes, payload.document_text
        )
    except Exception as e:
        raise command_failed("update highlights after edit", e)

    if not changed:
        return DocumentChangeResponse(changed=False)
    return DocumentChangeResponse(
        changed=True, decorations=manager.decorations(payload.file_path)
    )


@router.get("/decorations", response_model=List[ColorDecorations])
async def document_opened(
    file_path: str, manager: HighlightManager = Depends(get_highlight_manager)
):
    """Decorations for a document that was opened or became active."""
    logger.info(f"Editor changed to: {file_path}")
    return manager.decorations(file_path)
