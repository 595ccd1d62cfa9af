import logging
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from ..models.command_types import (
    ColorChoice,
    CommandResult,
    FileNode,
    HighlightNode,
)
from ..models.export_types import ImportMode
from ..models.highlight_types import Highlight, Position, Range
from ..services.highlight_manager import HighlightManager
from ..services.highlight_persistence import HighlightImportError
from .dependencies import (
    command_failed,
    get_highlight_manager,
    require_trusted_origin,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/highlights",
    tags=["highlights"],
    dependencies=[Depends(require_trusted_origin)],
)


class SelectionRequest(BaseModel):
    file_path: str
    selection: Range
    text: str


class ToggleRequest(SelectionRequest):
    color: Optional[str] = None


class AddHighlightRequest(SelectionRequest):
    comment: Optional[str] = None
    color: Optional[str] = None


class PositionRequest(BaseModel):
    file_path: str
    position: Position


class ClearRequest(BaseModel):
    file_path: Optional[str] = None  # None clears every file


class CommentRequest(PositionRequest):
    comment: Optional[str] = None  # None: the prompt was cancelled


class ExportRequest(BaseModel):
    destination: str


class ImportRequest(BaseModel):
    document: Optional[Any] = None
    source: Optional[str] = None  # Path of a UTF-8 export file
    mode: Optional[ImportMode] = None  # None: the choice was cancelled


class TreeSnapshot(BaseModel):
    revision: int
    files: List[FileNode]


@router.post("/toggle", response_model=CommandResult)
async def toggle_highlight(
    payload: ToggleRequest, manager: HighlightManager = Depends(get_highlight_manager)
):
    """
    Toggle a highlight on the selection using the given or default color.

    Overlapping highlights are removed; otherwise a new highlight is added.
    """
    try:
        return manager.toggle_highlight(
            payload.file_path, payload.selection, payload.text, color=payload.color
        )
    except Exception as e:
        raise command_failed("toggle highlight", e)


@router.post("/", response_model=CommandResult)
async def add_highlight(
    payload: AddHighlightRequest,
    manager: HighlightManager = Depends(get_highlight_manager),
):
    """Add a highlight with an optional comment and color."""
    try:
        return manager.add_highlight(
            payload.file_path,
            payload.selection,
            payload.text,
            comment=payload.comment,
            color=payload.color,
        )
    except Exception as e:
        raise command_failed("add highlight", e)


@router.post("/color/{color_name}", response_model=CommandResult)
async def add_highlight_with_color(
    color_name: str,
    payload: SelectionRequest,
    manager: HighlightManager = Depends(get_highlight_manager),
):
    """Add a highlight in a named palette color (yellow, green, pink, cyan, orange)."""
    try:
        return manager.add_highlight_with_color(
            color_name, payload.file_path, payload.selection, payload.text
        )
    except Exception as e:
        raise command_failed("add highlight", e)


@router.post("/remove", response_model=CommandResult)
async def remove_highlight(
    payload: PositionRequest, manager: HighlightManager = Depends(get_highlight_manager)
):
    """Remove the first highlight containing the cursor position."""
    try:
        return manager.remove_highlight(payload.file_path, payload.position)
    except Exception as e:
        raise command_failed("remove highlight", e)


@router.delete("/id/{highlight_id}", response_model=CommandResult)
async def delete_highlight_from_tree(
    highlight_id: str,
    file_path: str,
    manager: HighlightManager = Depends(get_highlight_manager),
):
    """Delete a highlight picked in the tree view."""
    try:
        return manager.delete_highlight_from_tree(file_path, highlight_id)
    except Exception as e:
        raise command_failed("delete highlight", e)


@router.post("/clear", response_model=CommandResult)
async def clear_highlights(
    payload: ClearRequest, manager: HighlightManager = Depends(get_highlight_manager)
):
    """Clear the highlights of one file, or of all files."""
    try:
        return manager.clear_highlights(payload.file_path)
    except Exception as e:
        raise command_failed("clear highlights", e)


@router.get("/", response_model=CommandResult)
async def list_highlights(manager: HighlightManager = Depends(get_highlight_manager)):
    """List every highlight, most recent first, as picker entries."""
    try:
        return manager.list_highlights()
    except Exception as e:
        raise command_failed("list highlights", e)


@router.get("/file", response_model=List[Highlight])
async def get_highlights_for_file(
    file_path: str, manager: HighlightManager = Depends(get_highlight_manager)
):
    """Highlights of one file in creation order."""
    return manager.highlights_for_file(file_path)


@router.put("/comment", response_model=CommandResult)
async def edit_comment(
    payload: CommentRequest, manager: HighlightManager = Depends(get_highlight_manager)
):
    """Add, change or remove the comment of the highlight under the cursor."""
    try:
        return manager.edit_comment(payload.file_path, payload.position, payload.comment)
    except Exception as e:
        raise command_failed("update comment", e)


@router.get("/export", response_model=CommandResult)
async def export_highlights(manager: HighlightManager = Depends(get_highlight_manager)):
    """Return the export document for all highlights."""
    try:
        return manager.export_highlights()
    except Exception as e:
        raise command_failed("export highlights", e)


@router.post("/export", response_model=CommandResult)
async def export_highlights_to_file(
    payload: ExportRequest, manager: HighlightManager = Depends(get_highlight_manager)
):
    """Write the export document to ``destination``."""
    try:
        return manager.export_highlights(payload.destination)
    except Exception as e:
        raise command_failed("export highlights", e)


@router.post("/import", response_model=CommandResult)
async def import_highlights(
    payload: ImportRequest, manager: HighlightManager = Depends(get_highlight_manager)
):
    """
    Import highlights from an inline document or an export file.

    Raises:
        HTTPException: 400 if the document is malformed (nothing is imported)
    """
    if payload.document is None and payload.source is None:
        raise HTTPException(
            status_code=400, detail="Either document or source must be provided"
        )

    try:
        if payload.source is not None:
            return manager.import_highlights_from_file(payload.source, payload.mode)
        return manager.import_highlights(payload.document, payload.mode)
    except HighlightImportError as e:
        logger.warning(f"Rejected highlights import: {e}")
        raise HTTPException(status_code=400, detail="Invalid highlights file format")
    except Exception as e:
        raise command_failed("import highlights", e)


@router.get("/jump/{highlight_id}", response_model=CommandResult)
async def jump_to_highlight(
    highlight_id: str,
    file_path: str,
    manager: HighlightManager = Depends(get_highlight_manager),
):
    """Return the file and range the editor should reveal."""
    return manager.jump_to(file_path, highlight_id)


@router.get("/tree", response_model=TreeSnapshot)
async def get_tree(manager: HighlightManager = Depends(get_highlight_manager)):
    """Root level of the highlights tree: files with their highlight counts."""
    return TreeSnapshot(revision=manager.tree.revision, files=manager.tree_files())


@router.get("/tree/file", response_model=List[HighlightNode])
async def get_tree_file(
    file_path: str, manager: HighlightManager = Depends(get_highlight_manager)
):
    """Highlights of one file as tree items."""
    return manager.tree_highlights(file_path)


@router.get("/colors", response_model=List[ColorChoice])
async def get_colors(manager: HighlightManager = Depends(get_highlight_manager)):
    """Colors offered by the color picker."""
    return manager.color_choices()
