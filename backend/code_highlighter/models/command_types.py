"""
Command Result Type Models

Pydantic models returned by the highlight commands to the editor
collaborator: the outcome message plus whatever the command produced
(quick-pick entries, a reveal target, tree nodes, decorations).
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from .highlight_types import Highlight, Range


class CommandStatus(str, Enum):
    """
    Outcome of a command as the user should see it.

    - info: the command did what was asked
    - warning: a precondition was not met, nothing changed
    - cancelled: a prompt was dismissed, nothing changed, nothing to report
    """

    INFO = "info"
    WARNING = "warning"
    CANCELLED = "cancelled"


class QuickPickEntry(BaseModel):
    """One selectable line of the 'list all highlights' picker"""

    label: str
    description: str
    detail: str
    highlight: Highlight


class RevealTarget(BaseModel):
    """Where the editor should jump: open the file and select the range"""

    model_config = ConfigDict(populate_by_name=True)

    file_path: str = Field(alias="filePath")
    selection: Range


class Decoration(BaseModel):
    range: Range
    hover_message: str | None = Field(default=None, alias="hoverMessage")

    model_config = ConfigDict(populate_by_name=True)


class ColorDecorations(BaseModel):
    color: str
    decorations: list[Decoration]


class ColorChoice(BaseModel):
    label: str
    color: str


class FileNode(BaseModel):
    """Tree root item: one file that has highlights"""

    label: str
    file_path: str
    tooltip: str
    count: int
    icon: str = "file"


class HighlightNode(BaseModel):
    """Tree leaf item: one highlight inside a file"""

    label: str
    description: str
    tooltip: str
    icon: str
    icon_color: str
    context_value: str = "highlight"
    command: str = "codeHighlighter.jumpToHighlight"
    highlight: Highlight


class CommandResult(BaseModel):
    """Outcome of one command invocation"""

    status: CommandStatus
    message: str | None = None
    count: int | None = None
    highlight: Highlight | None = None
    entries: list[QuickPickEntry] | None = None
    target: RevealTarget | None = None
    document: dict[str, Any] | None = None

    @classmethod
    def info(cls, message: str | None = None, **data: Any) -> "CommandResult":
        return cls(status=CommandStatus.INFO, message=message, **data)

    @classmethod
    def warning(cls, message: str) -> "CommandResult":
        return cls(status=CommandStatus.WARNING, message=message)

    @classmethod
    def cancelled(cls) -> "CommandResult":
        return cls(status=CommandStatus.CANCELLED)
