"""Transactional line-level file editing with an agent-friendly API."""

from .agent import AgentEditTools, ToolResult
from .core import (
    AppendLines,
    BatchEditor,
    CreateFile,
    DeleteLine,
    Document,
    EditOperation,
    InsertAfter,
    InsertBefore,
    ReplaceLine,
    ReplaceSubstring,
    WindowReader,
    apply_batch,
    parse_operation,
    performance_monitor,
    read_window,
)
from .errors import (
    InvalidArgumentError,
    InvalidOperationError,
    IOFailureError,
    LineEditorError,
    NotFoundError,
    OutOfRangeError,
)

__version__ = "0.1.0"

__all__ = [
    # Document model
    "Document",
    "EditOperation",
    "ReplaceLine",
    "InsertBefore",
    "InsertAfter",
    "DeleteLine",
    "ReplaceSubstring",
    "AppendLines",
    "CreateFile",
    "parse_operation",
    # Editing and reading
    "BatchEditor",
    "apply_batch",
    "WindowReader",
    "read_window",
    "performance_monitor",
    # Agent interface
    "AgentEditTools",
    "ToolResult",
    # Errors
    "LineEditorError",
    "InvalidArgumentError",
    "NotFoundError",
    "OutOfRangeError",
    "InvalidOperationError",
    "IOFailureError",
]
