"""Core line editing modules."""

from .document import (
    LINE_SEPARATOR,
    AppendLines,
    CreateFile,
    DeleteLine,
    Document,
    EditOperation,
    InsertAfter,
    InsertBefore,
    ReplaceLine,
    ReplaceSubstring,
    normalize_content,
    parse_operation,
)
from .batch_editor import BatchEditor, apply_batch
from .window_reader import WindowReader, read_window, tag_line
from .safety import (
    SafeFileOperation,
    safe_edit_context,
    PerformanceMonitor,
    performance_monitor,
)

__all__ = [
    # Document buffer
    'LINE_SEPARATOR',
    'Document',
    'EditOperation',
    'ReplaceLine',
    'InsertBefore',
    'InsertAfter',
    'DeleteLine',
    'ReplaceSubstring',
    'AppendLines',
    'CreateFile',
    'normalize_content',
    'parse_operation',

    # Batch editing
    'BatchEditor',
    'apply_batch',

    # Windowed reading
    'WindowReader',
    'read_window',
    'tag_line',

    # Safety mechanisms
    'SafeFileOperation',
    'safe_edit_context',
    'PerformanceMonitor',
    'performance_monitor',
]
