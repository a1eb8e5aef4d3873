"""Error types raised by line editing operations.

Each error also derives from the closest builtin exception so callers that
only know about ``ValueError`` or ``OSError`` still catch them.
"""


class LineEditorError(Exception):
    """Base class for all line editor errors."""


class InvalidArgumentError(LineEditorError, ValueError):
    """Bad or missing path, empty batch, zero count or malformed range."""


class NotFoundError(LineEditorError, FileNotFoundError):
    """A file that the operation requires does not exist."""


class OutOfRangeError(LineEditorError, IndexError):
    """Line number outside the current document or window past end of file."""


class InvalidOperationError(LineEditorError, ValueError):
    """Unknown operation tag or an operation used where it is not allowed."""


class IOFailureError(LineEditorError, OSError):
    """Underlying storage error on read, write or mkdir."""
