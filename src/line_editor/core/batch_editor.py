"""Transactional batch editing of a text file."""
import logging
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any, Optional, Union

from ..errors import (
    InvalidArgumentError,
    InvalidOperationError,
    IOFailureError,
    LineEditorError,
    NotFoundError,
)
from .document import (
    LINE_SEPARATOR,
    CreateFile,
    Document,
    EditOperation,
    normalize_content,
    parse_operation,
)
from .safety import safe_edit_context

logger = logging.getLogger(__name__)

OperationInput = Union[EditOperation, Mapping[str, Any]]


class BatchEditor:
    """Apply an ordered list of edit operations to a file as one unit.

    The file is read once, every operation is applied to the in-memory
    document in list order, and the result is written back only when all of
    them succeed. A failure at any step leaves the file on disk untouched.
    """

    def __init__(
        self,
        separator: str = LINE_SEPARATOR,
        encoding: str = "utf-8",
        use_lock: bool = False,
        lock_timeout: float = 30,
    ):
        """Initialize batch editor.

        Args:
            separator: Line separator used to split and join the file
            encoding: Text encoding; undecodable bytes are preserved as-is
            use_lock: Hold an advisory lock file during read-modify-write
            lock_timeout: Lock timeout in seconds
        """
        if not separator:
            raise InvalidArgumentError("separator must not be empty")
        self.separator = separator
        self.encoding = encoding
        self.use_lock = use_lock
        self.lock_timeout = lock_timeout

    def _read_text(self, file_path: Path) -> Optional[str]:
        """Read the whole file, or None if it does not exist."""
        try:
            with open(
                file_path, encoding=self.encoding, errors="surrogateescape", newline=""
            ) as f:
                return f.read()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise IOFailureError(f"failed to read {file_path}: {e}") from e

    def _bootstrap(self, file_path: Path, first: EditOperation) -> Document:
        if not isinstance(first, CreateFile):
            raise NotFoundError(
                f"file {file_path} does not exist; the first operation must be create_file"
            )

        initial_text = (
            self.separator.join(normalize_content(first.content)) if first.content else ""
        )
        if not initial_text:
            raise InvalidArgumentError("no initial content provided for create_file")

        logger.info(f"Creating new file {file_path}")
        return Document.from_text(initial_text, self.separator)

    def load(self, file_path: Union[str, Path], operations: Sequence[EditOperation]):
        """Load the document for a batch and return the operations still to apply.

        Args:
            file_path: Target file
            operations: Parsed operations of the batch

        Returns:
            Tuple of (document, remaining operations, whether the file is new)
        """
        file_path = Path(file_path)
        text = self._read_text(file_path)

        if text is None:
            document = self._bootstrap(file_path, operations[0])
            return document, list(operations[1:]), True

        if isinstance(operations[0], CreateFile):
            raise InvalidOperationError(
                f"create_file is not allowed: {file_path} already exists"
            )

        return Document.from_text(text, self.separator), list(operations), False

    def apply_to_document(
        self, document: Document, operations: Sequence[EditOperation]
    ) -> Document:
        """Apply operations in order to an in-memory document.

        Each operation sees the document as left by the previous one.
        """
        for position, operation in enumerate(operations, 1):
            try:
                document.apply(operation)
            except LineEditorError as e:
                logger.warning(
                    f"Edit {position} ({operation.op_type or type(operation).__name__}) failed: {e}"
                )
                raise
        return document

    def apply_batch(
        self, file_path: Union[str, Path], operations: Sequence[OperationInput]
    ) -> str:
        """Apply a batch of edits to a file atomically.

        Args:
            file_path: File to edit (created when the first operation is create_file)
            operations: Ordered edit operations or their structured payloads

        Returns:
            "OK" when every operation succeeded and the file was written

        Raises:
            InvalidArgumentError: Empty path, empty batch or bad arguments
            NotFoundError: Missing file without a leading create_file
            OutOfRangeError: A line number outside the current document
            InvalidOperationError: Unknown or misplaced operation
            IOFailureError: Read, write or directory creation failed
        """
        if not file_path:
            raise InvalidArgumentError("invalid input parameters: path is required")
        if not operations:
            raise InvalidArgumentError("invalid input parameters: no edits provided")
        if "\0" in str(file_path):
            raise InvalidArgumentError("invalid input parameters: path contains a NUL byte")

        file_path = Path(file_path)
        if file_path.is_dir():
            raise IOFailureError(f"{file_path} is a directory")

        parsed = [parse_operation(op) for op in operations]

        with safe_edit_context(
            file_path,
            use_lock=self.use_lock,
            timeout=self.lock_timeout,
            encoding=self.encoding,
        ) as safe_op:
            document, remaining, created = self.load(file_path, parsed)
            self.apply_to_document(document, remaining)
            safe_op.commit_text(document.serialize(self.separator))

        logger.info(
            f"{'Created' if created else 'Edited'} {file_path}: "
            f"{len(parsed)} operations, {len(document)} lines"
        )
        return "OK"


def apply_batch(file_path: Union[str, Path], operations: Sequence[OperationInput]) -> str:
    """Apply a batch of edits with default settings."""
    return BatchEditor().apply_batch(file_path, operations)
