"""In-memory line document and the edit operations applied to it."""
import logging
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Union

from ..errors import InvalidArgumentError, InvalidOperationError, OutOfRangeError

logger = logging.getLogger(__name__)

LINE_SEPARATOR = "\n"

ContentInput = Union[str, Sequence[str]]


def normalize_content(content: ContentInput) -> tuple[str, ...]:
    """Normalize a string-or-list content field into a tuple of lines.

    A single string becomes one line. A sequence contributes one line per
    element. Empty sequences are rejected instead of being a silent no-op.
    """
    if content is None:
        raise InvalidArgumentError("no new content provided")

    if isinstance(content, str):
        return (content,)

    if isinstance(content, (bytes, bytearray)) or not isinstance(content, Sequence):
        raise InvalidArgumentError(
            f"content must be a string or a list of strings, got {type(content).__name__}"
        )

    lines = tuple(content)
    if not lines:
        raise InvalidArgumentError("content must contain at least one line")

    for line in lines:
        if not isinstance(line, str):
            raise InvalidArgumentError(
                f"content lines must be strings, got {type(line).__name__}"
            )

    return lines


@dataclass(frozen=True)
class EditOperation:
    """Base class for a single edit applied to a document."""

    op_type = ""


@dataclass(frozen=True)
class ReplaceLine(EditOperation):
    line_number: int
    content: tuple[str, ...]

    op_type = "replace_line"


@dataclass(frozen=True)
class InsertBefore(EditOperation):
    line_number: int
    content: tuple[str, ...]

    op_type = "insert_line_before"


@dataclass(frozen=True)
class InsertAfter(EditOperation):
    line_number: int
    content: tuple[str, ...]

    op_type = "insert_line_after"


@dataclass(frozen=True)
class DeleteLine(EditOperation):
    line_number: int

    op_type = "delete_line"


@dataclass(frozen=True)
class ReplaceSubstring(EditOperation):
    """Replace up to ``count`` occurrences of ``old_string`` within one line.

    A negative count replaces every occurrence.
    """

    line_number: int
    old_string: str
    new_string: str
    count: int = 1

    op_type = "replace_string_in_line"


@dataclass(frozen=True)
class AppendLines(EditOperation):
    content: tuple[str, ...]

    op_type = "append_to_file"


@dataclass(frozen=True)
class CreateFile(EditOperation):
    """Bootstrap a missing file. Only valid as the first operation of a batch."""

    content: tuple[str, ...]

    op_type = "create_file"


OPERATION_TYPES: dict[str, type[EditOperation]] = {
    cls.op_type: cls
    for cls in (
        ReplaceLine,
        InsertBefore,
        InsertAfter,
        DeleteLine,
        ReplaceSubstring,
        AppendLines,
        CreateFile,
    )
}


def _require_line_number(payload: Mapping[str, Any], op_type: str) -> int:
    line_number = payload.get("line_number")
    # bool is an int subclass
    if isinstance(line_number, bool) or not isinstance(line_number, int):
        raise InvalidArgumentError(f"'{op_type}' requires an integer line_number")
    return line_number


def _require_string(payload: Mapping[str, Any], key: str, op_type: str) -> str:
    value = payload.get(key, "")
    if not isinstance(value, str):
        raise InvalidArgumentError(f"'{op_type}' requires '{key}' to be a string")
    return value


def parse_operation(payload: Union[EditOperation, Mapping[str, Any]]) -> EditOperation:
    """Build an edit operation from a structured payload.

    Args:
        payload: Mapping with an ``operation_type`` key and the fields that
            operation needs, or an already built operation

    Returns:
        The matching EditOperation instance

    Raises:
        InvalidOperationError: If the operation type is unknown
        InvalidArgumentError: If a required field is missing or malformed
    """
    if isinstance(payload, EditOperation):
        return payload

    if not isinstance(payload, Mapping):
        raise InvalidOperationError(
            f"invalid operation: expected a mapping, got {type(payload).__name__}"
        )

    op_type = payload.get("operation_type")
    if not isinstance(op_type, str) or op_type not in OPERATION_TYPES:
        raise InvalidOperationError(f"invalid operation type: {op_type}")

    if op_type in ("replace_line", "insert_line_before", "insert_line_after"):
        return OPERATION_TYPES[op_type](
            _require_line_number(payload, op_type),
            normalize_content(payload.get("new_content")),
        )

    if op_type == "delete_line":
        return DeleteLine(_require_line_number(payload, op_type))

    if op_type == "replace_string_in_line":
        count = payload.get("count", 1)
        if isinstance(count, bool) or not isinstance(count, int):
            raise InvalidArgumentError(f"'{op_type}' requires an integer count")
        return ReplaceSubstring(
            _require_line_number(payload, op_type),
            _require_string(payload, "old_string", op_type),
            _require_string(payload, "new_string", op_type),
            count,
        )

    if op_type == "append_to_file":
        return AppendLines(normalize_content(payload.get("new_content")))

    return CreateFile(normalize_content(payload.get("new_content")))


class Document:
    """Ordered lines of a text file, addressed 1-based from the outside.

    A document owns its list of lines and mutates it in place. Each operation
    is interpreted against the current state, so a batch applied in sequence
    sees the effect of every earlier operation.
    """

    def __init__(self, lines: Sequence[str] = ("",)):
        """Initialize document.

        Args:
            lines: Initial lines (default is the single empty line of an empty file)
        """
        self._lines: list[str] = list(lines)

    @classmethod
    def from_text(cls, text: str, separator: str = LINE_SEPARATOR) -> "Document":
        """Split text into a document. Empty text yields one empty line."""
        return cls(text.split(separator))

    def serialize(self, separator: str = LINE_SEPARATOR) -> str:
        """Join lines back into the exact text to persist."""
        return separator.join(self._lines)

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    def __iter__(self) -> Iterator[str]:
        return iter(self._lines)

    def __repr__(self) -> str:
        return f"Document(lines={len(self._lines)})"

    def _check_line_number(self, line_number: int):
        if line_number < 1 or line_number > len(self._lines):
            raise OutOfRangeError(
                f"line number {line_number} out of bounds (document has {len(self._lines)} lines)"
            )

    def apply(self, operation: EditOperation):
        """Apply a single edit operation.

        Args:
            operation: Operation to apply

        Raises:
            OutOfRangeError: If the line number is outside the document
            InvalidArgumentError: If the operation arguments are invalid
            InvalidOperationError: If the operation is unknown or not applicable
        """
        logger.debug(f"Applying {operation!r} to {self!r}")

        if isinstance(operation, ReplaceLine):
            self.replace_line(operation.line_number, operation.content)
        elif isinstance(operation, InsertBefore):
            self.insert_before(operation.line_number, operation.content)
        elif isinstance(operation, InsertAfter):
            self.insert_after(operation.line_number, operation.content)
        elif isinstance(operation, DeleteLine):
            self.delete_line(operation.line_number)
        elif isinstance(operation, ReplaceSubstring):
            self.replace_substring(
                operation.line_number,
                operation.old_string,
                operation.new_string,
                operation.count,
            )
        elif isinstance(operation, AppendLines):
            self.append_lines(operation.content)
        elif isinstance(operation, CreateFile):
            raise InvalidOperationError(
                "create_file is only allowed as the first operation on a missing file"
            )
        else:
            raise InvalidOperationError(f"invalid operation type: {operation!r}")

    def replace_line(self, line_number: int, content: ContentInput):
        """Replace one line with one or more new lines."""
        new_lines = normalize_content(content)
        self._check_line_number(line_number)
        index = line_number - 1
        self._lines[index : index + 1] = new_lines

    def insert_before(self, line_number: int, content: ContentInput):
        """Insert lines immediately before ``line_number``, keeping that line."""
        new_lines = normalize_content(content)
        self._check_line_number(line_number)
        index = line_number - 1
        self._lines[index:index] = new_lines

    def insert_after(self, line_number: int, content: ContentInput):
        """Insert lines immediately after ``line_number``."""
        new_lines = normalize_content(content)
        self._check_line_number(line_number)
        self._lines[line_number:line_number] = new_lines

    def delete_line(self, line_number: int):
        """Remove exactly one line."""
        self._check_line_number(line_number)
        del self._lines[line_number - 1]

    def replace_substring(
        self, line_number: int, old_string: str, new_string: str, count: int = 1
    ):
        """Replace occurrences of a substring within a single line.

        Args:
            line_number: 1-based line to edit
            old_string: Substring to find
            new_string: Replacement
            count: Maximum replacements, negative for all; zero is rejected
        """
        if count == 0:
            raise InvalidArgumentError("count must not be 0 (use -1 for all occurrences)")
        if not old_string:
            raise InvalidArgumentError("old_string must not be empty")
        self._check_line_number(line_number)

        index = line_number - 1
        self._lines[index] = self._lines[index].replace(
            old_string, new_string, count if count > 0 else -1
        )

    def append_lines(self, content: ContentInput):
        """Append lines at the end of the document."""
        self._lines.extend(normalize_content(content))
