"""Streaming reader for bounded, line-numbered windows of a file."""
import logging
from collections.abc import Iterator
from pathlib import Path
from typing import Union

from ..errors import InvalidArgumentError, IOFailureError, NotFoundError, OutOfRangeError

logger = logging.getLogger(__name__)


def tag_line(line_number: int, text: str) -> str:
    """Wrap a line with its 1-based position."""
    return f"<line-{line_number}>{text}</line-{line_number}>"


class WindowReader:
    """Read a half-open range of lines without loading the whole file.

    Lines are split on ``"\\n"`` only and the terminator is stripped. A
    trailing newline ends the last line; it does not start a new one.
    """

    def __init__(self, file_path: Union[str, Path], encoding: str = "utf-8"):
        """Initialize window reader.

        Args:
            file_path: Path to the file to read
            encoding: Text encoding; undecodable bytes are preserved as-is
        """
        self.file_path = Path(file_path)
        self.encoding = encoding

    def read_lines(self) -> Iterator[str]:
        """Stream the file's lines with terminators removed."""
        if "\0" in str(self.file_path):
            raise InvalidArgumentError(
                f"invalid path {str(self.file_path)!r}: contains a NUL byte"
            )
        try:
            with open(
                self.file_path,
                encoding=self.encoding,
                errors="surrogateescape",
                newline="\n",
            ) as f:
                for line in f:
                    yield line[:-1] if line.endswith("\n") else line
        except FileNotFoundError as e:
            raise NotFoundError(f"file {self.file_path} does not exist") from e
        except OSError as e:
            raise IOFailureError(f"failed to read {self.file_path}: {e}") from e

    def iter_window(self, start_line: int, end_line: int) -> Iterator[str]:
        """Yield tagged lines in ``[start_line, end_line)``.

        Range checks against the file length run once the scan has passed
        the window, so an out-of-range window raises after its lines were
        yielded. Use ``read_window`` for all-or-nothing results.
        """
        _validate_range(start_line, end_line)
        if start_line == end_line:
            return

        line_count = 0
        for line_count, text in enumerate(self.read_lines(), 1):
            if line_count >= end_line:
                break
            if line_count >= start_line:
                yield tag_line(line_count, text)

        if line_count < start_line:
            raise OutOfRangeError(
                f"start line beyond file length ({start_line} > {line_count} lines)"
            )
        if line_count < end_line - 1:
            raise OutOfRangeError(
                f"end line beyond file length ({end_line} > {line_count + 1})"
            )

    def read_window(self, start_line: int, end_line: int) -> list[str]:
        """Read tagged lines in the half-open range ``[start_line, end_line)``.

        Args:
            start_line: First line to return (1-based, inclusive)
            end_line: Line to stop at (1-based, exclusive)

        Returns:
            List of ``<line-N>text</line-N>`` strings

        Raises:
            InvalidArgumentError: If start_line < 1 or end_line < start_line
            NotFoundError: If the file does not exist
            OutOfRangeError: If the window reaches past the end of the file
        """
        window = list(self.iter_window(start_line, end_line))
        logger.debug(f"Read {len(window)} lines [{start_line}, {end_line}) from {self.file_path}")
        return window


def _validate_range(start_line: int, end_line: int):
    if start_line < 1 or end_line < start_line:
        raise InvalidArgumentError(
            f"invalid line numbers: start_line={start_line}, end_line={end_line}"
        )


def read_window(file_path: Union[str, Path], start_line: int, end_line: int) -> list[str]:
    """Read a tagged window of lines from a file.

    An empty window (``start_line == end_line``) returns ``[]`` without
    opening the file.
    """
    return WindowReader(file_path).read_window(start_line, end_line)
