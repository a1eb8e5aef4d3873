"""Agent-facing tool layer over the batch editor and window reader."""
import json
import logging
import time
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Callable, NamedTuple, Optional, Union

from ..core.batch_editor import BatchEditor
from ..core.safety import performance_monitor
from ..core.window_reader import WindowReader
from ..errors import InvalidArgumentError, IOFailureError, LineEditorError, NotFoundError

logger = logging.getLogger(__name__)

Payload = Union[str, bytes, Mapping[str, Any]]


class ToolResult(NamedTuple):
    """Outcome of a tool call, ready to hand back to the agent."""

    content: str
    is_error: bool = False


class AgentEditTools:
    """Line editing tools for AI agents.

    Accepts structured payloads (mappings or JSON text), runs the matching
    operation and reports failures as error text instead of raising, so the
    agent sees the message verbatim.
    """

    def __init__(
        self,
        workspace_dir: Optional[Union[str, Path]] = None,
        max_file_size: int = 100 * 1024 * 1024,
        encoding: str = "utf-8",
        use_lock: bool = False,
        lock_timeout: float = 30,
    ):  # 100MB default
        """Initialize agent edit tools.

        Args:
            workspace_dir: Confine paths to this directory (None for host paths as given)
            max_file_size: Maximum file size to read or edit (safety limit)
            encoding: Text encoding for reads and writes
            use_lock: Hold an advisory lock file while editing
            lock_timeout: Lock timeout in seconds
        """
        self.workspace = Path(workspace_dir).resolve() if workspace_dir else None
        self.max_file_size = max_file_size
        self.encoding = encoding
        self.editor = BatchEditor(
            encoding=encoding, use_lock=use_lock, lock_timeout=lock_timeout
        )
        self.operation_log = []

        self._tools: dict[str, Callable[[Mapping[str, Any]], str]] = {
            "edit_file": self._edit_file,
            "read_lines": self._read_lines,
            "read_file": self._read_file,
        }

        if self.workspace is not None:
            self.workspace.mkdir(parents=True, exist_ok=True)

    @property
    def tool_names(self) -> list[str]:
        return list(self._tools)

    def _resolve_path(self, file_path: Any) -> Path:
        """Validate a caller supplied path and resolve it against the workspace.

        Raises:
            InvalidArgumentError: If the path is missing or escapes the workspace
        """
        if not isinstance(file_path, str) or not file_path:
            raise InvalidArgumentError("invalid input parameters: path is required")
        if "\0" in file_path:
            raise InvalidArgumentError("invalid input parameters: path contains a NUL byte")

        if self.workspace is None:
            return Path(file_path)

        full_path = (self.workspace / file_path).resolve()
        try:
            full_path.relative_to(self.workspace)
        except ValueError:
            raise InvalidArgumentError(f"Path '{file_path}' is outside workspace")

        return full_path

    def _check_file_size(self, file_path: Path):
        if file_path.is_file():
            size = file_path.stat().st_size
            if size > self.max_file_size:
                raise InvalidArgumentError(
                    f"File {file_path} ({size} bytes) exceeds maximum size ({self.max_file_size} bytes)"
                )

    def _log_operation(self, op_type: str, file_path: Any, details: Any):
        """Maintain audit trail for agent operations."""
        self.operation_log.append(
            {
                "timestamp": time.time(),
                "operation": op_type,
                "file": file_path,
                "details": details,
            }
        )

    @staticmethod
    def _decode_payload(payload: Payload) -> Mapping[str, Any]:
        if isinstance(payload, (str, bytes)):
            try:
                payload = json.loads(payload)
            except ValueError as e:
                raise InvalidArgumentError(f"invalid input: {e}") from e

        if not isinstance(payload, Mapping):
            raise InvalidArgumentError("invalid input: expected a JSON object")
        return payload

    def execute(self, name: str, payload: Payload) -> ToolResult:
        """Run a tool by name.

        Args:
            name: Tool name (edit_file, read_lines or read_file)
            payload: Tool input as a mapping or JSON text

        Returns:
            ToolResult with the tool output, or the error message and is_error set
        """
        tool = self._tools.get(name)
        if tool is None:
            logger.warning(f"Unknown tool requested: {name}")
            return ToolResult("tool not found", is_error=True)

        file_path = None
        try:
            args = self._decode_payload(payload)
            file_path = args.get("path")
            with performance_monitor.measure_operation(name):
                content = tool(args)
        except LineEditorError as e:
            logger.error(f"Tool {name} failed for {file_path}: {e}")
            self._log_operation(f"failed_{name}", file_path, str(e))
            return ToolResult(str(e), is_error=True)

        self._log_operation(name, file_path, len(content))
        return ToolResult(content)

    def edit_file(self, payload: Payload) -> ToolResult:
        """Apply a batch of edits. Payload: ``path`` and ``edits``."""
        return self.execute("edit_file", payload)

    def read_lines(self, payload: Payload) -> ToolResult:
        """Read a tagged window. Payload: ``path``, ``start_line``, ``end_line``."""
        return self.execute("read_lines", payload)

    def read_file(self, payload: Payload) -> ToolResult:
        """Read a whole file. Payload: ``path``."""
        return self.execute("read_file", payload)

    def _edit_file(self, args: Mapping[str, Any]) -> str:
        full_path = self._resolve_path(args.get("path"))
        self._check_file_size(full_path)

        edits = args.get("edits")
        if edits is None:
            edits = []
        if not isinstance(edits, list):
            raise InvalidArgumentError("invalid input: 'edits' must be a list")

        return self.editor.apply_batch(full_path, edits)

    def _read_lines(self, args: Mapping[str, Any]) -> str:
        start_line = args.get("start_line")
        end_line = args.get("end_line")
        for key, value in (("start_line", start_line), ("end_line", end_line)):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidArgumentError(f"invalid input: '{key}' must be an integer")

        full_path = self._resolve_path(args.get("path"))
        reader = WindowReader(full_path, encoding=self.encoding)
        return json.dumps(reader.read_window(start_line, end_line))

    def _read_file(self, args: Mapping[str, Any]) -> str:
        full_path = self._resolve_path(args.get("path"))
        self._check_file_size(full_path)

        try:
            with open(
                full_path, encoding=self.encoding, errors="surrogateescape", newline=""
            ) as f:
                return f.read()
        except FileNotFoundError as e:
            raise NotFoundError(f"file {args.get('path')} does not exist") from e
        except OSError as e:
            raise IOFailureError(f"failed to read {args.get('path')}: {e}") from e

    def get_operation_log(self) -> list[dict[str, Any]]:
        """Get operation log for debugging and audit purposes."""
        return self.operation_log.copy()

    def clear_operation_log(self):
        """Clear the operation log."""
        self.operation_log.clear()
