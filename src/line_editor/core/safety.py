"""Atomic commit of edited files and operation timing."""
import logging
import os
import tempfile
import time
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from filelock import FileLock, Timeout

from ..errors import IOFailureError

logger = logging.getLogger(__name__)


class SafeFileOperation:
    """Context manager that commits a whole-file rewrite atomically.

    New content is staged in a temporary file next to the target and moved
    over it with ``os.replace``. If the block raises, the staged file is
    discarded and the target is left untouched. No backup is kept.
    """

    def __init__(
        self,
        file_path: Union[str, Path],
        use_lock: bool = False,
        timeout: float = 30,
        encoding: str = "utf-8",
    ):
        """Initialize safe file operation.

        Args:
            file_path: Path to the file to operate on
            use_lock: Hold an advisory ``<file>.lock`` for the duration
            timeout: Lock timeout in seconds
            encoding: Encoding used for staged text
        """
        self.file_path = Path(os.path.realpath(file_path))
        self.use_lock = use_lock
        self.timeout = timeout
        self.encoding = encoding
        self.lock_path = Path(f"{self.file_path}.lock")
        self.temp_path: Optional[Path] = None
        self.lock: Optional[FileLock] = None
        self._operation_log = []

    def __enter__(self):
        """Enter context manager."""
        if self.use_lock:
            try:
                self.lock_path.parent.mkdir(parents=True, exist_ok=True)
                self.lock = FileLock(self.lock_path, timeout=self.timeout)
                self.lock.acquire()
            except Timeout as e:
                raise IOFailureError(
                    f"timed out waiting for lock on {self.file_path}"
                ) from e
            except OSError as e:
                raise IOFailureError(f"failed to lock {self.file_path}: {e}") from e
            logger.info(f"Acquired lock for {self.file_path}")

        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Exit context manager."""
        try:
            if exc_type is not None:
                logger.warning(f"Operation on {self.file_path} failed: {exc_val}")
        finally:
            if self.temp_path and self.temp_path.exists():
                os.remove(self.temp_path)
                self._log_operation("temp_discarded", str(self.temp_path))

            if self.lock:
                self.lock.release()
                logger.info(f"Released lock for {self.file_path}")

    def _log_operation(self, operation: str, details: str):
        """Log operation for audit trail."""
        self._operation_log.append(
            {"timestamp": time.time(), "operation": operation, "details": details}
        )

    def get_temp_file(self) -> Path:
        """Get a temporary file in the target's directory, creating parents."""
        if self.temp_path is None:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                dir=self.file_path.parent,
                prefix=f".{self.file_path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                self.temp_path = Path(tmp.name)

        return self.temp_path

    def commit_text(self, content: str):
        """Stage ``content`` and atomically replace the target with it."""
        try:
            temp_file = self.get_temp_file()
            with open(
                temp_file,
                "w",
                encoding=self.encoding,
                errors="surrogateescape",
                newline="",
            ) as f:
                f.write(content)
            self.atomic_replace(temp_file)
        except OSError as e:
            raise IOFailureError(f"failed to write {self.file_path}: {e}") from e

    def atomic_replace(self, source: Union[str, Path]):
        """Atomically replace the target file with source."""
        source = Path(source)
        if not source.exists():
            raise FileNotFoundError(f"Source file not found: {source}")

        if self.file_path.exists():
            # Keep the original permission bits across the replace
            os.chmod(source, self.file_path.stat().st_mode & 0o7777)
        else:
            os.chmod(source, 0o644)

        os.replace(source, self.file_path)
        if source == self.temp_path:
            self.temp_path = None
        logger.info(f"Atomically replaced {self.file_path}")
        self._log_operation("atomic_replace", f"{source} -> {self.file_path}")

    def get_operation_log(self) -> list[dict]:
        """Get operation log for debugging."""
        return self._operation_log.copy()


@contextmanager
def safe_edit_context(
    file_path: Union[str, Path],
    use_lock: bool = False,
    timeout: float = 30,
    encoding: str = "utf-8",
):
    """Context manager for safe file editing.

    Args:
        file_path: Path to file to edit
        use_lock: Whether to hold an advisory lock file
        timeout: Lock timeout in seconds
        encoding: Encoding used for staged text

    Yields:
        SafeFileOperation instance
    """
    with SafeFileOperation(
        file_path, use_lock=use_lock, timeout=timeout, encoding=encoding
    ) as safe_op:
        yield safe_op


@dataclass
class ToolTiming:
    """Accumulated wall-clock timings for one tool."""

    calls: int = 0
    failures: int = 0
    total_time: float = 0.0
    min_time: float = float("inf")
    max_time: float = 0.0

    def add(self, duration: float, failed: bool):
        self.calls += 1
        if failed:
            self.failures += 1
        self.total_time += duration
        self.min_time = min(self.min_time, duration)
        self.max_time = max(self.max_time, duration)


class PerformanceMonitor:
    """Per-tool call timings for the agent layer.

    Every edit or read routed through ``AgentEditTools.execute`` is timed
    under the tool's name. A call that raises still counts, and is also
    counted as a failure.
    """

    def __init__(self):
        self.timings: dict[str, ToolTiming] = {}

    @contextmanager
    def measure_operation(self, tool_name: str):
        """Time the enclosed tool call.

        Args:
            tool_name: Name the duration is recorded under
        """
        failed = False
        start_time = time.perf_counter()
        try:
            yield
        except BaseException:
            failed = True
            raise
        finally:
            duration = time.perf_counter() - start_time
            self.timings.setdefault(tool_name, ToolTiming()).add(duration, failed)
            logger.debug(
                f"{tool_name} took {duration * 1000:.2f} ms{' (failed)' if failed else ''}"
            )

    def get_stats(self, tool_name: str) -> dict:
        """Summary for one tool, or an empty dict if it was never called."""
        timing = self.timings.get(tool_name)
        if timing is None:
            return {}

        return {
            "count": timing.calls,
            "failures": timing.failures,
            "total_time": timing.total_time,
            "average_time": timing.total_time / timing.calls,
            "min_time": timing.min_time,
            "max_time": timing.max_time,
        }

    def get_all_stats(self) -> dict:
        return {name: self.get_stats(name) for name in self.timings}

    def reset(self):
        self.timings.clear()


# Shared by every AgentEditTools instance
performance_monitor = PerformanceMonitor()
