"""
CSV export of simulation runs.

Rows are ``t,r,y,u``, one per sample, written in chunks of ``buffer_size``.
"""

from typing import Any, Iterable, List, Tuple
from pathlib import Path
import csv

SAMPLE_COLUMNS = ['t', 'r', 'y', 'u']


class CSVLogger:
    """
    Sample writer with a row buffer.

    Anything with ``t``, ``r``, ``y`` and ``u`` attributes can be logged,
    normally the ``Sample`` records of a ``SimulationResult``.

    Example:
        >>> with CSVLogger("run.csv") as logger:
        ...     logger.log_samples(result.samples)
    """

    def __init__(self, file_path: str, buffer_size: int = 100):
        """
        Args:
            file_path: Destination file, parent directories are created
            buffer_size: Rows held in memory before they are written
        """
        if buffer_size < 1:
            raise ValueError("buffer_size must be at least 1")

        self._file_path = Path(file_path)
        self._buffer_size = buffer_size
        self._pending: List[Tuple[float, float, float, float]] = []
        self._rows_written = 0

        self._file_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = open(self._file_path, 'w', newline='')
        self._writer = csv.writer(self._file)
        self._writer.writerow(SAMPLE_COLUMNS)
        self._closed = False

    def log(self, sample: Any) -> None:
        """Queue one sample, writing the buffer out once it is full."""
        if self._closed:
            raise RuntimeError("Logger is closed")

        self._pending.append((sample.t, sample.r, sample.y, sample.u))
        if len(self._pending) >= self._buffer_size:
            self.flush()

    def log_samples(self, samples: Iterable[Any]) -> None:
        for sample in samples:
            self.log(sample)

    def log_result(self, result) -> None:
        """Log every sample of a ``SimulationResult``."""
        self.log_samples(result.samples)

    def flush(self) -> None:
        """Write queued rows to disk."""
        if self._closed or not self._pending:
            return

        try:
            self._writer.writerows(self._pending)
            self._file.flush()
        except OSError as e:
            raise RuntimeError(f"Failed to write to CSV: {e}") from e
        self._rows_written += len(self._pending)
        self._pending = []

    def close(self) -> None:
        if self._closed:
            return
        try:
            self.flush()
        finally:
            self._closed = True
            self._file.close()

    @property
    def file_path(self) -> Path:
        return self._file_path

    @property
    def rows_written(self) -> int:
        """Rows already on disk, header excluded."""
        return self._rows_written

    @property
    def pending_rows(self) -> int:
        return len(self._pending)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


def export_samples_csv(samples: Iterable[Any], file_path: str, buffer_size: int = 100) -> Path:
    """
    Write (t, r, y, u) samples to a CSV file.

    Returns:
        Path of the written file
    """
    with CSVLogger(file_path, buffer_size=buffer_size) as logger:
        logger.log_samples(samples)
    return logger.file_path
