"""Single-file newline counters with different I/O tradeoffs.

Every counter returns the number of ``b"\\n"`` bytes in the file: an
unterminated last line is not counted and an empty file yields 0. Open or
read failures surface as ``OSError`` with ``filename`` set.
"""
from __future__ import annotations

from pathlib import Path

from common.models import DEFAULT_CHUNK_SIZE, CountStrategy

NEWLINE = b"\n"


class LineCounter:
    """Common interface dispatched by the counting engine."""

    strategy: CountStrategy

    def count(self, path: Path) -> int:
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class GetlineCounter(LineCounter):
    """Walks the file line by line using the file object's own line splitting."""

    strategy = CountStrategy.GETLINE

    def count(self, path: Path) -> int:
        line_count = 0
        with Path(path).open("rb") as handle:
            for line in handle:
                if line.endswith(NEWLINE):
                    line_count += 1
        return line_count


class DelimiterScanCounter(LineCounter):
    """Single linear pass over a default-buffered byte stream."""

    strategy = CountStrategy.DELIMITER_SCAN

    def count(self, path: Path) -> int:
        line_count = 0
        with Path(path).open("rb") as handle:
            # read1() hands back whatever the stream buffer holds; no caller chunk size
            while True:
                data = handle.read1()
                if not data:
                    break
                line_count += data.count(NEWLINE)
        return line_count


class BufferedDelimiterScanCounter(LineCounter):
    """Counts newlines chunk by chunk to amortize read calls."""

    strategy = CountStrategy.BUFFERED_DELIMITER_SCAN

    def __init__(self, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        self.chunk_size = max(1, chunk_size)

    def count(self, path: Path) -> int:
        line_count = 0
        with Path(path).open("rb", buffering=0) as handle:
            while True:
                chunk = handle.read(self.chunk_size)
                if not chunk:
                    break
                line_count += chunk.count(NEWLINE)
        return line_count

    def __repr__(self) -> str:
        return f"{type(self).__name__}(chunk_size={self.chunk_size})"


def counter_for(strategy: CountStrategy, *, chunk_size: int = DEFAULT_CHUNK_SIZE) -> LineCounter:
    strategy = CountStrategy(strategy)
    if strategy is CountStrategy.GETLINE:
        return GetlineCounter()
    if strategy is CountStrategy.DELIMITER_SCAN:
        return DelimiterScanCounter()
    return BufferedDelimiterScanCounter(chunk_size=chunk_size)
