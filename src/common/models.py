"""Data models shared across the CLI, counting engine, and telemetry."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Literal, Optional

ExecutorKind = Literal["thread", "process"]
ErrorPolicy = Literal["fail-fast", "skip"]

DEFAULT_CHUNK_SIZE = 1_048_576


class CountStrategy(str, Enum):
    """Closed set of counting algorithms a run can select."""

    GETLINE = "getline"
    DELIMITER_SCAN = "delimiter-scan"
    BUFFERED_DELIMITER_SCAN = "buffered-delimiter-scan"

    @property
    def label(self) -> str:
        return _LABELS[self]

    @classmethod
    def benchmark_order(cls) -> List["CountStrategy"]:
        return [cls.GETLINE, cls.DELIMITER_SCAN, cls.BUFFERED_DELIMITER_SCAN]


_LABELS = {
    CountStrategy.GETLINE: "getline",
    CountStrategy.DELIMITER_SCAN: "ncount",
    CountStrategy.BUFFERED_DELIMITER_SCAN: "buffered ncount",
}


@dataclass(slots=True, frozen=True)
class FileCount:
    """Newline count for one file under one strategy."""

    file_path: Path
    lines: int


@dataclass(slots=True, frozen=True)
class CountFailure:
    """A file that could not be counted, kept instead of folding it in as zero."""

    file_path: Path
    reason: str


@dataclass(slots=True)
class CountResult:
    """Aggregate of a single dispatch-and-reduce run."""

    strategy: CountStrategy
    total: int = 0
    files: List[FileCount] = field(default_factory=list)
    failures: List[CountFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


@dataclass(slots=True, frozen=True)
class TimingRecord:
    """Wall-clock timing of one strategy inside a benchmark run."""

    strategy: CountStrategy
    elapsed_ms: float
    total: int


@dataclass(slots=True)
class FileProgress:
    file_path: Path
    strategy: CountStrategy
    lines: Optional[int] = None
    status: Literal["counted", "failed"] = "counted"
    reason: Optional[str] = None


@dataclass(slots=True)
class GlobalSettings:
    error_policy: ErrorPolicy = "fail-fast"
    chunk_size: int = DEFAULT_CHUNK_SIZE


@dataclass(slots=True)
class ProfileSettings:
    description: str = "Executor-managed thread pool"
    executor: ExecutorKind = "thread"
    max_workers: Optional[int] = None


@dataclass(slots=True)
class RuntimeConfig:
    global_settings: GlobalSettings = field(default_factory=GlobalSettings)
    profile: ProfileSettings = field(default_factory=ProfileSettings)
