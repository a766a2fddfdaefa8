"""Structured progress logging utilities."""
from __future__ import annotations

import json
import time
from pathlib import Path
from typing import Iterable, Optional

from .models import FileProgress, TimingRecord


class ProgressLogger:
    """Writes per-file counting events to JSONL for later inspection."""

    def __init__(self, path: Optional[Path]) -> None:
        self.path = path
        if path:
            path.parent.mkdir(parents=True, exist_ok=True)

    def emit(self, progress: FileProgress) -> None:
        if not self.path:
            return
        payload = {
            "file_path": str(progress.file_path),
            "strategy": progress.strategy.value,
            "lines": progress.lines,
            "status": progress.status,
            "reason": progress.reason,
            "timestamp": time.time(),
        }
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(payload))
            handle.write("\n")


class BenchmarkRecorder:
    """Stores per-strategy timing records for later analysis."""

    def __init__(self, path: Path) -> None:
        self.path = path
        path.parent.mkdir(parents=True, exist_ok=True)

    def record(self, dataset: str, records: Iterable[TimingRecord]) -> None:
        timestamp = time.time()
        with self.path.open("a", encoding="utf-8") as handle:
            for record in records:
                payload = {
                    "dataset": dataset,
                    "strategy": record.strategy.value,
                    "elapsed_ms": record.elapsed_ms,
                    "total": record.total,
                    "timestamp": timestamp,
                }
                handle.write(json.dumps(payload))
                handle.write("\n")
