"""Timing harness comparing every counting strategy over one file list."""
from __future__ import annotations

import time
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from common.models import CountResult, CountStrategy, TimingRecord
from .engine import CountingEngine, ProgressCallback

RecordCallback = Optional[Callable[[TimingRecord], None]]


def run_benchmark(
    engine: CountingEngine,
    files: Sequence[Path],
    *,
    on_record: RecordCallback = None,
    progress_callback: ProgressCallback = None,
) -> List[TimingRecord]:
    """Run the engine once per strategy, in fixed order, timing each full run.

    ``on_record`` fires as soon as a strategy finishes so callers can print
    results without waiting for the slower ones.
    """

    records: List[TimingRecord] = []
    for strategy in CountStrategy.benchmark_order():
        start = time.perf_counter()
        result: CountResult = engine.count(files, strategy, progress_callback=progress_callback)
        elapsed_ms = (time.perf_counter() - start) * 1000.0
        record = TimingRecord(strategy=strategy, elapsed_ms=elapsed_ms, total=result.total)
        records.append(record)
        if on_record:
            on_record(record)
    return records


def totals_agree(records: Sequence[TimingRecord]) -> bool:
    return len({record.total for record in records}) <= 1
