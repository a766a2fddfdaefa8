from __future__ import annotations

from pathlib import Path
from typing import List

from common.models import CountStrategy, TimingRecord
from core.counting import CountingEngine, list_regular_files, run_benchmark, totals_agree


def test_benchmark_runs_strategies_in_fixed_order(tmp_path: Path) -> None:
    (tmp_path / "a.txt").write_bytes(b"x\ny\n")
    (tmp_path / "b.txt").write_bytes(b"z")
    files = list_regular_files(tmp_path)
    emitted: List[TimingRecord] = []

    records = run_benchmark(CountingEngine(), files, on_record=emitted.append)

    assert [record.strategy for record in records] == [
        CountStrategy.GETLINE,
        CountStrategy.DELIMITER_SCAN,
        CountStrategy.BUFFERED_DELIMITER_SCAN,
    ]
    assert [record.total for record in records] == [2, 2, 2]
    assert all(record.elapsed_ms >= 0 for record in records)
    assert emitted == records
    assert totals_agree(records)


def test_benchmark_on_empty_directory(tmp_path: Path) -> None:
    records = run_benchmark(CountingEngine(), list_regular_files(tmp_path))
    assert [record.total for record in records] == [0, 0, 0]


def test_totals_agree_detects_divergence() -> None:
    records = [
        TimingRecord(CountStrategy.GETLINE, 1.0, 10),
        TimingRecord(CountStrategy.DELIMITER_SCAN, 1.0, 10),
        TimingRecord(CountStrategy.BUFFERED_DELIMITER_SCAN, 1.0, 11),
    ]
    assert not totals_agree(records)
    assert totals_agree([])
