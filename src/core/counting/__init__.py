"""Newline counting: single-file counters, fan-out engine, benchmark harness."""

from .benchmark import run_benchmark, totals_agree
from .counters import (
    BufferedDelimiterScanCounter,
    DelimiterScanCounter,
    GetlineCounter,
    LineCounter,
    counter_for,
)
from .discovery import list_regular_files, resolve_directory
from .engine import CountingEngine

__all__ = [
    "BufferedDelimiterScanCounter",
    "CountingEngine",
    "DelimiterScanCounter",
    "GetlineCounter",
    "LineCounter",
    "counter_for",
    "list_regular_files",
    "resolve_directory",
    "run_benchmark",
    "totals_agree",
]
