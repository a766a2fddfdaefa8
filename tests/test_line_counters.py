from __future__ import annotations

from pathlib import Path

import pytest

from common.models import CountStrategy
from core.counting.counters import (
    BufferedDelimiterScanCounter,
    DelimiterScanCounter,
    GetlineCounter,
    counter_for,
)

ALL_COUNTERS = [GetlineCounter(), DelimiterScanCounter(), BufferedDelimiterScanCounter()]


def _write(tmp_path: Path, name: str, payload: bytes) -> Path:
    path = tmp_path / name
    path.write_bytes(payload)
    return path


@pytest.mark.parametrize("counter", ALL_COUNTERS, ids=lambda c: c.strategy.value)
@pytest.mark.parametrize(
    "payload, expected",
    [
        (b"", 0),
        (b"abc", 0),
        (b"a\nb", 1),
        (b"x\ny\n", 2),
        (b"\n\n\n", 3),
        (b"crlf\r\nline\r\n", 2),
    ],
)
def test_counts_newline_bytes(tmp_path: Path, counter, payload: bytes, expected: int) -> None:
    path = _write(tmp_path, "sample.txt", payload)
    assert counter.count(path) == expected


def test_getline_ignores_unterminated_last_line(tmp_path: Path) -> None:
    path = _write(tmp_path, "tail.txt", b"first\nsecond\nthird")
    assert GetlineCounter().count(path) == 2


def test_binary_content_counts_only_newline_bytes(tmp_path: Path) -> None:
    payload = bytes(range(256)) * 4
    path = _write(tmp_path, "blob.bin", payload)
    for counter in ALL_COUNTERS:
        assert counter.count(path) == 4


def test_buffered_counter_handles_exact_chunk_multiple(tmp_path: Path) -> None:
    chunk = 1_048_576
    line = b"x" * 1023 + b"\n"
    payload = line * (2 * chunk // len(line))
    assert len(payload) == 2 * chunk
    path = _write(tmp_path, "exact.txt", payload)

    expected = payload.count(b"\n")
    assert BufferedDelimiterScanCounter(chunk_size=chunk).count(path) == expected
    assert DelimiterScanCounter().count(path) == expected


@pytest.mark.parametrize("chunk_size", [1, 2, 3, 7, 64])
def test_buffered_counter_newlines_straddling_chunks(tmp_path: Path, chunk_size: int) -> None:
    payload = b"ab\ncd\n\nefghij\nk\n" * 13
    path = _write(tmp_path, "straddle.txt", payload)
    counter = BufferedDelimiterScanCounter(chunk_size=chunk_size)
    assert counter.count(path) == DelimiterScanCounter().count(path) == payload.count(b"\n")


def test_missing_file_raises_os_error_with_path(tmp_path: Path) -> None:
    missing = tmp_path / "gone.txt"
    for counter in ALL_COUNTERS:
        with pytest.raises(OSError) as exc:
            counter.count(missing)
        assert str(exc.value.filename) == str(missing)


def test_counter_for_maps_every_strategy() -> None:
    assert isinstance(counter_for(CountStrategy.GETLINE), GetlineCounter)
    assert isinstance(counter_for(CountStrategy.DELIMITER_SCAN), DelimiterScanCounter)
    buffered = counter_for("buffered-delimiter-scan", chunk_size=4096)
    assert isinstance(buffered, BufferedDelimiterScanCounter)
    assert buffered.chunk_size == 4096
