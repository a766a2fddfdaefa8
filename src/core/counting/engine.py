"""Concurrent fan-out/fan-in dispatch of per-file counting tasks."""
from __future__ import annotations

from concurrent.futures import Executor, Future, ProcessPoolExecutor, ThreadPoolExecutor
from concurrent.futures.process import BrokenProcessPool
from concurrent.futures.thread import BrokenThreadPool
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from common.errors import CountAbortedError, ErrorCode, FileCountError, LineCountError
from common.models import (
    CountFailure,
    CountResult,
    CountStrategy,
    FileCount,
    FileProgress,
    RuntimeConfig,
)
from common.progress import ProgressLogger
from .counters import LineCounter, counter_for

ProgressCallback = Optional[Callable[[FileProgress], None]]


def _worker_entry(counter: LineCounter, path_str: str) -> int:
    return counter.count(Path(path_str))


def describe_os_error(exc: OSError) -> str:
    return exc.strerror or str(exc) or type(exc).__name__


class CountingEngine:
    """Counts newlines across many files, one task per file.

    Tasks are submitted all at once and collected in list order once every
    one of them has finished. The executor decides how many run at a time:
    ``max_workers`` from the profile bounds the pool, ``None`` leaves the
    executor default in charge.
    """

    def __init__(self, config: Optional[RuntimeConfig] = None, *, progress_log: Optional[Path] = None) -> None:
        self.config = config or RuntimeConfig()
        self.error_policy = self.config.global_settings.error_policy
        self.chunk_size = self.config.global_settings.chunk_size
        self.progress_logger = ProgressLogger(progress_log) if progress_log else None

    def count(
        self,
        files: Sequence[Path],
        strategy: CountStrategy = CountStrategy.GETLINE,
        *,
        progress_callback: ProgressCallback = None,
    ) -> CountResult:
        strategy = CountStrategy(strategy)
        result = CountResult(strategy=strategy)
        if not files:
            return result

        counter = counter_for(strategy, chunk_size=self.chunk_size)
        paths = [Path(path) for path in files]
        failures: List[FileCountError] = []

        with self._make_executor(len(paths)) as pool:
            futures = self._submit_all(pool, counter, paths)
            for path, future in zip(paths, futures):
                try:
                    lines = future.result()
                except (BrokenProcessPool, BrokenThreadPool) as exc:
                    raise LineCountError(
                        ErrorCode.STATE_ERROR,
                        f"Worker pool broke while counting {path}: {exc}",
                        context={"path": str(path)},
                    ) from exc
                except OSError as exc:
                    failure = FileCountError(path, describe_os_error(exc))
                    failures.append(failure)
                    result.failures.append(CountFailure(file_path=path, reason=failure.reason))
                    self._emit_progress(
                        FileProgress(path, strategy, status="failed", reason=failure.reason),
                        progress_callback,
                    )
                    continue
                result.files.append(FileCount(file_path=path, lines=lines))
                result.total += lines
                self._emit_progress(FileProgress(path, strategy, lines=lines), progress_callback)

        if failures and self.error_policy == "fail-fast":
            raise CountAbortedError(failures)
        return result

    def _make_executor(self, task_count: int) -> Executor:
        max_workers = self.config.profile.max_workers
        if max_workers is not None:
            max_workers = max(1, min(max_workers, task_count))
        if self.config.profile.executor == "process":
            return ProcessPoolExecutor(max_workers=max_workers)
        return ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="ncount")

    def _submit_all(self, pool: Executor, counter: LineCounter, paths: Sequence[Path]) -> List[Future]:
        futures: List[Future] = []
        for path in paths:
            try:
                futures.append(pool.submit(_worker_entry, counter, str(path)))
            except RuntimeError as exc:
                raise LineCountError(
                    ErrorCode.STATE_ERROR,
                    f"Could not schedule counting task for {path}: {exc}",
                    context={"path": str(path), "submitted": len(futures)},
                ) from exc
        return futures

    def _emit_progress(self, progress: FileProgress, progress_callback: ProgressCallback) -> None:
        if progress_callback:
            progress_callback(progress)
        if self.progress_logger:
            self.progress_logger.emit(progress)
