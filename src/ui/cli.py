"""Command line shell: pick a directory and a counting mode, print the totals."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Callable, List, NoReturn, Optional, Sequence, Union

from common.config import DEFAULT_PROFILE, load_runtime_config
from common.errors import LineCountError, PathError, UsageError
from common.models import CountStrategy, FileProgress, TimingRecord
from common.progress import BenchmarkRecorder
from core.counting import (
    CountingEngine,
    list_regular_files,
    resolve_directory,
    run_benchmark,
    totals_agree,
)

BENCHMARK = "benchmark"
SHORT_FLAGS = {"-g", "-n", "-m", "-b", "-h", "-v"}

Mode = Union[CountStrategy, str, None]

USAGE = "ncount [options] directory"
EPILOG = (
    "directory: the path to the directory to process. It must not be prefixed with '-'.\n"
    "Only regular files directly inside the directory are counted."
)


class CliArgumentParser(argparse.ArgumentParser):
    """Reports bad long options as UsageError instead of exiting with status 2."""

    def error(self, message: str) -> NoReturn:
        raise UsageError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = CliArgumentParser(
        prog="ncount",
        usage=USAGE,
        description="Count newline characters across the regular files of a directory",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    parser.add_argument("-g", dest="getline", action="store_true", help="use getline method. Used by default.")
    parser.add_argument("-n", dest="ncount", action="store_true", help="use \\n counting")
    parser.add_argument("-m", dest="buffered", action="store_true", help="use buffered \\n counting")
    parser.add_argument("-b", dest="benchmark", action="store_true", help="benchmark all three methods")
    parser.add_argument("-h", dest="help", action="store_true", help="print this help message")
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Report every counted file on stderr",
    )
    parser.add_argument(
        "--profile",
        default=DEFAULT_PROFILE,
        help="Profile name; default, bounded and processes are built in when config/defaults.json is absent",
    )
    parser.add_argument(
        "--config",
        help="Path to a configuration JSON (defaults to config/defaults.json)",
    )
    parser.add_argument(
        "--skip-unreadable",
        action="store_true",
        help="Skip files that cannot be read instead of aborting the run",
    )
    parser.add_argument(
        "--progress-log",
        help="Path to JSONL file for per-file progress events",
    )
    parser.add_argument(
        "--benchmark-log",
        help="Where to append benchmark timings (with -b)",
    )
    return parser


def filter_short_options(argv: Sequence[str]) -> List[str]:
    """Drop single-dash tokens other than the exact known flags.

    Each single-dash token is one option, so `-gx` or `-bn` are unknown and ignored
    rather than split into separate flags.
    """

    kept: List[str] = []
    for arg in argv:
        if arg.startswith("--") or not arg.startswith("-") or arg in SHORT_FLAGS:
            kept.append(arg)
    return kept


def pick_directory(extras: Sequence[str]) -> Optional[str]:
    """Last argument not starting with '-' names the directory; unknown options are ignored."""

    directory: Optional[str] = None
    for arg in extras:
        if not arg.startswith("-"):
            directory = arg
    return directory


def select_mode(args: argparse.Namespace) -> Mode:
    if args.benchmark:
        return BENCHMARK
    if args.ncount:
        return CountStrategy.DELIMITER_SCAN
    if args.getline:
        return CountStrategy.GETLINE
    if args.buffered:
        return CountStrategy.BUFFERED_DELIMITER_SCAN
    return None


def render_progress(progress: FileProgress) -> None:
    print(
        f"[count] {progress.file_path} strategy={progress.strategy.value} lines={progress.lines}",
        file=sys.stderr,
    )


def render_failure(progress: FileProgress) -> None:
    print(
        f"[count] skipped {progress.file_path} strategy={progress.strategy.value}: {progress.reason}",
        file=sys.stderr,
    )


def render_record(record: TimingRecord) -> None:
    print(f"{record.strategy.label} method total running time: {record.elapsed_ms:.3f} millisecond")
    print(f"Total lines: {record.total}")


def progress_reporter(engine: CountingEngine, verbose: bool) -> Callable[[FileProgress], None]:
    report_skips = engine.error_policy == "skip"

    def on_progress(progress: FileProgress) -> None:
        if progress.status == "failed":
            if report_skips:
                render_failure(progress)
            return
        if verbose:
            render_progress(progress)

    return on_progress


def command_count(engine: CountingEngine, files: List[Path], mode: Mode, *, verbose: bool) -> None:
    strategy = CountStrategy.GETLINE if mode is None else CountStrategy(mode)
    result = engine.count(files, strategy, progress_callback=progress_reporter(engine, verbose))
    if mode is None:
        print(result.total)
    else:
        print(f"Lines count using {strategy.label} method: {result.total}")


def command_benchmark(
    engine: CountingEngine,
    files: List[Path],
    *,
    dataset: str,
    log_path: Optional[Path],
    verbose: bool,
) -> None:
    print("Benchmarking...")
    records = run_benchmark(
        engine,
        files,
        on_record=render_record,
        progress_callback=progress_reporter(engine, verbose),
    )
    if not totals_agree(records):
        totals = ", ".join(f"{record.strategy.value}={record.total}" for record in records)
        print(f"[benchmark] warning: strategies disagree on the total ({totals})", file=sys.stderr)
    if log_path:
        BenchmarkRecorder(log_path).record(dataset=dataset, records=records)


def run(argv: Sequence[str]) -> int:
    parser = build_parser()
    if not argv:
        parser.print_help()
        return 1

    try:
        args, extras = parser.parse_known_args(filter_short_options(argv))
    except UsageError as exc:
        print(f"{parser.prog}: error: {exc.message}", file=sys.stderr)
        return 1
    if args.help:
        parser.print_help()
        return 1

    try:
        directory = pick_directory(extras)
        if directory is None:
            raise UsageError("No directory provided")
        target = resolve_directory(directory)
    except (UsageError, PathError) as exc:
        print(exc.message)
        return 1

    overrides = {"global": {"error_policy": "skip"}} if args.skip_unreadable else None
    try:
        runtime = load_runtime_config(
            args.profile,
            config_path=Path(args.config) if args.config else None,
            overrides=overrides,
        )
        files = list_regular_files(target)
        engine = CountingEngine(
            runtime,
            progress_log=Path(args.progress_log) if args.progress_log else None,
        )
        mode = select_mode(args)
        if mode == BENCHMARK:
            command_benchmark(
                engine,
                files,
                dataset=str(target),
                log_path=Path(args.benchmark_log) if args.benchmark_log else None,
                verbose=args.verbose,
            )
        else:
            command_count(engine, files, mode, verbose=args.verbose)
    except LineCountError as exc:
        print(str(exc), file=sys.stderr)
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    return run(sys.argv[1:] if argv is None else argv)


if __name__ == "__main__":
    raise SystemExit(main())
