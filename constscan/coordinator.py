"""Parallel scan coordinator.

Fans out one parse-and-extract task per file onto a thread pool, collects the
per-file batches through a locked ``ResultCollector`` and returns once every
task has finished.

By default the pool is sized to the number of files, i.e. one worker per file
with no throttling. Very large trees therefore start a very large number of
threads; pass ``max_workers`` to bound the pool instead. Barrier semantics are
the same either way: nothing is returned until every dispatched task is done.
"""

import threading
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import Path

from constscan.config import ScanConfig
from constscan.discovery import discover_files
from constscan.errors import FileParseError
from constscan.extractor import extract_constants
from constscan.logging import ProgressBar, log_operation, logger
from constscan.models import ConstantRecord, ParseFailure, ScanResult
from constscan.parsing import GoParser, SyntaxParser


class ResultCollector:
    """Thread-safe aggregation point for per-file results.

    Each task hands over its complete batch once. The aggregate can only be
    read through ``seal()``, after which no further batches are accepted.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: list[ConstantRecord] = []
        self._failures: list[ParseFailure] = []
        self._sealed = False

    def add(self, records: Sequence[ConstantRecord]) -> None:
        """Append one file's records, keeping their order."""
        with self._lock:
            self._check_open()
            self._records.extend(records)

    def add_failure(self, failure: ParseFailure) -> None:
        """Record a file that contributed nothing because it failed to parse."""
        with self._lock:
            self._check_open()
            self._failures.append(failure)

    def seal(self) -> tuple[list[ConstantRecord], list[ParseFailure]]:
        """Close the collector and hand the aggregate to the caller."""
        with self._lock:
            self._check_open()
            self._sealed = True
            return list(self._records), list(self._failures)

    def _check_open(self) -> None:
        if self._sealed:
            raise RuntimeError("ResultCollector is sealed")


def _scan_one(
    file_path: str,
    parser: SyntaxParser,
    collector: ResultCollector,
    non_ascii_only: bool,
) -> int:
    """Parse and extract a single file, handing the result to ``collector``.

    Returns:
        Number of records contributed (0 when the file failed).
    """
    try:
        try:
            source = Path(file_path).read_bytes()
        except OSError as e:
            raise FileParseError(file_path, f"{file_path}: {e.strerror or e}") from e
        tree = parser.parse(source, file_path)
    except FileParseError as e:
        logger.warning("Error parsing file: %s", e.message)
        collector.add_failure(ParseFailure(file_path=e.file_path, message=e.message))
        return 0

    records = extract_constants(tree, file_path, non_ascii_only=non_ascii_only)
    collector.add(records)
    return len(records)


def scan_files(
    paths: Sequence[str],
    parser: SyntaxParser | None = None,
    non_ascii_only: bool = False,
    max_workers: int | None = None,
    show_progress: bool = True,
) -> ScanResult:
    """Parse every file in parallel and aggregate the extracted constants.

    A file that fails to read or parse is logged and contributes no records;
    it never aborts the scan. There is no retry, timeout or cancellation.

    Args:
        paths: Files to scan, as returned by ``discover_files``.
        parser: Parser adapter (defaults to the tree-sitter Go parser).
        non_ascii_only: Keep only literals containing non-ASCII bytes.
        max_workers: Upper bound on concurrent tasks. None means one worker
            per file.
        show_progress: Show a progress bar while tasks complete.

    Returns:
        ScanResult with records (unordered across files, source order within
        a file) and the list of parse failures.
    """
    if not paths:
        return ScanResult(records=[], failures=[], file_count=0)

    if parser is None:
        parser = GoParser()

    workers = max_workers if max_workers is not None else len(paths)
    collector = ResultCollector()

    logger.info("  Parsing %d files (%d workers)", len(paths), workers)

    with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="constscan") as executor:
        futures = [
            executor.submit(_scan_one, path, parser, collector, non_ascii_only)
            for path in paths
        ]

        with ProgressBar(
            total=len(futures), desc="Parsing files", unit="files", disable=not show_progress
        ) as pbar:
            for future in as_completed(futures):
                pbar.update()
                # Surfaces unexpected errors; parse failures are handled in the task.
                future.result()

    records, failures = collector.seal()
    return ScanResult(records=records, failures=failures, file_count=len(paths))


def scan_directory(config: ScanConfig, parser: SyntaxParser | None = None) -> ScanResult:
    """Discover files under ``config.root`` and scan them.

    The returned result carries the wall-clock time of the whole run in
    ``elapsed_seconds``.

    Raises:
        FatalScanError: If the tree cannot be walked. Nothing is scanned.
    """
    details = {
        "root": config.root,
        "ext": config.extension,
        "non_ascii_only": config.filter_non_ascii_only,
    }
    with log_operation("scan", details) as timing:
        paths = discover_files(config.root, config.extension, config.exclude_dirs)
        logger.info("  Found %d %s files", len(paths), config.extension)

        result = scan_files(
            paths,
            parser=parser,
            non_ascii_only=config.filter_non_ascii_only,
            max_workers=config.max_workers,
            show_progress=config.show_progress,
        )

        logger.info(
            "  %d constants from %d files (%d failed to parse)",
            len(result.records),
            result.file_count,
            len(result.failures),
        )
    return result.model_copy(update={"elapsed_seconds": timing.elapsed})
