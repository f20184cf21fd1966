"""Tests for the parallel scan coordinator."""

import json
import logging
import os
import threading
from collections.abc import Callable
from pathlib import Path

import pytest

from constscan.config import ScanConfig
from constscan.coordinator import ResultCollector, scan_directory, scan_files
from constscan.discovery import discover_files
from constscan.errors import FatalScanError, FileParseError
from constscan.formatter import format_json
from constscan.models import ConstantRecord, ParseFailure


def _record(path: str, line: int, value: str = '"v"') -> ConstantRecord:
    return ConstantRecord(file_path=path, line=line, literal_value=value, contains_non_ascii=False)


def _as_set(records: list[ConstantRecord]) -> set[tuple[str, int, str]]:
    return {(r.file_path, r.line, r.literal_value) for r in records}


class TestResultCollector:
    """Tests for the synchronized result hand-off."""

    def test_concurrent_adds_lose_nothing(self) -> None:
        """Batches added from many threads all arrive exactly once."""
        collector = ResultCollector()
        barrier = threading.Barrier(16)

        def worker(n: int) -> None:
            barrier.wait()
            for i in range(50):
                collector.add([_record(f"f{n}.go", i + 1)])

        threads = [threading.Thread(target=worker, args=(n,)) for n in range(16)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        records, failures = collector.seal()

        assert len(records) == 16 * 50
        assert len(_as_set(records)) == 16 * 50
        assert failures == []

    def test_batch_order_is_kept(self) -> None:
        """Records of one batch stay contiguous and ordered."""
        collector = ResultCollector()
        collector.add([_record("a.go", 1), _record("a.go", 2), _record("a.go", 3)])

        records, _ = collector.seal()

        assert [r.line for r in records] == [1, 2, 3]

    def test_sealed_collector_rejects_adds(self) -> None:
        """No batch can be added once the aggregate has been handed over."""
        collector = ResultCollector()
        collector.seal()

        with pytest.raises(RuntimeError):
            collector.add([_record("late.go", 1)])
        with pytest.raises(RuntimeError):
            collector.add_failure(ParseFailure(file_path="late.go", message="late"))
        with pytest.raises(RuntimeError):
            collector.seal()


class StubParser:
    """Parser adapter that fails for files whose content starts with BROKEN."""

    def __init__(self, real_parser) -> None:
        self.real_parser = real_parser
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def parse(self, source: bytes, file_path: str):
        with self._lock:
            self.calls.append(file_path)
        if source.startswith(b"BROKEN"):
            raise FileParseError(file_path, f"{file_path}:1:1: stub failure")
        return self.real_parser.parse(source, file_path)


class TestScanFiles:
    """Tests for scan_files."""

    def test_empty_path_list(self) -> None:
        """No files is an empty result, not an error."""
        result = scan_files([], show_progress=False)

        assert result.records == []
        assert result.failures == []
        assert result.file_count == 0

    def test_end_to_end_filtering(self, greeting_project: Path) -> None:
        """Filtering keeps only the Japanese constant from b.go."""
        paths = discover_files(greeting_project)

        result = scan_files(paths, non_ascii_only=True, show_progress=False)

        b_path = os.path.join(str(greeting_project), "sub", "b.go")
        assert _as_set(result.records) == {(b_path, 4, '"こんにちは"')}

    def test_end_to_end_all_strings(self, greeting_project: Path) -> None:
        """Without filtering both string constants appear, the integer does not."""
        paths = discover_files(greeting_project)

        result = scan_files(paths, non_ascii_only=False, show_progress=False)

        a_path = os.path.join(str(greeting_project), "a.go")
        b_path = os.path.join(str(greeting_project), "sub", "b.go")
        assert _as_set(result.records) == {
            (a_path, 3, '"hello"'),
            (b_path, 4, '"こんにちは"'),
        }
        assert result.file_count == 2

    def test_parse_failure_is_isolated(
        self,
        write_go: Callable[[str, str], Path],
        tmp_path: Path,
        caplog: pytest.LogCaptureFixture,
    ) -> None:
        """A broken file contributes nothing and the other files still count."""
        write_go("good.go", 'package good\nconst A = "é"\n')
        broken = write_go("broken.go", "package broken\n\nfunc (\n")
        write_go("other.go", 'package other\nconst B = "ü"\n')

        with caplog.at_level(logging.WARNING, logger="constscan"):
            result = scan_files(discover_files(tmp_path), non_ascii_only=True, show_progress=False)

        assert {Path(r.file_path).name for r in result.records} == {"good.go", "other.go"}
        assert [f.file_path for f in result.failures] == [str(broken)]
        assert sum("Error parsing file" in m for m in caplog.messages) == 1

    def test_unreadable_file_is_a_parse_failure(
        self, write_go: Callable[[str, str], Path], tmp_path: Path
    ) -> None:
        """A file that cannot be read is handled like a parse failure."""
        write_go("good.go", 'package good\nconst A = "é"\n')
        dangling = tmp_path / "dangling.go"
        dangling.symlink_to(tmp_path / "missing-target.go")

        result = scan_files(discover_files(tmp_path), non_ascii_only=True, show_progress=False)

        assert len(result.records) == 1
        assert [f.file_path for f in result.failures] == [str(dangling)]

    def test_stub_parser_is_used(
        self, write_go: Callable[[str, str], Path], tmp_path: Path, go_parser
    ) -> None:
        """Any SyntaxParser can be plugged in."""
        write_go("ok.go", 'package ok\nconst A = "a"\n')
        write_go("bad.go", "BROKEN on purpose\n")
        stub = StubParser(go_parser)

        result = scan_files(discover_files(tmp_path), parser=stub, show_progress=False)

        assert sorted(Path(p).name for p in stub.calls) == ["bad.go", "ok.go"]
        assert [r.literal_value for r in result.records] == ['"a"']
        assert result.failures[0].message.endswith("stub failure")

    @pytest.mark.parametrize("max_workers", [None, 1, 4])
    def test_same_records_regardless_of_scheduling(
        self,
        write_go: Callable[[str, str], Path],
        tmp_path: Path,
        max_workers: int | None,
    ) -> None:
        """Unbounded and bounded pools yield exactly the same records."""
        expected: set[tuple[str, int, str]] = set()
        for n in range(120):
            path = write_go(
                f"pkg{n % 7}/file{n}.go",
                f'package pkg\n\nconst (\n\tA{n} = "α{n}"\n\tB{n} = "b{n}"\n\tC{n} = "γ{n}"\n)\n',
            )
            expected.add((str(path), 4, f'"α{n}"'))
            expected.add((str(path), 6, f'"γ{n}"'))

        result = scan_files(
            discover_files(tmp_path),
            non_ascii_only=True,
            max_workers=max_workers,
            show_progress=False,
        )

        assert len(result.records) == len(expected)
        assert _as_set(result.records) == expected
        assert result.failures == []

    def test_source_order_within_file(
        self, write_go: Callable[[str, str], Path], tmp_path: Path
    ) -> None:
        """Each file's records keep declaration order in the aggregate."""
        for n in range(20):
            write_go(f"f{n}.go", 'package f\nconst A = "1"\nconst B = "2"\nconst C = "3"\n')

        result = scan_files(discover_files(tmp_path), show_progress=False)

        by_file: dict[str, list[int]] = {}
        for r in result.records:
            by_file.setdefault(r.file_path, []).append(r.line)
        assert len(by_file) == 20
        assert all(lines == [2, 3, 4] for lines in by_file.values())

    def test_rerun_is_idempotent(self, greeting_project: Path) -> None:
        """Scanning twice yields the same set of records."""
        paths = discover_files(greeting_project)

        first = scan_files(paths, non_ascii_only=True, show_progress=False)
        second = scan_files(paths, non_ascii_only=True, show_progress=False)

        assert _as_set(first.records) == _as_set(second.records)


class TestScanDirectory:
    """Tests for scan_directory."""

    def test_scans_configured_root(self, greeting_project: Path) -> None:
        """Discovery and scanning run with the configured options."""
        config = ScanConfig(root=greeting_project, filter_non_ascii_only=False, show_progress=False)

        result = scan_directory(config)

        assert len(result.records) == 2
        assert result.file_count == 2
        assert result.elapsed_seconds > 0

    def test_elapsed_time_in_json(self, greeting_project: Path) -> None:
        """The run's timing is part of the serialized result."""
        config = ScanConfig(root=greeting_project, show_progress=False)

        data = json.loads(format_json(scan_directory(config)))

        assert data["elapsed_seconds"] > 0

    def test_missing_root_is_fatal(self, tmp_path: Path) -> None:
        """A root that cannot be walked raises and scans nothing."""
        config = ScanConfig(root=tmp_path / "nope", show_progress=False)

        with pytest.raises(FatalScanError):
            scan_directory(config)
