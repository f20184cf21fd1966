"""Rendering of scan results."""

from collections.abc import Iterable

from constscan.models import ConstantRecord, ScanResult


def format_record(record: ConstantRecord) -> str:
    """Render one record as ``<path>:<line>: <literal>``."""
    return f"{record.file_path}:{record.line}: {record.literal_value}"


def format_records(records: Iterable[ConstantRecord]) -> list[str]:
    """Render records in the order given."""
    return [format_record(r) for r in records]


def format_json(result: ScanResult, indent: int = 2) -> str:
    """Render the whole result, failures included, as JSON."""
    return result.model_dump_json(indent=indent)
