"""constscan - find top-level string constants in Go source trees."""

# Keep in sync with pyproject.toml [project] version.
__version__ = "0.1.0"

from constscan.config import ScanConfig  # noqa: E402
from constscan.coordinator import ResultCollector, scan_directory, scan_files  # noqa: E402
from constscan.discovery import discover_files  # noqa: E402
from constscan.errors import ConstScanError, FatalScanError, FileParseError  # noqa: E402
from constscan.extractor import classify_literal, contains_non_ascii, extract_constants  # noqa: E402
from constscan.formatter import format_json, format_record, format_records  # noqa: E402
from constscan.models import ConstantRecord, ParseFailure, ScanResult  # noqa: E402
from constscan.parsing import GoParser, SyntaxParser  # noqa: E402

__all__ = [
    "__version__",
    "ScanConfig",
    "ResultCollector",
    "scan_directory",
    "scan_files",
    "discover_files",
    "ConstScanError",
    "FatalScanError",
    "FileParseError",
    "classify_literal",
    "contains_non_ascii",
    "extract_constants",
    "format_json",
    "format_record",
    "format_records",
    "ConstantRecord",
    "ParseFailure",
    "ScanResult",
    "GoParser",
    "SyntaxParser",
]
