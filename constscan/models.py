"""Data models for scan results.

Pydantic models so results serialize straight to JSON for the CLI.
"""

from pydantic import BaseModel, Field


class ConstantRecord(BaseModel):
    """A string literal bound by a top-level const declaration."""

    file_path: str = Field(description="Path of the file, as discovered under the scan root")
    line: int = Field(ge=1, description="1-based line of the literal token")
    literal_value: str = Field(
        description="Literal exactly as written in source, quotes and escapes included"
    )
    contains_non_ascii: bool = Field(
        description="Whether the raw source bytes of the literal include a byte >= 0x80"
    )

    model_config = {"frozen": True}


class ParseFailure(BaseModel):
    """Diagnostic for a file that could not be read or parsed."""

    file_path: str = Field(description="Path of the failing file")
    message: str = Field(description="Reader or parser error message")

    model_config = {"frozen": True}


class ScanResult(BaseModel):
    """Aggregated output of one scan.

    Record order across files follows task completion and is not stable;
    records from the same file keep their source order.
    """

    records: list[ConstantRecord] = Field(default_factory=list, description="Extracted constants")
    failures: list[ParseFailure] = Field(
        default_factory=list, description="Files that failed to parse"
    )
    file_count: int = Field(default=0, description="Number of files dispatched for parsing")
    elapsed_seconds: float = Field(
        default=0.0, ge=0, description="Wall-clock time of discovery plus scanning"
    )
