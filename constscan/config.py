"""Scan configuration."""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

DEFAULT_EXTENSION = ".go"


class ScanConfig(BaseModel):
    """Settings for one scan run.

    Built by the CLI from its options (each of which may also come from a
    ``CONSTSCAN_*`` environment variable or a ``.env`` file).
    """

    root: Path = Field(description="Directory (or single file) to scan")
    extension: str = Field(default=DEFAULT_EXTENSION, description="Source file extension")
    exclude_dirs: frozenset[str] = Field(
        default_factory=frozenset, description="Directory names pruned from the walk"
    )
    filter_non_ascii_only: bool = Field(
        default=True, description="Only report literals containing non-ASCII bytes"
    )
    max_workers: int | None = Field(
        default=None,
        ge=1,
        description="Bound on concurrent parse tasks; None starts one task per file",
    )
    show_progress: bool = Field(default=True, description="Show a progress bar on stderr")

    model_config = {"frozen": True}

    @field_validator("extension")
    @classmethod
    def _normalize_extension(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("extension must not be empty")
        if not value.startswith("."):
            value = "." + value
        return value
