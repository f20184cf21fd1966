"""CLI interface for constscan.

Scans a directory of Go sources and prints one line per top-level string
constant: ``<path>:<line>: <literal>``.
"""

import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from pydantic import ValidationError

# Load .env before reading CONSTSCAN_* defaults
load_dotenv()

from constscan import __version__  # noqa: E402
from constscan.config import DEFAULT_EXTENSION, ScanConfig  # noqa: E402
from constscan.errors import FatalScanError  # noqa: E402


def _require_dir(ctx: click.Context, param: click.Parameter, value: str) -> Path:
    """Reject an empty --dir instead of scanning the working directory."""
    if not value.strip():
        raise click.BadParameter("Directory path is required", ctx=ctx, param=param)
    return Path(value)


@click.command()
@click.version_option(version=__version__, prog_name="constscan")
@click.option(
    "--dir",
    "root",
    required=True,
    envvar="CONSTSCAN_DIR",
    type=click.Path(),
    callback=_require_dir,
    help="Directory to scan recursively (required).",
)
@click.option(
    "--non-ascii-only/--all-strings",
    "non_ascii_only",
    default=True,
    envvar="CONSTSCAN_NON_ASCII_ONLY",
    show_default=True,
    help="Only report literals containing non-ASCII characters.",
)
@click.option(
    "--ext",
    "extension",
    default=DEFAULT_EXTENSION,
    envvar="CONSTSCAN_EXT",
    show_default=True,
    help="File extension to scan.",
)
@click.option(
    "--exclude-dir",
    "exclude_dirs",
    multiple=True,
    help="Directory name to skip. Can be given multiple times.",
)
@click.option(
    "--workers",
    type=click.IntRange(min=1),
    default=None,
    envvar="CONSTSCAN_WORKERS",
    help="Maximum concurrent parse tasks (default: one per file).",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format (default: text)",
)
@click.option("--no-progress", is_flag=True, help="Disable the progress bar.")
@click.option("-q", "--quiet", is_flag=True, help="Only log warnings and errors.")
@click.option("-v", "--verbose", is_flag=True, help="Log debug messages.")
def cli(
    root: Path,
    non_ascii_only: bool,
    extension: str,
    exclude_dirs: tuple[str, ...],
    workers: int | None,
    output_format: str,
    no_progress: bool,
    quiet: bool,
    verbose: bool,
) -> None:
    """Print top-level string constants found in Go files under --dir.

    Files that fail to parse are reported on stderr and skipped; they do
    not change the exit status.
    """
    from constscan.coordinator import scan_directory
    from constscan.formatter import format_json, format_records
    from constscan.logging import set_verbosity

    set_verbosity(quiet=quiet, verbose=verbose)

    try:
        config = ScanConfig(
            root=root,
            extension=extension,
            exclude_dirs=frozenset(exclude_dirs),
            filter_non_ascii_only=non_ascii_only,
            max_workers=workers,
            show_progress=not no_progress,
        )
    except ValidationError as e:
        raise click.UsageError(str(e)) from e

    try:
        result = scan_directory(config)
    except FatalScanError as e:
        click.echo(f"Error finding Go files: {e}", err=True)
        sys.exit(1)

    if output_format == "json":
        click.echo(format_json(result))
        return

    for line in format_records(result.records):
        click.echo(line)


def main() -> None:
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
