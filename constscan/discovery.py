"""Recursive discovery of source files under a scan root."""

import os
from collections.abc import Iterable
from pathlib import Path

from constscan.config import DEFAULT_EXTENSION
from constscan.errors import FatalScanError
from constscan.logging import logger


def _raise_walk_error(error: OSError) -> None:
    raise error


def discover_files(
    root: str | Path,
    extension: str = DEFAULT_EXTENSION,
    exclude_dirs: Iterable[str] = (),
) -> list[str]:
    """Find every file under ``root`` whose name ends with ``extension``.

    The walk is all-or-nothing: a missing root, an unreadable directory or any
    other filesystem error anywhere in the tree aborts discovery. Symlinked
    directories are listed but not descended into, so link cycles cannot loop.

    Paths are returned as ``root`` joined with the relative components, in
    walk order (entries sorted per directory). Callers must not rely on the
    order.

    Args:
        root: Directory to walk. A regular file is accepted and returned on
            its own when its name matches.
        extension: Suffix a file name must end with (e.g. ``".go"``).
        exclude_dirs: Directory names to prune from the walk.

    Returns:
        List of matching file paths. Directories are never included.

    Raises:
        FatalScanError: If any part of the tree cannot be walked.
    """
    root_str = os.fspath(root)
    skip = frozenset(exclude_dirs)

    if os.path.isfile(root_str):
        return [root_str] if os.path.basename(root_str).endswith(extension) else []

    found: list[str] = []
    try:
        for dirpath, dirnames, filenames in os.walk(root_str, onerror=_raise_walk_error):
            dirnames[:] = sorted(d for d in dirnames if d not in skip)
            for filename in sorted(filenames):
                if filename.endswith(extension):
                    found.append(os.path.join(dirpath, filename))
    except OSError as e:
        raise FatalScanError(f"cannot walk {root_str}: {e}") from e

    logger.debug("  discover_files: %d %s files under %s", len(found), extension, root_str)
    return found
