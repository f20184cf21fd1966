"""Logging configuration for constscan.

Logs go to stderr so that stdout only carries scan results.
Provides tqdm progress bars for visual feedback on large trees.
"""

import logging
import os
import sys
import time
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

from tqdm import tqdm

# Disable with CONSTSCAN_DISABLE_PROGRESS=1, or implicitly when stderr is not a TTY
_DISABLE_PROGRESS = (
    os.getenv("CONSTSCAN_DISABLE_PROGRESS", "").lower() in ("1", "true", "yes")
    or not sys.stderr.isatty()
)

# Create logger that outputs to stderr
logger = logging.getLogger("constscan")
logger.setLevel(logging.INFO)

# Only add handler if not already configured
if not logger.handlers:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logging.INFO)
    formatter = logging.Formatter(
        "[constscan] %(asctime)s %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    handler.setFormatter(formatter)
    logger.addHandler(handler)


def set_verbosity(quiet: bool = False, verbose: bool = False) -> None:
    """Adjust the constscan logger level.

    Args:
        quiet: Only show warnings and errors (parse failures stay visible).
        verbose: Include debug messages.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logger.setLevel(level)
    for h in logger.handlers:
        h.setLevel(level)


class TimingContext:
    """Wall-clock timer handed out by :func:`log_operation`.

    ``elapsed`` is in seconds and stays 0.0 until the operation finishes.
    """

    def __init__(self) -> None:
        self.elapsed = 0.0
        self._started = time.perf_counter()

    def stop(self) -> float:
        self.elapsed = time.perf_counter() - self._started
        return self.elapsed


@contextmanager
def log_operation(
    operation: str,
    details: dict[str, Any] | None = None,
) -> Generator[TimingContext, None, None]:
    """Log the start and end of an operation and time it.

    Args:
        operation: Name shown in the log lines.
        details: Optional ``key=value`` pairs appended to the start line.

    Yields:
        TimingContext whose ``elapsed`` is filled in on exit. Failures are
        logged at error level and re-raised.
    """
    suffix = "".join(f" {k}={v}" for k, v in (details or {}).items())
    logger.info("▶ Starting %s%s", operation, suffix)

    timing = TimingContext()
    try:
        yield timing
    except Exception as e:
        logger.error("✗ %s failed after %.2fs: %s", operation, timing.stop(), e)
        raise
    logger.info("✓ Completed %s in %.2fs", operation, timing.stop())


class ProgressBar:
    """tqdm bar on stderr, advanced by hand as tasks complete.

    When tqdm output is suppressed (non-TTY stderr or
    ``CONSTSCAN_DISABLE_PROGRESS``) a summary line is logged instead.
    ``disable=True`` silences both.
    """

    def __init__(
        self,
        total: int,
        desc: str | None = None,
        unit: str = "it",
        disable: bool = False,
    ):
        self.total = total
        self.label = desc or "Progress"
        self.unit = unit
        self.disable = disable
        self._pbar: Any = None
        self._done = 0
        self._started = 0.0

    def __enter__(self) -> "ProgressBar":
        self._started = time.perf_counter()
        if self.disable:
            return self
        if _DISABLE_PROGRESS:
            if self.total > 100:
                logger.info("  %s: processing %d %s...", self.label, self.total, self.unit)
        else:
            self._pbar = tqdm(
                total=self.total,
                desc=f"  {self.label}",
                unit=self.unit,
                file=sys.stderr,
                ncols=80,
                leave=False,
            )
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        if self._pbar is not None:
            self._pbar.close()
            return
        if self.disable:
            return
        took = time.perf_counter() - self._started
        logger.info(
            "  %s: completed %d/%d %s in %.2fs",
            self.label,
            self._done,
            self.total,
            self.unit,
            took,
        )

    def update(self, n: int = 1) -> None:
        """Mark ``n`` more items as done."""
        self._done += n
        if self._pbar is not None:
            self._pbar.update(n)
