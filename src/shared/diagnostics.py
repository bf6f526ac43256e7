"""
Diagnostic utilities.

Resource snapshots (process memory, open file handles) logged around the
heavy phases of a mosaic run: mass cache lookups and canvas composition.
"""

import logging
from dataclasses import dataclass

import psutil

from shared.constants import CANVAS_CHANNELS

logger = logging.getLogger(__name__)

_MB = 1024 * 1024


@dataclass(frozen=True)
class ResourceSnapshot:
    """Point-in-time process resources; None where psutil could not tell."""

    rss_mb: float | None = None
    available_mb: float | None = None
    open_files: int | None = None


def take_snapshot() -> ResourceSnapshot:
    try:
        process = psutil.Process()
        rss = process.memory_info().rss
        available = psutil.virtual_memory().available
    except psutil.Error as e:
        logger.debug('Failed to get memory info: %s', e)
        return ResourceSnapshot()

    try:
        open_files = len(process.open_files())
    except psutil.Error as e:
        logger.debug('Failed to get open files: %s', e)
        open_files = None

    return ResourceSnapshot(
        rss_mb=round(rss / _MB, 2),
        available_mb=round(available / _MB, 2),
        open_files=open_files,
    )


def log_resource_usage(context: str = '') -> ResourceSnapshot:
    """Log a snapshot at DEBUG and return it."""
    snapshot = take_snapshot()
    context_label = f' ({context})' if context else ''
    logger.debug(
        'Resources%s: RSS=%sMB, Available=%sMB, Open files=%s',
        context_label,
        'N/A' if snapshot.rss_mb is None else snapshot.rss_mb,
        'N/A' if snapshot.available_mb is None else snapshot.available_mb,
        'N/A' if snapshot.open_files is None else snapshot.open_files,
    )
    return snapshot


def canvas_bytes(width: int, height: int) -> int:
    return width * height * CANVAS_CHANNELS


def warn_if_canvas_too_large(width: int, height: int) -> bool:
    """
    Warn when the canvas would not fit into currently available memory.

    Returns True when a warning was issued. The run is not stopped: the
    allocation itself decides.
    """
    needed_mb = canvas_bytes(width, height) / _MB
    available_mb = take_snapshot().available_mb
    if available_mb is None or needed_mb <= available_mb:
        return False
    logger.warning(
        'Canvas %dx%d needs %.0fMB but only %.0fMB are available',
        width,
        height,
        needed_mb,
        available_mb,
    )
    return True
