"""Shared utilities and helpers."""
from shared.diagnostics import log_resource_usage, warn_if_canvas_too_large
from shared.progress import ConsoleProgress, SingleLineRenderer

__all__ = [
    'ConsoleProgress',
    'SingleLineRenderer',
    'log_resource_usage',
    'warn_if_canvas_too_large',
]
