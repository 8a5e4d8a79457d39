"""Utility functions for DroidCommand framework."""

from .helpers import cancellable_sleep, parse_duration_ms

__all__ = [
    "cancellable_sleep",
    "parse_duration_ms",
]
