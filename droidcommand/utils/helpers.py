"""Helper utility functions for DroidCommand framework."""

from __future__ import annotations

import asyncio
from typing import Optional

from ..core.logger import log


async def cancellable_sleep(seconds: float, cancel_event: Optional[asyncio.Event] = None) -> bool:
    """Sleep for ``seconds`` unless ``cancel_event`` is set first.

    Args:
        seconds: Time to wait in seconds.
        cancel_event: Event that interrupts the wait when set.

    Returns:
        True if the wait was interrupted by cancellation, False otherwise.
    """
    if cancel_event is None:
        await asyncio.sleep(seconds)
        return False

    if cancel_event.is_set():
        return True

    try:
        await asyncio.wait_for(cancel_event.wait(), timeout=seconds)
    except asyncio.TimeoutError:
        return False

    log.debug(f"Wait of {seconds:.2f}s interrupted by cancellation")
    return True


def parse_duration_ms(value: str, default: int) -> int:
    """Parse a millisecond count, falling back to ``default``.

    Args:
        value: Text expected to hold a non-negative integer.
        default: Value used when parsing fails.

    Returns:
        Parsed milliseconds or ``default``.
    """
    try:
        duration = int(value.strip())
    except (AttributeError, ValueError):
        return default
    return duration if duration >= 0 else default
