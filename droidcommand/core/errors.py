"""Exception types raised by DroidCommand components."""

from __future__ import annotations


class DroidCommandError(RuntimeError):
    """Base class for DroidCommand errors."""


class ADBError(DroidCommandError):
    """Raised when an ADB-related error occurs."""


class SessionBusyError(DroidCommandError):
    """Raised when an instruction is submitted while another run is in progress."""


class ExecutionCancelled(DroidCommandError):
    """Raised inside the execution engine when a run is cancelled between provider calls."""
