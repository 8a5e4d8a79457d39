"""UI tree providers consumed by the execution engine.

This sub-package provides:
- The capability interface the engine calls
- A node tree model with depth-first search
- An in-memory provider for dry runs and tests
- An ADB provider for real devices
"""

from typing import Optional

from ..core.config import config
from .adb import AdbProviderSource, AdbTreeProvider
from .base import ProviderSource, UITreeProvider, static_source
from .device import Device
from .memory import StaticTreeProvider
from .tree import UINode, parse_hierarchy


def get_provider_source(backend: Optional[str] = None) -> ProviderSource:
    """Return the provider source for a configured backend name."""
    backend = backend or config.provider_backend
    if backend == "adb":
        return AdbProviderSource()
    if backend == "none":
        return static_source(None)
    raise ValueError(f"Unknown provider backend: {backend}")


__all__ = [
    "AdbProviderSource",
    "AdbTreeProvider",
    "Device",
    "ProviderSource",
    "StaticTreeProvider",
    "UINode",
    "UITreeProvider",
    "get_provider_source",
    "parse_hierarchy",
    "static_source",
]
