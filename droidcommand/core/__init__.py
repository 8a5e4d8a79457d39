"""Core components of the DroidCommand framework."""

from .config import Config, config
from .logger import Logger, log

__all__ = [
    "Config",
    "Logger",
    "config",
    "log",
]
