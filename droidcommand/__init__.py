"""DroidCommand: compile free-text instructions into Android UI automation plans."""

__version__ = "0.1.0"
