"""DroidCommand structured logging system."""

from __future__ import annotations

import os
import sys
from typing import Any

from loguru import logger

from .config import config


class Logger:
    """Structured logging system for DroidCommand framework."""

    def __init__(self, name: str = "DroidCommand") -> None:
        """Initialize and configure a *Loguru* logger instance."""
        self.name = name
        self._setup_logger()

    def _setup_logger(self) -> None:
        """Configure the logger with proper formatting and handlers."""
        # Remove default handler
        logger.remove()

        # ------------------------------------------------------------------
        # Console handler
        # ------------------------------------------------------------------
        console_format = (
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level:<8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
            "<level>{message}</level>"
        )

        logger.add(
            sys.stderr,
            format=console_format,
            level=config.log_level,
            colorize=True,
        )

        if not config.log_to_file:
            return

        # ------------------------------------------------------------------
        # File handlers
        # ------------------------------------------------------------------
        logs_dir = config.log_dir
        os.makedirs(logs_dir, exist_ok=True)

        file_format = (
            "{time:YYYY-MM-DD HH:mm:ss} | {level:<8} | "
            "{name}:{function}:{line} | {message}"
        )

        logger.add(
            os.path.join(logs_dir, "droidcommand_{time:YYYY-MM-DD}.log"),
            format=file_format,
            level="DEBUG",
            rotation="1 day",
            retention="30 days",
            compression="zip",
        )

        # Separate error log
        logger.add(
            os.path.join(logs_dir, "errors_{time:YYYY-MM-DD}.log"),
            format=file_format,
            level="ERROR",
            rotation="1 day",
            retention="90 days",
            compression="zip",
        )

    def _log(self, level: str, message: str, **kwargs: Any) -> None:
        # depth=2 skips this frame and the public wrapper
        logger.opt(depth=2).log(level, f"[{self.name}] {message}", **kwargs)

    def info(self, message: str, **kwargs: Any) -> None:
        """Log info message."""
        self._log("INFO", message, **kwargs)

    def debug(self, message: str, **kwargs: Any) -> None:
        """Log debug message."""
        self._log("DEBUG", message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        """Log warning message."""
        self._log("WARNING", message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        """Log error message."""
        self._log("ERROR", message, **kwargs)

    def success(self, message: str, **kwargs: Any) -> None:
        """Log success message."""
        self._log("SUCCESS", message, **kwargs)

    def log_automation_step(self, step: str, details: dict[str, Any] | None = None) -> None:
        """Log automation step with details."""
        message = f"AUTOMATION STEP: {step}"
        if details:
            message += f" | Details: {details}"
        self._log("INFO", message)

    def log_plan(self, command: str, step_count: int) -> None:
        """Log the outcome of compiling an instruction."""
        if step_count:
            self._log("INFO", f"PLAN: {step_count} step(s) for {command!r}")
        else:
            self._log("WARNING", f"PLAN: no app recognised in {command!r}")

    def log_step_result(self, step_id: str, description: str, outcome: str) -> None:
        """Log the result of one executed step."""
        self._log("DEBUG", f"STEP {step_id}: {description} -> {outcome}")


# Global logger instance
log = Logger()
