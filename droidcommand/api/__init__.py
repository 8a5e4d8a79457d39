"""FastAPI endpoints for DroidCommand framework.

This sub-package provides REST API endpoints for:
- Entity extraction and plan compilation
- Instruction execution
- Run status, cancellation and reset
"""

from .app import create_app
from .routes import command_router

__all__ = [
    "create_app",
    "command_router",
]
