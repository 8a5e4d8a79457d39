"""Instruction compilation and plan execution.

This sub-package provides the core automation capabilities including:
- Entity extraction from free-text instructions
- Plan compilation from per-app step templates
- Step execution with bounded retries and cancellation
- Run state tracking for presentation layers
"""

from .action_executor import ActionExecutor, PlanRun
from .command_parser import CommandParser
from .session import CommandSession, SessionState, SessionStatus
from .task_planner import TaskPlanner

__all__ = [
    "ActionExecutor",
    "CommandParser",
    "CommandSession",
    "PlanRun",
    "SessionState",
    "SessionStatus",
    "TaskPlanner",
]
