"""Run state tracking for one instruction at a time."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from ..core.errors import SessionBusyError
from ..core.logger import log
from ..core.models import ActionResult, Failure, FailureKind, Plan, Step, StepExecution
from .action_executor import ActionExecutor, StepObserver
from .task_planner import TaskPlanner

COULD_NOT_UNDERSTAND = "Could not understand command. Please try again."
EMPTY_COMMAND = "Command is empty"


class SessionStatus(Enum):
    """Lifecycle of a submitted instruction."""
    IDLE = "idle"
    PARSING = "parsing"
    EXECUTING = "executing"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True, slots=True)
class SessionState:
    """Snapshot of the session shown to a presentation layer."""

    status: SessionStatus = SessionStatus.IDLE
    current_step: int = 0
    total_steps: int = 0
    current_description: str = ""
    message: Optional[str] = None

    def to_dict(self) -> dict[str, object]:
        return {
            "status": self.status.value,
            "current_step": self.current_step,
            "total_steps": self.total_steps,
            "current_description": self.current_description,
            "message": self.message,
        }


class CommandSession:
    """Compiles and runs one instruction at a time and tracks its progress.

    Single-flight is enforced here, not in the engine: submitting while a
    run is in progress raises :class:`SessionBusyError`.
    """

    def __init__(self, planner: TaskPlanner, executor: ActionExecutor):
        self.planner = planner
        self.executor = executor
        self.state = SessionState()
        self.plan: Optional[Plan] = None
        self.executed_steps: List[StepExecution] = []
        self.last_result: Optional[ActionResult] = None
        self._cancel_event: Optional[asyncio.Event] = None
        self._running = False

    @property
    def is_running(self) -> bool:
        """True while a plan is being executed."""
        return self._running

    async def submit(self, command: str, on_step_complete: Optional[StepObserver] = None) -> ActionResult:
        """Compile and execute an instruction.

        Args:
            command: Raw instruction text.
            on_step_complete: Extra observer called after each step.

        Returns:
            Terminal result of the run. A blank instruction, or one that
            compiles to an empty plan, yields an ``UNRESOLVED`` failure
            without executing. A blank instruction leaves the state untouched.

        Raises:
            SessionBusyError: If another run is in progress.
        """
        if self._running:
            raise SessionBusyError("A command is already running")

        if not command.strip():
            log.debug("Ignoring blank command")
            return Failure(EMPTY_COMMAND, FailureKind.UNRESOLVED)

        self._running = True
        self._cancel_event = asyncio.Event()
        try:
            self.executed_steps = []
            self.state = SessionState(status=SessionStatus.PARSING)

            plan = self.planner.plan_task(command)
            self.plan = plan
            if plan.is_empty:
                self.state = SessionState(status=SessionStatus.ERROR, message=COULD_NOT_UNDERSTAND)
                self.last_result = Failure(COULD_NOT_UNDERSTAND, FailureKind.UNRESOLVED)
                return self.last_result

            self.state = SessionState(
                status=SessionStatus.EXECUTING,
                current_step=0,
                total_steps=len(plan),
                current_description=plan[0].description,
            )

            def observe(index: int, step: Step, result: ActionResult) -> None:
                self.executed_steps.append(StepExecution(step=step, result=result, index=index))
                if index < len(plan) - 1 and not isinstance(result, Failure):
                    self.state = SessionState(
                        status=SessionStatus.EXECUTING,
                        current_step=index + 1,
                        total_steps=len(plan),
                        current_description=plan[index + 1].description,
                    )
                if on_step_complete is not None:
                    on_step_complete(index, step, result)

            result = await self.executor.execute_plan(plan, observe, self._cancel_event)
            self.last_result = result
            if isinstance(result, Failure):
                self.state = SessionState(
                    status=SessionStatus.ERROR,
                    current_step=len(self.executed_steps),
                    total_steps=len(plan),
                    message=result.error,
                )
            else:
                self.state = SessionState(
                    status=SessionStatus.SUCCESS,
                    current_step=len(plan),
                    total_steps=len(plan),
                    message=result.message,
                )
            return result
        finally:
            self._running = False
            self._cancel_event = None

    def cancel(self) -> bool:
        """Ask the running plan to stop at its next suspension point.

        Returns:
            True if a run was in progress.
        """
        if not self._running or self._cancel_event is None:
            return False
        log.warning("Cancellation requested for running command")
        self._cancel_event.set()
        return True

    def reset(self) -> None:
        """Return to the idle state.

        Raises:
            SessionBusyError: If a run is in progress.
        """
        if self._running:
            raise SessionBusyError("Cannot reset while a command is running")
        self.state = SessionState()
        self.plan = None
        self.executed_steps = []
        self.last_result = None
