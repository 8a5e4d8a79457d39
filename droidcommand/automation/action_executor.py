"""Action execution engine for Android automation."""

from __future__ import annotations

import asyncio
import time
from typing import Any, AsyncIterator, Awaitable, Callable, List, Optional

from ..core.config import Config, config
from ..core.errors import ExecutionCancelled
from ..core.logger import log
from ..core.models import (
    ActionResult,
    ActionType,
    Failure,
    FailureKind,
    Plan,
    Step,
    StepExecution,
    Success,
)
from ..providers.base import ProviderSource, UITreeProvider
from ..utils.helpers import cancellable_sleep, parse_duration_ms

SERVICE_NOT_ENABLED = "Accessibility service not enabled"
ALL_STEPS_COMPLETED = "All steps completed successfully"
EXECUTION_CANCELLED = "Execution cancelled"

StepObserver = Callable[[int, Step, ActionResult], None]
# Sleeps for the given seconds, returns True if cancelled while waiting
SleepFunc = Callable[[float, Optional[asyncio.Event]], Awaitable[bool]]


class PlanRun:
    """Single-use async iterator over the step executions of one plan run.

    After iteration ends, :attr:`result` holds the terminal result of the
    run: the first failure, or a generic success.
    """

    def __init__(self, executor: ActionExecutor, plan: Plan, cancel_event: Optional[asyncio.Event] = None):
        self.executor = executor
        self.plan = plan
        self.cancel_event = cancel_event
        self.result: Optional[ActionResult] = None
        self.executions: List[StepExecution] = []
        self._started = False

    def __aiter__(self) -> AsyncIterator[StepExecution]:
        if self._started:
            raise RuntimeError("A plan run can only be consumed once")
        self._started = True
        return self._run()

    async def _run(self) -> AsyncIterator[StepExecution]:
        if await asyncio.to_thread(self.executor.provider_source) is None:
            log.error(SERVICE_NOT_ENABLED)
            self.result = Failure(SERVICE_NOT_ENABLED, FailureKind.UNAVAILABLE)
            return

        total = len(self.plan)
        for index, step in enumerate(self.plan):
            if self.cancel_event is not None and self.cancel_event.is_set():
                log.warning(f"Run cancelled before step {index + 1}/{total}")
                self.result = Failure(EXECUTION_CANCELLED, FailureKind.CANCELLED)
                return

            log.info(f"Executing step {index + 1}/{total}: {step.description}")
            result = await self.executor.execute_step(step, self.cancel_event)
            execution = StepExecution(step=step, result=result, index=index)
            self.executions.append(execution)
            self.executor.action_history.append(execution)
            yield execution

            # If step failed, stop execution
            if isinstance(result, Failure):
                log.error(f"Step {index + 1}/{total} failed, stopping plan: {result.error}")
                self.result = result
                return

        log.success(f"Plan completed: {total} step(s)")
        self.result = Success(ALL_STEPS_COMPLETED)


class ActionExecutor:
    """Executes plan steps against a UI tree provider with bounded retries.

    Provider calls are blocking; each one runs in a worker thread so the
    event loop keeps serving while a step is in flight. Calls are awaited
    one at a time and never overlap.
    """

    def __init__(
        self,
        provider_source: ProviderSource,
        settings: Optional[Config] = None,
        sleep: Optional[SleepFunc] = None,
    ):
        """Initialize the action executor.

        Args:
            provider_source: Callable returning the active provider, or
                ``None`` when the facility is not available.
            settings: Retry configuration. Defaults to the global config.
            sleep: Cancellable sleep used for backoff and wait steps.
        """
        self.provider_source = provider_source
        self.settings = settings or config
        self.max_attempts = self.settings.step_retry_attempts
        self.retry_delay = self.settings.step_retry_delay
        self._sleep: SleepFunc = sleep or cancellable_sleep
        self.action_history: List[StepExecution] = []

    def iter_plan(self, plan: Plan, cancel_event: Optional[asyncio.Event] = None) -> PlanRun:
        """Return a single-use iterator that executes ``plan`` as it is consumed.

        Args:
            plan: Compiled plan to execute.
            cancel_event: Set to abort the run between provider calls.

        Returns:
            PlanRun whose ``result`` is filled in once iteration ends.
        """
        return PlanRun(self, plan, cancel_event)

    async def execute_plan(
        self,
        plan: Plan,
        on_step_complete: Optional[StepObserver] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> ActionResult:
        """Execute a plan step by step, stopping at the first failure.

        Args:
            plan: Compiled plan to execute.
            on_step_complete: Called with ``(index, step, result)`` right
                after each attempted step.
            cancel_event: Set to abort the run between provider calls.

        Returns:
            The first failure, or a generic success.
        """
        run = self.iter_plan(plan, cancel_event)
        async for execution in run:
            if on_step_complete is not None:
                on_step_complete(execution.index, execution.step, execution.result)
        return run.result

    async def execute_step(self, step: Step, cancel_event: Optional[asyncio.Event] = None) -> ActionResult:
        """Execute a single step.

        Args:
            step: Step to dispatch.
            cancel_event: Set to abort between retries or during waits.

        Returns:
            Result of the step. Faults raised while dispatching are returned
            as failures.
        """
        provider = await asyncio.to_thread(self.provider_source)
        if provider is None:
            return Failure(SERVICE_NOT_ENABLED, FailureKind.UNAVAILABLE)

        action_id = f"{step.action.value}_{int(time.time() * 1000)}"
        log.debug(f"Dispatching {action_id}: {step.target!r}")

        try:
            result = await self._dispatch(provider, step, cancel_event)
        except ExecutionCancelled:
            result = Failure(EXECUTION_CANCELLED, FailureKind.CANCELLED)
        except Exception as e:
            log.error(f"Error executing step {step.description!r}: {e}")
            result = Failure(f"Error: {e}", FailureKind.UNEXPECTED)

        log.log_step_result(action_id, step.description, _describe(result))
        return result

    async def _dispatch(
        self, provider: UITreeProvider, step: Step, cancel_event: Optional[asyncio.Event]
    ) -> ActionResult:
        action = step.action
        if action is ActionType.OPEN_APP:
            return await self._open_app(provider, step.target)
        if action is ActionType.FIND_ELEMENT:
            return await self._find_element(provider, step.target, cancel_event)
        if action is ActionType.CLICK:
            return await self._click_element(provider, step.target, cancel_event)
        if action is ActionType.TYPE_TEXT:
            return await self._type_text(provider, step.target, step.value or "", cancel_event)
        if action is ActionType.SEARCH:
            return await self._search(provider, step.value or "")
        if action is ActionType.WAIT:
            return await self._wait(parse_duration_ms(step.target, self.settings.default_wait_ms), cancel_event)
        if action is ActionType.NAVIGATE_BACK:
            return await self._navigate_back(provider)
        raise ValueError(f"Unsupported action: {action}")

    async def _open_app(self, provider: UITreeProvider, package_name: str) -> ActionResult:
        """Open an app by package name."""
        try:
            launched = await asyncio.to_thread(provider.launch_app, package_name)
        except Exception as e:
            return Failure(f"Failed to open app: {e}", FailureKind.ACTION_FAILED)
        if launched:
            return Success("Opened app")
        return Failure(f"App not installed: {package_name}", FailureKind.ACTION_FAILED)

    async def _find_element(
        self, provider: UITreeProvider, text: str, cancel_event: Optional[asyncio.Event]
    ) -> ActionResult:
        """Find an element on screen, polling until the retry budget runs out."""
        node = await self._poll(lambda: provider.find_by_text(text, exact_match=False), text, cancel_event)
        if node is not None:
            return Success(f"Found element: {text}")
        return Failure(f"Element not found: {text}", FailureKind.NOT_FOUND)

    async def _click_element(
        self, provider: UITreeProvider, text: str, cancel_event: Optional[asyncio.Event]
    ) -> ActionResult:
        """Find and click an element."""
        node = await self._poll(lambda: provider.find_by_text(text, exact_match=False), text, cancel_event)
        if node is None:
            return Failure(f"Element not found to click: {text}", FailureKind.NOT_FOUND)
        if await asyncio.to_thread(provider.click, node):
            return Success(f"Clicked: {text}")
        return Failure(f"Failed to click: {text}", FailureKind.ACTION_FAILED)

    async def _type_text(
        self, provider: UITreeProvider, field_hint: str, text: str, cancel_event: Optional[asyncio.Event]
    ) -> ActionResult:
        """Type text into the editable field matching ``field_hint``."""
        node = await self._poll(lambda: provider.find_editable(field_hint), field_hint, cancel_event)
        if node is None:
            return Failure(f"Input field not found: {field_hint}", FailureKind.NOT_FOUND)
        if await asyncio.to_thread(provider.set_text, node, text):
            return Success(f"Typed text: {text}")
        return Failure("Failed to type text", FailureKind.ACTION_FAILED)

    async def _search(self, provider: UITreeProvider, query: str) -> ActionResult:
        """Type into the search field; a single lookup, no retries."""
        search_field = await asyncio.to_thread(provider.find_editable, "search")
        if search_field is None:
            return Failure("Search field not found", FailureKind.NOT_FOUND)
        if await asyncio.to_thread(provider.set_text, search_field, query):
            return Success(f"Searched for: {query}")
        return Failure("Failed to search", FailureKind.ACTION_FAILED)

    async def _wait(self, milliseconds: int, cancel_event: Optional[asyncio.Event]) -> ActionResult:
        """Wait for the specified duration."""
        if await self._sleep(milliseconds / 1000, cancel_event):
            raise ExecutionCancelled(f"Cancelled during {milliseconds}ms wait")
        return Success(f"Waited {milliseconds}ms")

    async def _navigate_back(self, provider: UITreeProvider) -> ActionResult:
        if await asyncio.to_thread(provider.press_back):
            return Success("Navigated back")
        return Failure("Failed to navigate back", FailureKind.ACTION_FAILED)

    async def _poll(
        self, lookup: Callable[[], Any], label: str, cancel_event: Optional[asyncio.Event]
    ) -> Optional[Any]:
        """Run ``lookup`` until it returns a node or the attempts are exhausted.

        Raises:
            ExecutionCancelled: If cancelled while waiting between attempts.

        """
        for attempt in range(self.max_attempts):
            node = await asyncio.to_thread(lookup)
            if node is not None:
                return node

            if attempt < self.max_attempts - 1:
                log.debug(f"{label!r} not found, retrying ({attempt + 1}/{self.max_attempts})")
                if await self._sleep(self.retry_delay, cancel_event):
                    raise ExecutionCancelled(f"Cancelled while looking for {label!r}")
        return None

    def get_action_history(self) -> List[StepExecution]:
        """Get the history of executed steps."""
        return self.action_history.copy()

    def clear_history(self) -> None:
        """Clear the step execution history."""
        self.action_history.clear()


def _describe(result: ActionResult) -> str:
    if isinstance(result, Success):
        return f"ok ({result.message})"
    if isinstance(result, Failure):
        return f"failed [{result.kind.value}] {result.error}"
    return f"in progress ({result.status})"
