"""Data models shared by the plan compiler and the execution engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Union


class ActionType(Enum):
    """Closed set of atomic automation actions."""
    OPEN_APP = "open_app"
    FIND_ELEMENT = "find_element"
    CLICK = "click"
    TYPE_TEXT = "type_text"
    SEARCH = "search"
    WAIT = "wait"
    NAVIGATE_BACK = "navigate_back"


class FailureKind(Enum):
    """Error taxonomy for failed steps and rejected instructions."""
    UNRESOLVED = "unresolved"        # app or intent could not be determined
    NOT_FOUND = "not_found"          # element never appeared within the retry budget
    ACTION_FAILED = "action_failed"  # element located but the provider rejected the action
    UNAVAILABLE = "unavailable"      # UI tree provider is not active
    UNEXPECTED = "unexpected"        # fault raised while dispatching a step
    CANCELLED = "cancelled"


@dataclass(frozen=True, slots=True)
class Step:
    """One atomic automation instruction.

    ``target`` depends on ``action``: a package name for ``OPEN_APP``, a
    millisecond count for ``WAIT``, the text or field hint to look for
    otherwise. ``description`` is for observability only.
    """

    action: ActionType
    target: str
    value: Optional[str] = None
    description: str = ""


@dataclass(frozen=True, slots=True)
class Plan:
    """Ordered, immutable sequence of steps compiled from one instruction."""

    command: str
    steps: tuple[Step, ...] = field(default_factory=tuple)

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[Step]:
        return iter(self.steps)

    def __getitem__(self, index: int) -> Step:
        return self.steps[index]

    @property
    def is_empty(self) -> bool:
        """True when the instruction could not be understood."""
        return not self.steps


@dataclass(frozen=True, slots=True)
class Entities:
    """Facts extracted from a single instruction."""

    app_name: Optional[str] = None
    package_name: Optional[str] = None
    contact_name: Optional[str] = None
    message_content: Optional[str] = None
    search_query: Optional[str] = None
    is_send_message: bool = False
    is_search: bool = False


@dataclass(frozen=True, slots=True)
class Success:
    """Step or run completed."""

    message: str = "Action completed successfully"

    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Failure:
    """Step or run failed; terminal for the containing plan run."""

    error: str
    kind: FailureKind = FailureKind.UNEXPECTED

    @property
    def ok(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class InProgress:
    """Intermediate status report."""

    status: str

    @property
    def ok(self) -> bool:
        return False


ActionResult = Union[Success, Failure, InProgress]


@dataclass(frozen=True, slots=True)
class StepExecution:
    """A step paired with its result and 0-based position in the plan."""

    step: Step
    result: ActionResult
    index: int

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly representation."""
        return {
            "index": self.index,
            **step_to_dict(self.step),
            "result": result_to_dict(self.result),
        }


def step_to_dict(step: Step) -> dict[str, object]:
    """Return a JSON-friendly representation of a step."""
    return {
        "action": step.action.value,
        "target": step.target,
        "value": step.value,
        "description": step.description,
    }


def result_to_dict(result: ActionResult) -> dict[str, object]:
    """Return a JSON-friendly representation of an action result."""
    if isinstance(result, Success):
        return {"status": "success", "message": result.message}
    if isinstance(result, Failure):
        return {"status": "failure", "message": result.error, "kind": result.kind.value}
    return {"status": "in_progress", "message": result.status}
