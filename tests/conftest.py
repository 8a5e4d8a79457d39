import asyncio
from typing import List, Optional

import pytest

from droidcommand.automation.action_executor import ActionExecutor
from droidcommand.automation.session import CommandSession
from droidcommand.automation.task_planner import TaskPlanner
from droidcommand.core.config import Config
from droidcommand.providers.base import static_source
from droidcommand.providers.memory import StaticTreeProvider
from droidcommand.providers.tree import UINode


class SleepRecorder:
    """Stand-in for the engine's cancellable sleep that returns immediately."""

    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, seconds: float, cancel_event: Optional[asyncio.Event] = None) -> bool:
        self.delays.append(seconds)
        return cancel_event is not None and cancel_event.is_set()


def chat_screen() -> UINode:
    """Messaging app screen holding every control the message template touches."""
    return UINode(class_name="android.widget.FrameLayout", children=[
        UINode(content_desc="New chat", clickable=True, bounds=(900, 80, 1000, 180)),
        UINode(content_desc="Start chat", clickable=True, bounds=(900, 200, 1000, 300)),
        UINode(class_name="androidx.recyclerview.widget.RecyclerView", scrollable=True, children=[
            UINode(text="Crazy", clickable=True, bounds=(0, 400, 1080, 520)),
        ]),
        UINode(content_desc="Search", hint="Search name or number", editable=True, clickable=True,
               class_name="android.widget.EditText", bounds=(0, 200, 880, 300)),
        UINode(content_desc="Type a message", hint="Message", editable=True, clickable=True,
               class_name="android.widget.EditText", bounds=(0, 1700, 900, 1800)),
        UINode(content_desc="Send", clickable=True, bounds=(920, 1700, 1060, 1800)),
    ])


def video_screen() -> UINode:
    """Video app screen with a search button, a result and the search field."""
    return UINode(class_name="android.widget.FrameLayout", children=[
        UINode(content_desc="Search", clickable=True, bounds=(900, 80, 1000, 180)),
        UINode(text="Despacito", clickable=True, bounds=(0, 400, 1080, 700)),
        UINode(content_desc="Search YouTube", hint="Search YouTube", editable=True, clickable=True,
               class_name="android.widget.EditText", bounds=(0, 80, 880, 180)),
    ])


@pytest.fixture
def settings() -> Config:
    return Config(step_retry_attempts=5, step_retry_delay_ms=500, default_wait_ms=1000)


@pytest.fixture
def sleep() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def planner() -> TaskPlanner:
    return TaskPlanner(default_message="Hi")


@pytest.fixture
def chat_provider() -> StaticTreeProvider:
    return StaticTreeProvider(chat_screen())


@pytest.fixture
def video_provider() -> StaticTreeProvider:
    return StaticTreeProvider(video_screen())


def make_executor(provider, settings: Config, sleep: SleepRecorder) -> ActionExecutor:
    return ActionExecutor(static_source(provider), settings=settings, sleep=sleep)


def make_session(provider, settings: Config, sleep: SleepRecorder) -> CommandSession:
    return CommandSession(TaskPlanner(default_message="Hi"), make_executor(provider, settings, sleep))
