import dataclasses

import pytest

from droidcommand.automation.command_parser import APP_PACKAGES
from droidcommand.automation.task_planner import TaskPlanner
from droidcommand.core.models import ActionType, Step

A = ActionType

MESSAGE_BODY = [
    (A.FIND_ELEMENT, "Search"),
    (A.TYPE_TEXT, "Search"),
    (A.WAIT, "1500"),
    (A.FIND_ELEMENT, "Crazy"),
    (A.CLICK, "Crazy"),
    (A.WAIT, "1000"),
    (A.FIND_ELEMENT, "message"),
    (A.TYPE_TEXT, "message"),
    (A.FIND_ELEMENT, "Send"),
    (A.CLICK, "Send"),
]


def shape(plan):
    return [(step.action, step.target) for step in plan]


def test_whatsapp_message_plan(planner: TaskPlanner):
    plan = planner.plan_task("Open WhatsApp and send message to Crazy")
    assert len(plan) == 14
    assert shape(plan) == [
        (A.OPEN_APP, "com.whatsapp"),
        (A.WAIT, "2000"),
        (A.FIND_ELEMENT, "New chat"),
        (A.CLICK, "New chat"),
    ] + MESSAGE_BODY
    assert plan[0].description == "Opening WhatsApp"
    assert plan[5].value == "Crazy"
    assert plan[11].value == "Hi"


def test_message_plan_uses_extracted_message(planner: TaskPlanner):
    plan = planner.plan_task('Open WhatsApp and send message to Crazy saying "running late"')
    assert plan[11].value == "running late"
    assert plan[11].description == "Typing message: running late"


def test_message_plan_cue_after_contact(planner: TaskPlanner):
    plan = planner.plan_task("Open WhatsApp and send message to Crazy saying hello there")
    assert len(plan) == 14
    assert plan[5].value == "Crazy"
    assert plan[11].value == "hello there"


def test_google_chat_uses_start_chat_opener(planner: TaskPlanner):
    plan = planner.plan_task("Open Google Chat and send message to Crazy")
    assert plan[0].target == "com.google.android.apps.dynamite"
    assert shape(plan)[2:4] == [(A.FIND_ELEMENT, "Start chat"), (A.CLICK, "Start chat")]
    assert len(plan) == 14


def test_app_without_opener_skips_the_pair(planner: TaskPlanner):
    plan = planner.plan_task("Open Telegram and send message to Crazy")
    assert len(plan) == 12
    assert shape(plan)[2:] == MESSAGE_BODY


def test_message_without_contact_degrades_to_launch(planner: TaskPlanner):
    plan = planner.plan_task("open whatsapp and send a message")
    assert shape(plan) == [(A.OPEN_APP, "com.whatsapp"), (A.WAIT, "2000")]


def test_youtube_search_plan(planner: TaskPlanner):
    plan = planner.plan_task("Search for Despacito on YouTube and play")
    assert shape(plan) == [
        (A.OPEN_APP, "com.google.android.youtube"),
        (A.WAIT, "2000"),
        (A.FIND_ELEMENT, "Search"),
        (A.CLICK, "Search"),
        (A.FIND_ELEMENT, "Search YouTube"),
        (A.TYPE_TEXT, "Search YouTube"),
        (A.WAIT, "2000"),
        (A.FIND_ELEMENT, "Despacito"),
        (A.CLICK, "Despacito"),
    ]
    assert plan[5].value == "Despacito"


def test_search_on_app_without_template_degrades(planner: TaskPlanner):
    plan = planner.plan_task("Open Spotify and play Bohemian Rhapsody")
    assert len(plan) == 2


def test_message_intent_checked_before_search(planner: TaskPlanner):
    plan = planner.plan_task("Open YouTube, find Crazy and send message to Crazy")
    assert len(plan) == 12
    assert shape(plan)[2:] == MESSAGE_BODY


def test_plain_launch(planner: TaskPlanner):
    plan = planner.plan_task("open maps")
    assert shape(plan) == [(A.OPEN_APP, "com.google.android.apps.maps"), (A.WAIT, "2000")]


def test_unrecognised_command_gives_empty_plan(planner: TaskPlanner):
    plan = planner.plan_task("do something random")
    assert plan.is_empty
    assert len(plan) == 0


@pytest.mark.parametrize("app_name,package", list(APP_PACKAGES.items()))
def test_first_step_opens_registered_package(planner: TaskPlanner, app_name: str, package: str):
    plan = planner.plan_task(f"please open {app_name.upper()} now")
    assert plan[0] == Step(A.OPEN_APP, package, description=plan[0].description)


def test_steps_are_immutable(planner: TaskPlanner):
    plan = planner.plan_task("open gmail")
    with pytest.raises(dataclasses.FrozenInstanceError):
        plan[0].target = "com.evil"
