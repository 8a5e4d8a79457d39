"""Task planning and decomposition for Android automation."""

from __future__ import annotations

from types import MappingProxyType
from typing import List, Mapping, Optional

from ..core.config import config
from ..core.logger import log
from ..core.models import ActionType, Entities, Plan, Step
from .command_parser import CommandParser

APP_LOAD_WAIT_MS = 2000
SEARCH_RESULTS_WAIT_MS = 1500
CONVERSATION_OPEN_WAIT_MS = 1000
VIDEO_RESULTS_WAIT_MS = 2000

# App-specific control that opens a new conversation before contact search.
# Each entry is (target, find description, click description).
CONVERSATION_OPENERS: Mapping[str, tuple[str, str, str]] = MappingProxyType({
    "whatsapp": ("New chat", "Finding new chat button", "Opening new chat"),
    "google chat": ("Start chat", "Finding start chat button", "Starting new chat"),
})

# Apps with a search-and-open template, mapped to the result noun used in
# step descriptions.
SEARCH_TEMPLATES: Mapping[str, str] = MappingProxyType({
    "youtube": "video",
})


class TaskPlanner:
    """Compiles instructions into ordered plans of atomic steps."""

    def __init__(self, parser: Optional[CommandParser] = None, default_message: Optional[str] = None):
        """Initialize the task planner.

        Args:
            parser: Entity extractor. A default :class:`CommandParser` is
                created when omitted.
            default_message: Message sent when the instruction names none.
        """
        self.parser = parser or CommandParser()
        self.default_message = default_message or config.default_message

    def plan_task(self, command: str) -> Plan:
        """Plan a task by decomposing it into executable steps.

        Args:
            command: Natural language instruction.

        Returns:
            Ordered plan. Empty when no registered app is named.
        """
        log.info(f"Planning task: {command}")

        entities = self.parser.parse(command)
        if entities.package_name is None:
            log.log_plan(command, 0)
            return Plan(command=command)

        steps = self._generate_open_steps(entities)

        # Message-sending is checked before searching
        if entities.is_send_message:
            steps.extend(self._generate_message_steps(entities))
        elif entities.is_search:
            steps.extend(self._generate_search_steps(entities))

        log.log_plan(command, len(steps))
        return Plan(command=command, steps=tuple(steps))

    def _generate_open_steps(self, entities: Entities) -> List[Step]:
        """Generate the launch prefix shared by every plan."""
        display_name = self.parser.get_display_name(entities.app_name)
        return [
            Step(ActionType.OPEN_APP, entities.package_name, description=f"Opening {display_name}"),
            Step(ActionType.WAIT, str(APP_LOAD_WAIT_MS), description="Waiting for app to load"),
        ]

    def _generate_message_steps(self, entities: Entities) -> List[Step]:
        """Generate actions for sending a message to a contact."""
        contact = entities.contact_name
        if contact is None:
            log.warning("Message command without a recognisable contact, stopping after app launch")
            return []

        message = entities.message_content or self.default_message
        steps: List[Step] = []

        opener = CONVERSATION_OPENERS.get(entities.app_name.lower())
        if opener is not None:
            target, find_description, click_description = opener
            steps.append(Step(ActionType.FIND_ELEMENT, target, description=find_description))
            steps.append(Step(ActionType.CLICK, target, description=click_description))

        steps.extend([
            Step(ActionType.FIND_ELEMENT, "Search", description="Finding search field"),
            Step(ActionType.TYPE_TEXT, "Search", value=contact, description=f"Searching for {contact}"),
            Step(ActionType.WAIT, str(SEARCH_RESULTS_WAIT_MS), description="Waiting for search results"),
            Step(ActionType.FIND_ELEMENT, contact, description=f"Finding contact {contact}"),
            Step(ActionType.CLICK, contact, description=f"Opening chat with {contact}"),
            Step(ActionType.WAIT, str(CONVERSATION_OPEN_WAIT_MS), description="Waiting for chat to open"),
            Step(ActionType.FIND_ELEMENT, "message", description="Finding message input"),
            Step(ActionType.TYPE_TEXT, "message", value=message, description=f"Typing message: {message}"),
            Step(ActionType.FIND_ELEMENT, "Send", description="Finding send button"),
            Step(ActionType.CLICK, "Send", description="Sending message"),
        ])
        return steps

    def _generate_search_steps(self, entities: Entities) -> List[Step]:
        """Generate actions for searching and opening content."""
        query = entities.search_query
        if query is None:
            log.warning("Search command without a recognisable query, stopping after app launch")
            return []

        result_noun = SEARCH_TEMPLATES.get(entities.app_name.lower())
        if result_noun is None:
            log.warning(f"No search template for {entities.app_name}, stopping after app launch")
            return []

        field_hint = f"Search {self.parser.get_display_name(entities.app_name)}"
        return [
            Step(ActionType.FIND_ELEMENT, "Search", description="Finding search button"),
            Step(ActionType.CLICK, "Search", description="Opening search"),
            Step(ActionType.FIND_ELEMENT, field_hint, description="Finding search field"),
            Step(ActionType.TYPE_TEXT, field_hint, value=query, description=f"Searching for: {query}"),
            Step(ActionType.WAIT, str(VIDEO_RESULTS_WAIT_MS), description="Waiting for search results"),
            Step(ActionType.FIND_ELEMENT, query, description=f"Finding {result_noun}"),
            Step(ActionType.CLICK, query, description=f"Opening {result_noun}"),
        ]
