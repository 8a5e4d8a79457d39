"""Entity extraction from free-text automation instructions."""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Mapping, Optional

from ..core.logger import log
from ..core.models import Entities

# Known apps in scan order. The first name found as a substring of the
# instruction wins, so entries earlier in the table shadow later ones.
APP_PACKAGES: Mapping[str, str] = MappingProxyType({
    "whatsapp": "com.whatsapp",
    "youtube": "com.google.android.youtube",
    "google chat": "com.google.android.apps.dynamite",
    "gmail": "com.google.android.gm",
    "chrome": "com.android.chrome",
    "maps": "com.google.android.apps.maps",
    "instagram": "com.instagram.android",
    "facebook": "com.facebook.katana",
    "twitter": "com.twitter.android",
    "telegram": "org.telegram.messenger",
    "spotify": "com.spotify.music",
    "netflix": "com.netflix.mediaclient",
})

APP_DISPLAY_NAMES: Mapping[str, str] = MappingProxyType({
    "whatsapp": "WhatsApp",
    "youtube": "YouTube",
    "google chat": "Google Chat",
    "gmail": "Gmail",
    "chrome": "Chrome",
    "maps": "Maps",
    "instagram": "Instagram",
    "facebook": "Facebook",
    "twitter": "Twitter",
    "telegram": "Telegram",
    "spotify": "Spotify",
    "netflix": "Netflix",
})

# Cue words match in any case, the captured name must be capitalized.
CONTACT_PATTERNS = (
    re.compile(r"\b(?i:message\s+to|to|find|message|contact)\s+([A-Z][A-Za-z]*)"),
    re.compile(r"\b(?i:send)\s+(?i:message\s+)?(?i:to\s+)?([A-Z][A-Za-z]*)"),
)

QUOTED_PATTERN = re.compile(r"([\"'])(.+?)\1")

MESSAGE_PATTERNS = (
    re.compile(r"\bsend\s+(?:him|her|them)\s+(.+)", re.IGNORECASE),
    # the cue may follow the contact clause: "message to Crazy saying hi"
    re.compile(r"\bmessage\b.*?\b(?:saying|with)\s+(.+)", re.IGNORECASE),
)

SEARCH_PATTERN = re.compile(r"\b(?:search|find|play|look\s+for)\s+(?:for\s+)?(.+)", re.IGNORECASE)

# Applied in order to the raw search capture
SEARCH_CLEANUP_PATTERNS = (
    re.compile(r"\s+(?:and|then)\s+(?:look|open|play|watch|start)\b.*$", re.IGNORECASE),
    re.compile(r"\s+(?:on|in)\s+\w+$", re.IGNORECASE),
)

SEND_MESSAGE_CUES = ("send", "message", "text")
SEARCH_CUES = ("search", "find", "play", "look for")


class CommandParser:
    """Extracts app, contact, message and search entities from instructions.

    Every ``extract_*`` method returns ``None`` when nothing matches; none of
    them raise on arbitrary input.
    """

    def __init__(self, app_packages: Optional[Mapping[str, str]] = None):
        """Initialize the parser.

        Args:
            app_packages: Ordered app name to package table. Defaults to
                :data:`APP_PACKAGES`.
        """
        self.app_packages = app_packages if app_packages is not None else APP_PACKAGES

    def parse(self, command: str) -> Entities:
        """Extract every entity from an instruction.

        Args:
            command: Raw instruction text.

        Returns:
            Entities record. ``message_content`` is not defaulted here.
        """
        app_name = self.extract_app_name(command)
        entities = Entities(
            app_name=app_name,
            package_name=self.get_package_name(app_name) if app_name else None,
            contact_name=self.extract_contact_name(command),
            message_content=self.extract_message_content(command),
            search_query=self.extract_search_query(command),
            is_send_message=self.is_send_message_command(command),
            is_search=self.is_search_command(command),
        )
        log.debug(f"Extracted entities from {command!r}: {entities}")
        return entities

    def extract_app_name(self, command: str) -> Optional[str]:
        """Return the first registered app name contained in the command."""
        lower_command = command.lower()
        for app_name in self.app_packages:
            if app_name in lower_command:
                return app_name
        return None

    def get_package_name(self, app_name: str) -> Optional[str]:
        """Return the package name registered for an app, if any."""
        return self.app_packages.get(app_name.lower())

    def get_display_name(self, app_name: str) -> str:
        """Return the branded label for an app, falling back to title case."""
        return APP_DISPLAY_NAMES.get(app_name.lower(), app_name.title())

    def extract_contact_name(self, command: str) -> Optional[str]:
        """Extract a contact name following a cue word.

        Looks for patterns like "to Crazy", "message Alice", "contact Bob"
        or "send John".
        """
        for pattern in CONTACT_PATTERNS:
            match = pattern.search(command)
            if match:
                return match.group(1)
        return None

    def extract_message_content(self, command: str) -> Optional[str]:
        """Extract message text, preferring quoted text over cue phrases."""
        quoted = self._extract_quoted(command)
        if quoted is not None:
            return quoted

        for pattern in MESSAGE_PATTERNS:
            match = pattern.search(command)
            if match:
                content = match.group(1).strip()
                if content:
                    return content
        return None

    def extract_search_query(self, command: str) -> Optional[str]:
        """Extract a search query, preferring quoted text over cue phrases.

        A trailing "and play ..." clause and a trailing "on <app>" clause are
        stripped from cue-based captures.
        """
        quoted = self._extract_quoted(command)
        if quoted is not None:
            return quoted

        match = SEARCH_PATTERN.search(command)
        if not match:
            return None

        query = match.group(1).strip()
        for cleanup in SEARCH_CLEANUP_PATTERNS:
            query = cleanup.sub("", query).strip()
        return query or None

    def is_send_message_command(self, command: str) -> bool:
        """Detect if command involves sending a message."""
        lower_command = command.lower()
        return any(cue in lower_command for cue in SEND_MESSAGE_CUES)

    def is_search_command(self, command: str) -> bool:
        """Detect if command involves searching."""
        lower_command = command.lower()
        return any(cue in lower_command for cue in SEARCH_CUES)

    def _extract_quoted(self, command: str) -> Optional[str]:
        match = QUOTED_PATTERN.search(command)
        if match:
            return match.group(2)
        return None
