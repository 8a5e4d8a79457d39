"""UI tree provider backed by ``adb`` and ``uiautomator``.

The window hierarchy is dumped with ``uiautomator dump`` and parsed into
:class:`~droidcommand.providers.tree.UINode` trees; actions are sent with
``input`` and ``monkey``.
"""

from __future__ import annotations

import re
import shlex
from typing import Optional

from ..core.config import config
from ..core.errors import ADBError
from ..core.logger import log
from . import tree
from .device import Device
from .tree import UINode

DUMP_PATH = "/sdcard/window_dump.xml"
KEYCODE_BACK = 4
KEYCODE_MOVE_END = 123
KEYCODE_DEL = 67


class AdbTreeProvider:
    """Implements the UI tree capability interface for one ADB device."""

    def __init__(self, device: Device) -> None:
        """Initialize the provider.

        Args:
            device: Connected device wrapper used for every shell call.
        """
        self.device = device
        self._screen_size: Optional[tuple[int, int]] = None

    # ------------------------------------------------------------------
    # Tree queries
    # ------------------------------------------------------------------
    def dump_tree(self) -> UINode:
        """Dump and parse the current window hierarchy.

        Raises:
            ADBError: If the dump fails or cannot be parsed.

        """
        self.device.shell(f"uiautomator dump {DUMP_PATH}")
        xml = self.device.shell(f"cat {DUMP_PATH}")
        try:
            return tree.parse_hierarchy(xml)
        except ValueError as e:
            raise ADBError(str(e)) from e

    def find_by_text(self, text: str, exact_match: bool = False) -> Optional[UINode]:
        return tree.find_by_text(self.dump_tree(), text, exact_match)

    def find_editable(self, hint: Optional[str] = None) -> Optional[UINode]:
        return tree.find_editable(self.dump_tree(), hint)

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def click(self, node: UINode) -> bool:
        center = node.center()
        if center is None:
            log.warning("Cannot click a node without bounds")
            return False
        x, y = center
        self.device.shell(f"input tap {x} {y}")
        log.log_automation_step(f"Tap at ({x}, {y})", {"text": node.text or node.content_desc})
        return True

    def set_text(self, node: UINode, text: str) -> bool:
        # Focus the field, then clear what is already there
        if not self.click(node):
            return False
        self.device.shell(f"input keyevent {KEYCODE_MOVE_END}")
        for _ in range(len(node.text)):
            self.device.shell(f"input keyevent {KEYCODE_DEL}")

        # `input text` reads %s as a space; the device shell must see one literal word
        self.device.shell(f"input text {shlex.quote(text.replace(' ', '%s'))}")
        log.log_automation_step(f"Input text: {text}")
        return True

    def press_back(self) -> bool:
        self.device.shell(f"input keyevent {KEYCODE_BACK}")
        return True

    def scroll_forward(self) -> bool:
        return self._swipe_vertical(70, 30)

    def scroll_backward(self) -> bool:
        return self._swipe_vertical(30, 70)

    def launch_app(self, package_name: str) -> bool:
        if not self.is_installed(package_name):
            return False
        output = self.device.shell(f"monkey -p {package_name} -c android.intent.category.LAUNCHER 1")
        if "No activities found" in output:
            log.warning(f"{package_name} has no launcher activity")
            return False
        log.info(f"Launched {package_name}")
        return True

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def is_installed(self, package_name: str) -> bool:
        """Return ``True`` if ``package_name`` is installed on the device."""
        output = self.device.shell(f"pm list packages {package_name}")
        return f"package:{package_name}" in output.split()

    def screen_size(self) -> tuple[int, int]:
        """Return the physical screen size, cached after the first query."""
        if self._screen_size is None:
            self._screen_size = self._parse_screen_size(self.device.shell("wm size"))
        return self._screen_size

    def _swipe_vertical(self, start_percent: int, end_percent: int) -> bool:
        width, height = self.screen_size()
        x = width // 2
        y1, y2 = height * start_percent // 100, height * end_percent // 100
        self.device.shell(f"input swipe {x} {y1} {x} {y2} 300")
        return True

    def _parse_screen_size(self, screen_info: str) -> tuple[int, int]:
        """Parse ``wm size`` output, preferring an override size."""
        sizes = re.findall(r"(\d+)x(\d+)", screen_info)
        if not sizes:
            log.warning(f"Could not parse screen size from {screen_info!r}, assuming 1080x1920")
            return 1080, 1920
        width, height = sizes[-1]
        return int(width), int(height)


class AdbProviderSource:
    """Provider source that connects lazily and reports absence as ``None``."""

    def __init__(self, serial: Optional[str] = None) -> None:
        self.serial = serial if serial is not None else config.android_device_id
        self._provider: Optional[AdbTreeProvider] = None

    def __call__(self) -> Optional[AdbTreeProvider]:
        if self._provider is None:
            try:
                self._provider = AdbTreeProvider(Device.connect(self.serial))
            except ADBError as e:
                log.warning(f"UI tree provider unavailable: {e}")
                return None
        return self._provider
