"""In-memory UI tree provider for dry runs and tests."""

from __future__ import annotations

from typing import Any, Iterable, List, Optional

from ..core.logger import log
from . import tree
from .tree import UINode


class StaticTreeProvider:
    """Serves a fixed :class:`UINode` tree and records every call.

    Clicks succeed on clickable nodes, text can be set on editable nodes.
    ``installed_packages`` limits which apps launch; ``None`` means every
    package counts as installed.
    """

    def __init__(
        self,
        root: Optional[UINode] = None,
        installed_packages: Optional[Iterable[str]] = None,
        back_enabled: bool = True,
    ) -> None:
        self.root = root if root is not None else UINode(class_name="hierarchy")
        self.installed_packages = set(installed_packages) if installed_packages is not None else None
        self.back_enabled = back_enabled
        self.calls: List[tuple[Any, ...]] = []
        self.launched: List[str] = []

    def find_by_text(self, text: str, exact_match: bool = False) -> Optional[UINode]:
        self.calls.append(("find_by_text", text, exact_match))
        return tree.find_by_text(self.root, text, exact_match)

    def find_editable(self, hint: Optional[str] = None) -> Optional[UINode]:
        self.calls.append(("find_editable", hint))
        return tree.find_editable(self.root, hint)

    def click(self, node: UINode) -> bool:
        self.calls.append(("click", node))
        return node.clickable

    def set_text(self, node: UINode, text: str) -> bool:
        self.calls.append(("set_text", node, text))
        if not node.editable:
            return False
        node.text = text
        return True

    def press_back(self) -> bool:
        self.calls.append(("press_back",))
        return self.back_enabled

    def scroll_forward(self) -> bool:
        self.calls.append(("scroll_forward",))
        return any(node.scrollable for node in self.root.iter_nodes())

    def scroll_backward(self) -> bool:
        self.calls.append(("scroll_backward",))
        return any(node.scrollable for node in self.root.iter_nodes())

    def launch_app(self, package_name: str) -> bool:
        self.calls.append(("launch_app", package_name))
        if self.installed_packages is not None and package_name not in self.installed_packages:
            log.debug(f"Package {package_name} not installed in static tree")
            return False
        self.launched.append(package_name)
        return True

    def call_names(self) -> List[str]:
        """Names of the provider methods called so far, in order."""
        return [call[0] for call in self.calls]
