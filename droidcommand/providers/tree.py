"""UI node tree model and depth-first search helpers."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterator, List, Optional
from xml.etree import ElementTree as ET

_BOUNDS_PATTERN = re.compile(r"\[(-?\d+),(-?\d+)\]\[(-?\d+),(-?\d+)\]")

EDITABLE_CLASSES = ("android.widget.EditText", "android.widget.AutoCompleteTextView")


@dataclass(slots=True, eq=False)
class UINode:
    """One node of an accessibility-style element tree."""

    text: str = ""
    content_desc: str = ""
    hint: str = ""
    resource_id: str = ""
    class_name: str = ""
    editable: bool = False
    clickable: bool = False
    scrollable: bool = False
    bounds: Optional[tuple[int, int, int, int]] = None
    children: List[UINode] = field(default_factory=list)

    def center(self) -> Optional[tuple[int, int]]:
        """Center of the node bounds, or ``None`` if the node has no bounds."""
        if self.bounds is None:
            return None
        left, top, right, bottom = self.bounds
        return (left + right) // 2, (top + bottom) // 2

    def iter_nodes(self) -> Iterator[UINode]:
        """Yield this node and its descendants in document order."""
        yield self
        for child in self.children:
            yield from child.iter_nodes()


def _text_matches(value: str, text: str, exact_match: bool) -> bool:
    if exact_match:
        return value.lower() == text.lower()
    return text.lower() in value.lower()


def find_by_text(root: Optional[UINode], text: str, exact_match: bool = False) -> Optional[UINode]:
    """Return the first node whose text or content description matches.

    Matching is case-insensitive; ``exact_match`` switches from containment
    to equality.
    """
    if root is None:
        return None
    for node in root.iter_nodes():
        if _text_matches(node.text, text, exact_match) or _text_matches(node.content_desc, text, exact_match):
            return node
    return None


def find_editable(root: Optional[UINode], hint: Optional[str] = None) -> Optional[UINode]:
    """Return the first editable node, optionally filtered by ``hint``.

    The hint is matched by case-insensitive containment against the node
    text, content description and placeholder hint.
    """
    if root is None:
        return None
    for node in root.iter_nodes():
        if not node.editable:
            continue
        if hint is None:
            return node
        if any(_text_matches(value, hint, False) for value in (node.text, node.content_desc, node.hint)):
            return node
    return None


def find_clickable(root: Optional[UINode]) -> List[UINode]:
    """Return every clickable node in document order."""
    if root is None:
        return []
    return [node for node in root.iter_nodes() if node.clickable]


def collect_text(root: Optional[UINode]) -> List[str]:
    """Return all non-blank texts and content descriptions on screen."""
    if root is None:
        return []
    texts: List[str] = []
    for node in root.iter_nodes():
        for value in (node.text, node.content_desc):
            if value.strip():
                texts.append(value)
    return texts


def parse_bounds(value: str) -> Optional[tuple[int, int, int, int]]:
    """Parse ``[left,top][right,bottom]`` into a tuple."""
    match = _BOUNDS_PATTERN.fullmatch(value.strip())
    if not match:
        return None
    left, top, right, bottom = (int(group) for group in match.groups())
    return left, top, right, bottom


def _node_from_element(elem: ET.Element) -> UINode:
    class_name = elem.get("class", "")
    # uiautomator omits an "editable" attribute on older releases
    editable = elem.get("editable") == "true" or class_name in EDITABLE_CLASSES
    return UINode(
        text=elem.get("text", ""),
        content_desc=elem.get("content-desc", ""),
        hint=elem.get("hint", ""),
        resource_id=elem.get("resource-id", ""),
        class_name=class_name,
        editable=editable,
        clickable=elem.get("clickable") == "true",
        scrollable=elem.get("scrollable") == "true",
        bounds=parse_bounds(elem.get("bounds", "")),
        children=[_node_from_element(child) for child in elem if child.tag == "node"],
    )


def parse_hierarchy(xml: str) -> UINode:
    """Build a node tree from a ``uiautomator dump`` document.

    Raises:
        ValueError: If the document is not a window hierarchy.

    """
    start = xml.find("<?xml")
    if start == -1:
        start = xml.find("<hierarchy")
    if start == -1:
        raise ValueError("No window hierarchy in uiautomator output")
    # "dump /dev/tty" appends a status line after the document
    end = xml.rfind("</hierarchy>")
    document = xml[start:end + len("</hierarchy>")] if end > start else xml[start:]
    try:
        hierarchy = ET.fromstring(document.strip())
    except ET.ParseError as e:
        raise ValueError(f"Malformed window hierarchy: {e}") from e

    root = UINode(class_name="hierarchy")
    root.children = [_node_from_element(child) for child in hierarchy if child.tag == "node"]
    return root
