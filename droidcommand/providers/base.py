"""Capability interface between the execution engine and a live UI tree."""

from __future__ import annotations

from typing import Any, Callable, Optional, Protocol, runtime_checkable


@runtime_checkable
class UITreeProvider(Protocol):
    """Queryable element tree plus physical interaction primitives.

    Node references are opaque to the engine; they are only ever passed
    back to :meth:`click` and :meth:`set_text`.
    """

    def find_by_text(self, text: str, exact_match: bool = False) -> Optional[Any]:
        """Depth-first search on text and content description."""
        ...

    def find_editable(self, hint: Optional[str] = None) -> Optional[Any]:
        """Depth-first search for an editable node, optionally filtered by hint."""
        ...

    def click(self, node: Any) -> bool:
        ...

    def set_text(self, node: Any, text: str) -> bool:
        ...

    def press_back(self) -> bool:
        ...

    def scroll_forward(self) -> bool:
        ...

    def scroll_backward(self) -> bool:
        ...

    def launch_app(self, package_name: str) -> bool:
        """Launch an installed app; ``False`` if it is not installed."""
        ...


# Returns the active provider, or None when the facility is not available
ProviderSource = Callable[[], Optional[UITreeProvider]]


def static_source(provider: Optional[UITreeProvider]) -> ProviderSource:
    """Wrap a fixed provider (or ``None``) as a provider source."""
    return lambda: provider
