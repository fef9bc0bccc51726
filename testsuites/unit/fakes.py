"""
In-memory stand-ins for Playwright's sync Page / ElementHandle.

Only the calls the query engine and session make are implemented.
Selectors are looked up verbatim (engine prefix included), so tests register
exactly the selector strings the code under test will produce.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Union


Matches = Union[List["FakeHandle"], Callable[[], List["FakeHandle"]]]


def _resolve(matches: Matches) -> List["FakeHandle"]:
    if callable(matches):
        return list(matches())
    return list(matches)


class FakeHandle:
    def __init__(
        self,
        text: str = "",
        visible: bool = True,
        attributes: Optional[Dict[str, str]] = None,
        box: Optional[Dict[str, float]] = None,
        parent: Optional["FakeHandle"] = None,
    ):
        self.text = text
        self.visible = visible
        self.attributes = attributes or {}
        self.box = box if box is not None else {"x": 0, "y": 0, "width": 10, "height": 10}
        self.parent = parent
        self.children: Dict[str, Matches] = {}
        self.calls: List[str] = []

    def add(self, selector: str, *handles: "FakeHandle") -> "FakeHandle":
        for handle in handles:
            handle.parent = self
        self.children.setdefault(selector, []).extend(handles)
        return self

    def query_selector_all(self, selector: str) -> List["FakeHandle"]:
        return _resolve(self.children.get(selector, []))

    def query_selector(self, selector: str) -> Optional["FakeHandle"]:
        if selector == "xpath=..":
            return self.parent
        matches = self.query_selector_all(selector)
        return matches[0] if matches else None

    def is_visible(self) -> bool:
        return self.visible

    def get_attribute(self, name: str) -> Optional[str]:
        return self.attributes.get(name)

    def inner_text(self) -> str:
        return self.text

    def text_content(self) -> str:
        return self.text

    def bounding_box(self) -> Optional[Dict[str, float]]:
        return self.box if self.visible else None

    def scroll_into_view_if_needed(self) -> None:
        self.calls.append("scroll_into_view_if_needed")

    def click(self, **kwargs: Any) -> None:
        self.calls.append("click")

    def fill(self, value: str, **kwargs: Any) -> None:
        self.calls.append(f"fill:{value}")
        self.attributes["value"] = value

    def __repr__(self) -> str:
        return f"FakeHandle(text={self.text!r}, visible={self.visible})"


class FakeMouse:
    def __init__(self):
        self.actions: List[tuple] = []

    def move(self, x: float, y: float, steps: int = 1) -> None:
        self.actions.append(("move", x, y))

    def down(self) -> None:
        self.actions.append(("down",))

    def up(self) -> None:
        self.actions.append(("up",))


class FakePage:
    def __init__(self, ready_states: Optional[List[str]] = None):
        # Last state repeats once the list is exhausted
        self.ready_states = list(ready_states or ["complete"])
        self.elements: Dict[str, Matches] = {}
        self.url = "about:blank"
        self.visited: List[str] = []
        self.viewport_size: Optional[Dict[str, int]] = {"width": 1920, "height": 1200}
        self.mouse = FakeMouse()
        self.evaluations = 0
        self.closed = False

    def add(self, selector: str, *handles: FakeHandle) -> "FakePage":
        self.elements.setdefault(selector, []).extend(handles)
        return self

    def evaluate(self, expression: str) -> Any:
        assert expression == "document.readyState"
        self.evaluations += 1
        if len(self.ready_states) > 1:
            return self.ready_states.pop(0)
        return self.ready_states[0]

    def query_selector_all(self, selector: str) -> List[FakeHandle]:
        return _resolve(self.elements.get(selector, []))

    def goto(self, url: str) -> None:
        self.visited.append(url)
        self.url = url

    def set_viewport_size(self, size: Dict[str, int]) -> None:
        self.viewport_size = dict(size)

    def is_closed(self) -> bool:
        return self.closed
