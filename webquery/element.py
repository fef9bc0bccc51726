"""
================================================================================
Element
================================================================================

Decorator over a Playwright ElementHandle.

Adds relative querying (``find``), parent navigation and a value accessor on
top of the native handle. Standard element operations are forwarded
explicitly to the wrapped handle.

Elements are created fresh on every fetch and never cached: a re-rendered
DOM leaves old native handles pointing at detached nodes.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from playwright.sync_api import ElementHandle

from .exceptions import WebQueryError
from .findable import Findable, by_parent
from .finder import Finder

if TYPE_CHECKING:
    from .session import WebSession


class Element(Findable):
    """
    One DOM element bound to the session that found it.

    Usage:
        >>> form = session.find("form#signup").one()
        >>> form.find("input[name=email]").one().fill("user@example.com")
        >>> form.find().by_text("button", "Submit").one().click()
    """

    def __init__(self, native: ElementHandle, session: "WebSession"):
        self._native = native
        self._session = session

    @classmethod
    def of(cls, native: ElementHandle, session: "WebSession") -> "Element":
        return cls(native, session)

    @property
    def native(self) -> ElementHandle:
        """The unwrapped Playwright handle."""
        return self._native

    @property
    def session(self) -> "WebSession":
        return self._session

    # =========================================================================
    # Additions
    # =========================================================================

    def _new_finder(self) -> Finder:
        return Finder(self._session, self)

    def get_parent(self) -> "Element":
        """
        Return the parent element.

        Single fetch without polling: a found element's parent is assumed
        to exist already.
        """
        parent = self._native.query_selector(by_parent().selector)
        if parent is None:
            raise WebQueryError(f"Element has no parent element: {self!r}")
        return Element(parent, self._session)

    def get_value(self) -> Optional[str]:
        return self.get_attribute("value")

    # =========================================================================
    # Forwarded operations
    # =========================================================================

    def query_selector_all(self, selector: str) -> List[ElementHandle]:
        return self._native.query_selector_all(selector)

    def click(self, **kwargs: Any) -> None:
        self._native.click(**kwargs)

    def dblclick(self, **kwargs: Any) -> None:
        self._native.dblclick(**kwargs)

    def fill(self, value: str, **kwargs: Any) -> None:
        self._native.fill(value, **kwargs)

    def clear(self) -> None:
        self._native.fill("")

    def type(self, text: str, **kwargs: Any) -> None:
        self._native.type(text, **kwargs)

    def press(self, key: str, **kwargs: Any) -> None:
        self._native.press(key, **kwargs)

    def check(self, **kwargs: Any) -> None:
        self._native.check(**kwargs)

    def uncheck(self, **kwargs: Any) -> None:
        self._native.uncheck(**kwargs)

    def select_option(self, value: Union[str, List[str], None] = None, **kwargs: Any) -> List[str]:
        return self._native.select_option(value, **kwargs)

    def set_input_files(self, files: Any, **kwargs: Any) -> None:
        self._native.set_input_files(files, **kwargs)

    def focus(self) -> None:
        self._native.focus()

    def scroll_into_view(self) -> None:
        self._native.scroll_into_view_if_needed()

    def screenshot(self, **kwargs: Any) -> bytes:
        return self._native.screenshot(**kwargs)

    def evaluate(self, expression: str, arg: Any = None) -> Any:
        return self._native.evaluate(expression, arg)

    @property
    def text(self) -> str:
        """Rendered text (``innerText``)."""
        return self._native.inner_text()

    def text_content(self) -> Optional[str]:
        return self._native.text_content()

    def inner_html(self) -> str:
        return self._native.inner_html()

    @property
    def tag_name(self) -> str:
        return self._native.evaluate("e => e.tagName.toLowerCase()")

    def get_attribute(self, name: str) -> Optional[str]:
        return self._native.get_attribute(name)

    def is_displayed(self) -> bool:
        return self._session.is_element_displayed(self._native)

    def is_enabled(self) -> bool:
        return self._native.is_enabled()

    def is_selected(self) -> bool:
        return self._native.is_checked()

    def bounding_box(self) -> Optional[Dict[str, float]]:
        return self._native.bounding_box()

    def __repr__(self) -> str:
        return f"Element({self._native!r})"


__all__ = [
    "Element",
]
