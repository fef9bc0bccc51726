"""
================================================================================
Findable
================================================================================

Query shortcuts shared by everything that can act as a search root: the
session (whole page) and individual elements (relative queries).

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Union

from .model import By, Visibility, xpath_literal

if TYPE_CHECKING:
    from .element import Element
    from .finder import Finder


def by_text(html_tag: str, text: str) -> By:
    """Descendant ``html_tag`` whose whitespace-normalized text equals ``text``."""
    return By.xpath(f".//{html_tag}[normalize-space() = {xpath_literal(text)}]")


def by_parent() -> By:
    return By.xpath("..")


class Findable:
    """
    Mixin providing query shortcuts on top of ``_new_finder()``.

    Subclasses return a fresh Finder rooted at themselves from
    ``_new_finder()``; everything else is built from Finder primitives.
    """

    def _new_finder(self) -> "Finder":
        raise NotImplementedError

    def find(self, target: Union[str, By, None] = None) -> "Finder":
        """
        Start a query rooted here.

        Args:
            target: CSS selector string, a By predicate, or None to attach
                the predicate later on the returned Finder
        """
        finder = self._new_finder()
        if target is None:
            return finder
        if isinstance(target, By):
            return finder.by(target)
        return finder.by_selector(target)

    def find_by_label(
        self,
        label: str,
        selector: str,
        size: Optional[int] = None,
    ) -> Union["Element", List["Element"]]:
        """
        Find the control(s) next to a displayed ``<label>``.

        The label is matched by exact normalized text, then ``selector`` is
        resolved relative to the label's parent.

        Args:
            label: Visible label text
            selector: CSS selector of the control, relative to the label's parent
            size: Expected number of controls; None returns exactly one element

        Returns:
            One Element, or a list of ``size`` elements
        """
        label_element = self.find().by_text("label", label).displayed().one()
        finder = label_element.get_parent().find(By.css(selector))
        if size is None:
            return finder.one()
        return finder.all(size)

    def find_all(
        self,
        target: Union[str, By],
        size: int,
        visibility: Visibility = Visibility.ALL,
    ) -> List["Element"]:
        finder = self.find(target)
        if visibility is Visibility.DISPLAYED:
            finder = finder.displayed()
        elif visibility is Visibility.HIDDEN:
            finder = finder.hidden()
        return finder.all(size)


__all__ = [
    "Findable",
    "by_text",
    "by_parent",
]
