"""
================================================================================
Finder
================================================================================

Immutable query builder.

A Finder accumulates a search root, exactly one selector predicate and a
visibility filter. Every configuring call returns a new Finder; terminal
calls (all/min/max/at_least_one/one/none) hand the query to the session's
polling executor together with the expected cardinality.

Usage:
    >>> session.find(".item").displayed().all(2)
    >>> session.find().by_text("button", "Save").one().click()
    >>> session.find("#spinner").none()

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any, List, Optional, Union

from .exceptions import QueryDefinitionError
from .findable import by_text
from .model import UNBOUNDED, By, Range, Visibility

if TYPE_CHECKING:
    from .element import Element
    from .session import WebSession


@dataclass(frozen=True)
class Finder:
    """
    Query definition plus terminal operations.

    Attributes:
        session: Session whose executor runs the query
        root: Search context (the page, or an Element for relative queries)
        predicate: Selector predicate, must be set before a terminal call
        visibility: Post-fetch visibility filter
    """
    session: "WebSession"
    root: Any
    predicate: Optional[By] = None
    visibility: Visibility = Visibility.ALL

    # =========================================================================
    # Configuration
    # =========================================================================

    def context(self, root: Any) -> "Finder":
        return replace(self, root=root)

    def by(self, predicate: By) -> "Finder":
        if self.predicate is not None:
            raise QueryDefinitionError("The 'by' parameter has been defined already")
        return replace(self, predicate=predicate)

    def by_selector(self, selector: str) -> "Finder":
        return self.by(By.css(selector))

    def by_text(self, html_tag: str, text: str) -> "Finder":
        return self.by(by_text(html_tag, text))

    def displayed(self) -> "Finder":
        return replace(self, visibility=Visibility.DISPLAYED)

    def hidden(self) -> "Finder":
        return replace(self, visibility=Visibility.HIDDEN)

    # =========================================================================
    # Terminal operations
    # =========================================================================

    def all(self, size: Union[int, Range]) -> List["Element"]:
        """
        Run the query and return every matching element.

        Args:
            size: Exact expected count, or a Range the count must fall in

        Raises:
            QueryDefinitionError: No predicate was attached
            ElementTimeoutError: The count never matched within the timeout
            SelectionError: The final fetch no longer matched
        """
        if self.predicate is None:
            raise QueryDefinitionError("Incorrect 'by' parameter: must be non null")
        expected = size if isinstance(size, Range) else Range.exact(size)
        return self.session.find_all_by(self.root, self.predicate, expected, self.visibility)

    def min(self, min_size: int) -> List["Element"]:
        return self.all(Range(min_size, UNBOUNDED))

    def max(self, max_size: int) -> List["Element"]:
        return self.all(Range(0, max_size))

    def at_least_one(self) -> List["Element"]:
        return self.min(1)

    def one(self) -> "Element":
        return self.all(1)[0]

    def none(self) -> None:
        """Assert that nothing matches (waits for matches to disappear)."""
        self.all(0)


__all__ = [
    "Finder",
]
