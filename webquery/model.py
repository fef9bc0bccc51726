"""
================================================================================
Query Model
================================================================================

Value types shared by the query builder and the polling executor.

Types:
    - Range: inclusive cardinality interval a query expects
    - Visibility: post-fetch visibility filter
    - By: opaque selector predicate handed to the driver

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Iterable, List, TypeVar

if TYPE_CHECKING:
    from .element import Element


# Upper bound used for "at least n" ranges
UNBOUNDED: int = sys.maxsize

T = TypeVar("T", bound="Element")


@dataclass(frozen=True)
class Range:
    """
    Inclusive integer interval ``[min, max]``.

    Attributes:
        min: Lower bound (>= 0)
        max: Upper bound (>= min), ``UNBOUNDED`` for "no upper bound"
    """
    min: int
    max: int

    def __post_init__(self) -> None:
        if self.min < 0:
            raise ValueError(f"Range minimum must be >= 0, got {self.min}")
        if self.max < self.min:
            raise ValueError(
                f"Range maximum must be >= minimum, got {self.min}..{self.max}"
            )

    @classmethod
    def exact(cls, size: int) -> "Range":
        return cls(size, size)

    @classmethod
    def at_least(cls, size: int) -> "Range":
        return cls(size, UNBOUNDED)

    @classmethod
    def at_most(cls, size: int) -> "Range":
        return cls(0, size)

    def contains(self, size: int) -> bool:
        """Return True if ``min <= size <= max``."""
        return self.min <= size <= self.max

    def __contains__(self, size: int) -> bool:
        return self.contains(size)

    def __str__(self) -> str:
        if self.min == self.max:
            return str(self.min)
        if self.max == UNBOUNDED:
            return f"{self.min}.."
        return f"{self.min}..{self.max}"


class Visibility(Enum):
    """Tri-state visibility filter applied after the raw element fetch."""

    ALL = "all"
    DISPLAYED = "displayed"
    HIDDEN = "hidden"

    @property
    def qualifier(self) -> str:
        """Word used in diagnostic messages (empty for ALL)."""
        return "" if self is Visibility.ALL else self.value

    def matches(self, element: "Element") -> bool:
        if self is Visibility.DISPLAYED:
            return element.is_displayed()
        if self is Visibility.HIDDEN:
            return not element.is_displayed()
        return True

    def filter(self, elements: Iterable[T]) -> List[T]:
        return [e for e in elements if self.matches(e)]


@dataclass(frozen=True)
class By:
    """
    Selector predicate.

    The query engine never looks inside a ``By``; it only hands
    ``By.selector`` to the driver's ``query_selector_all``.

    Usage:
        >>> By.css("input[type=email]").selector
        'css=input[type=email]'
        >>> By.xpath("..").selector
        'xpath=..'
    """
    strategy: str
    value: str

    CSS = "css"
    XPATH = "xpath"

    @classmethod
    def css(cls, selector: str) -> "By":
        return cls(cls.CSS, selector)

    @classmethod
    def xpath(cls, expression: str) -> "By":
        return cls(cls.XPATH, expression)

    @property
    def selector(self) -> str:
        """Playwright engine-prefixed selector."""
        return f"{self.strategy}={self.value}"

    def __str__(self) -> str:
        return f"By.{self.strategy}: {self.value}"


def xpath_literal(text: str) -> str:
    """
    Quote ``text`` as an XPath 1.0 string literal.

    XPath has no escape sequences, so text containing both quote kinds
    is split into a ``concat()`` call.
    """
    if "'" not in text:
        return f"'{text}'"
    if '"' not in text:
        return f'"{text}"'
    parts = text.split("'")
    return "concat(" + ", \"'\", ".join(f"'{p}'" for p in parts) + ")"


__all__ = [
    "UNBOUNDED",
    "Range",
    "Visibility",
    "By",
    "xpath_literal",
]
