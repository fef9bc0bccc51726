"""
================================================================================
Exceptions
================================================================================

Error taxonomy for element queries.

Programmer mistakes (QueryDefinitionError) are kept apart from environmental
failures (timeouts, post-wait mismatches, console errors). The latter carry
structured diagnostics next to the formatted message.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Sequence, TYPE_CHECKING

from .model import Range, Visibility

if TYPE_CHECKING:
    from .options import ConsoleEntry


TIMEOUT_MESSAGE_PATTERN = (
    "Waited for {expected} {visibility} elements but was: {total} total elements "
    "({displayed} displayed and {hidden} hidden)"
)


@dataclass(frozen=True)
class QueryDiagnostics:
    """
    Snapshot of what a failed query actually observed.

    Attributes:
        expected: Cardinality range the caller asked for
        visibility: Visibility filter the caller asked for
        total: Number of elements matching the selector (unfiltered)
        displayed: How many of them were displayed
        hidden: How many of them were hidden
    """
    expected: Range
    visibility: Visibility
    total: int
    displayed: int
    hidden: int

    @property
    def message(self) -> str:
        return TIMEOUT_MESSAGE_PATTERN.format(
            expected=self.expected,
            visibility=self.visibility.qualifier,
            total=self.total,
            displayed=self.displayed,
            hidden=self.hidden,
        )

    @classmethod
    def observe(
        cls,
        expected: Range,
        visibility: Visibility,
        elements: Sequence,
    ) -> "QueryDiagnostics":
        """Build diagnostics from an unfiltered element snapshot."""
        displayed = len(Visibility.DISPLAYED.filter(elements))
        return cls(
            expected=expected,
            visibility=visibility,
            total=len(elements),
            displayed=displayed,
            hidden=len(elements) - displayed,
        )


class WebQueryError(Exception):
    """Base class for all element query errors."""
    pass


class QueryDefinitionError(WebQueryError):
    """Raised when a query is built incorrectly (missing or duplicate predicate)."""
    pass


class BrowserNotOpenedError(WebQueryError):
    """Raised when the session is used before a browser was opened."""
    pass


class ReadinessTimeoutError(WebQueryError, TimeoutError):
    """Raised when the document never reached the 'complete' ready state."""
    pass


class _DiagnosedError(WebQueryError):

    def __init__(self, diagnostics: QueryDiagnostics):
        super().__init__(diagnostics.message)
        self.diagnostics = diagnostics


class ElementTimeoutError(_DiagnosedError, TimeoutError):
    """Raised when the element condition did not hold within the timeout."""
    pass


class SelectionError(_DiagnosedError):
    """Raised when the final fetch disagrees with a wait that had succeeded."""
    pass


class ConsoleErrorsFound(WebQueryError, AssertionError):
    """Raised when the browser console holds unexpected entries after a page load."""

    def __init__(self, entries: List["ConsoleEntry"]):
        super().__init__(f"expected: <no errors in logs> but was: <{entries}>")
        self.entries = entries


__all__ = [
    "TIMEOUT_MESSAGE_PATTERN",
    "QueryDiagnostics",
    "WebQueryError",
    "QueryDefinitionError",
    "BrowserNotOpenedError",
    "ReadinessTimeoutError",
    "ElementTimeoutError",
    "SelectionError",
    "ConsoleErrorsFound",
]
