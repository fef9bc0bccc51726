"""
================================================================================
Query Executor
================================================================================

Two-phase polling protocol behind every terminal Finder call.

    1. Page readiness: poll ``document.readyState`` until it is 'complete'.
    2. Element condition: poll fetch + visibility filter until the count lies
       in the expected Range. Repeated ``stability_rechecks`` more times once
       it first holds, to settle DOMs that match briefly and then re-render.
    3. Final fetch: fetch once more and validate the count without waiting.

All waits share the session's timeout. Nothing is retried beyond the poll
loops; a failed query raises and leaves retry policy to the caller.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, List

import allure
from loguru import logger

from .element import Element
from .exceptions import (
    ElementTimeoutError,
    QueryDiagnostics,
    ReadinessTimeoutError,
    SelectionError,
)
from .model import By, Range, Visibility
from .wait_helpers import WaitConfig, WaitTimeoutError, wait_until

if TYPE_CHECKING:
    from .session import WebSession


READY_STATE_COMPLETE = "complete"


class QueryExecutor:
    """
    Runs element queries against one session.

    The executor reads session state (timeout, poll interval, driver handle)
    on every call and owns none of it. One query at a time per session.
    """

    def __init__(self, session: "WebSession"):
        self.session = session

    def _wait_config(self) -> WaitConfig:
        return WaitConfig(
            initial_interval=self.session.poll_interval_seconds(),
            multiplier=self.session.poll_backoff_multiplier(),
            max_interval=self.session.poll_max_interval(),
            timeout=self.session.current_timeout_seconds(),
            jitter=self.session.poll_jitter(),
        )

    def find_all(
        self,
        root: Any,
        by: By,
        size: Range,
        visibility: Visibility,
    ) -> List[Element]:
        """
        Wait for and return the elements matching ``by`` under ``root``.

        Args:
            root: Search context (page or Element)
            by: Selector predicate
            size: Expected cardinality
            visibility: Post-fetch visibility filter

        Returns:
            Freshly wrapped elements, filtered by visibility

        Raises:
            ReadinessTimeoutError: Page never finished loading
            ElementTimeoutError: Count never matched within the timeout
            SelectionError: Count changed between the last poll and the final fetch
        """
        qualifier = f"{visibility.qualifier} " if visibility.qualifier else ""
        with allure.step(f"Find {size} {qualifier}elements: {by}"):
            logger.debug(f"Query: {size} {qualifier}elements {by}")
            self.wait_for_page()
            for _ in range(1 + self.session.stability_rechecks()):
                self.wait_for_element(root, by, size, visibility)

            elements = self.find_elements(root, by, visibility)
            if not size.contains(len(elements)):
                diagnostics = self.diagnose(root, by, size, visibility)
                logger.error(f"Selection changed after wait: {diagnostics.message}")
                raise SelectionError(diagnostics)

            logger.debug(f"Found {len(elements)} {qualifier}elements {by}")
            return elements

    def wait_for_page(self) -> None:
        """Wait until the document reports readyState 'complete'."""
        config = self._wait_config()

        def check_ready():
            state = self.session.evaluate_ready_state()
            return state == READY_STATE_COMPLETE, state

        try:
            wait_until(check_ready, config, "document.readyState == 'complete'")
        except WaitTimeoutError as e:
            message = (
                f"Page was not loaded within {config.timeout}s "
                f"(last readyState: {e.last_result})"
            )
            logger.error(message)
            raise ReadinessTimeoutError(message) from e

    def wait_for_element(
        self,
        root: Any,
        by: By,
        size: Range,
        visibility: Visibility,
    ) -> None:
        """Wait until the filtered match count lies in ``size``."""

        def check_count():
            count = len(self.find_elements(root, by, visibility))
            return size.contains(count), count

        try:
            wait_until(check_count, self._wait_config(), f"{size} elements {by}")
        except WaitTimeoutError as e:
            diagnostics = self.diagnose(root, by, size, visibility)
            logger.error(diagnostics.message)
            raise ElementTimeoutError(diagnostics) from e

    def find_elements(self, root: Any, by: By, visibility: Visibility) -> List[Element]:
        """Single fetch: wrap every native match and apply the visibility filter."""
        natives = self.session.fetch_elements(root, by)
        return visibility.filter(Element.of(native, self.session) for native in natives)

    def diagnose(
        self,
        root: Any,
        by: By,
        size: Range,
        visibility: Visibility,
    ) -> QueryDiagnostics:
        """Re-fetch ignoring visibility and count what is actually there."""
        elements = self.find_elements(root, by, Visibility.ALL)
        return QueryDiagnostics.observe(size, visibility, elements)


__all__ = [
    "QueryExecutor",
    "READY_STATE_COMPLETE",
]
