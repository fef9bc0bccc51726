"""
================================================================================
Web Session
================================================================================

Owns the single active browser page of a test run and exposes it to queries.

Features:
    - Browser lifecycle (open/close, one page per opened browser)
    - Page loading with lifecycle hooks and window geometry presets
    - Browser console capture checked after each page load
    - Session-level pointer gestures (hover, drag and drop)
    - Element queries through the polling QueryExecutor

Threading:
    Navigation (open_browser/load_page/go) is the only writer of session
    state; queries only read it. Run one query at a time per session.

Usage:
    with WebSession() as session:
        options = WebTestOptions(port=3000)
        session.open_browser(options)
        session.load_page(options, "/login")
        session.find_by_label("Email", "input[type=email]").fill("user@example.com")

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

import allure
from loguru import logger
from playwright.sync_api import (
    Browser,
    BrowserContext,
    ConsoleMessage,
    ElementHandle,
    Error as PlaywrightError,
    Page,
    Playwright,
    sync_playwright,
)

from .common import init_logger
from .element import Element
from .exceptions import BrowserNotOpenedError, ConsoleErrorsFound, WebQueryError
from .findable import Findable
from .finder import Finder
from .model import By, Range, Visibility
from .options import ConsoleEntry, WebTestMode, WebTestOptions
from .query_executor import QueryExecutor


HEADLESS_ARGS: List[str] = [
    "--disable-gpu",
    "--window-size=1920,1200",
    "--ignore-certificate-errors",
]

HEADLESS_VIEWPORT: Dict[str, int] = {"width": 1920, "height": 1200}

# Window is moved this far left to keep it off screen
HIDDEN_WINDOW_LEFT = -2000

MOBILE_MAX_WIDTH = 500


class WebSession(Findable):
    """
    Browser session plus the root of page-level queries.

    Implements the contract the query engine relies on:
    ``current_timeout_seconds``, ``evaluate_ready_state``,
    ``fetch_elements``, ``is_element_displayed``,
    ``perform_pointer_move`` and ``perform_drag_and_drop``.
    """

    def __init__(self, options: Optional[WebTestOptions] = None):
        """
        Initialize session.

        Args:
            options: Options used until load_page() supplies new ones
        """
        self.options = options or WebTestOptions()
        self.executor = QueryExecutor(self)

        self._playwright: Optional[Playwright] = None
        self._browsers: List[Browser] = []
        self._context: Optional[BrowserContext] = None
        self._page: Optional[Page] = None
        self._console_entries: List[ConsoleEntry] = []

    def __enter__(self) -> "WebSession":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if self._playwright is not None:
            self.close_browser()

    # =========================================================================
    # Browser lifecycle
    # =========================================================================

    def open_browser(self, options: Optional[WebTestOptions] = None) -> None:
        """
        Launch Chromium and open a page.

        Does nothing when a browser is already open, unless
        ``allow_multiple_browsers_opened`` is set.
        """
        if options is not None:
            self.options = options
        if not self.options.allow_multiple_browsers_opened and self.is_browser_opened():
            logger.debug("Browser already opened, reusing it")
            return

        init_logger()
        if self._playwright is None:
            self._playwright = sync_playwright().start()

        launch_options: Dict[str, Any] = {"headless": self.options.headless_browser}
        context_options: Dict[str, Any] = {"ignore_https_errors": True}
        if self.options.headless_browser:
            launch_options["args"] = HEADLESS_ARGS
            context_options["viewport"] = HEADLESS_VIEWPORT

        browser = self._playwright.chromium.launch(**launch_options)
        self._browsers.append(browser)
        self._context = browser.new_context(**context_options)
        self._page = self._context.new_page()
        self._page.on("console", self._on_console)
        self._page.on("pageerror", self._on_page_error)
        self._console_entries.clear()

        logger.info(f"Browser opened (headless={self.options.headless_browser})")

    def close_browser(self) -> None:
        """Close every browser this session opened and stop Playwright."""
        for browser in self._browsers:
            browser.close()
        self._browsers.clear()
        self._context = None
        self._page = None

        if self._playwright is not None:
            self._playwright.stop()
            self._playwright = None

        logger.info("Browser closed")

    def is_browser_opened(self) -> bool:
        return self._page is not None and not self._page.is_closed()

    @property
    def page(self) -> Page:
        """The active Playwright page (the driver handle)."""
        if self._page is None:
            raise BrowserNotOpenedError("Browser is not opened. Call open_browser() first.")
        return self._page

    # =========================================================================
    # Navigation
    # =========================================================================

    def load_page(self, options: WebTestOptions, path_or_url: str) -> None:
        """
        Navigate to a page and verify the console stayed clean.

        Skipped when the page is already on that URL and
        ``reload_page_on_each_test`` is off.

        Raises:
            ConsoleErrorsFound: The console holds entries kept by ``logs_filter``
        """
        self.options = options
        url = self.build_url(path_or_url)
        if self.page.url == url and not options.reload_page_on_each_test:
            logger.debug(f"Already on {url}, not reloading")
            return

        with allure.step(f"Load page {url}"):
            options.before_page_loads()
            self.page.goto(url)
            options.after_page_loads()
            logger.debug(f"Loaded page: {url}")

            if options.hide_browser:
                self.hide_browser()
            if options.mode is WebTestMode.DESKTOP:
                self.desktop_window()
            elif options.mode is WebTestMode.MOBILE:
                self.mobile_window()

            self.check_errors_in_logs()

    def go(self, path: str) -> None:
        """Navigate without hooks, geometry or console checks."""
        self.page.goto(self.build_url(path))

    def build_url(self, path: str) -> str:
        if "://" in path:
            return path
        return f"{self.options.protocol}://{self.options.host}:{self.options.port}{path}"

    # =========================================================================
    # Window geometry
    # =========================================================================

    def _viewport(self) -> Dict[str, int]:
        return self.page.viewport_size or dict(HEADLESS_VIEWPORT)

    def desktop_window(self) -> None:
        """Resize to a 16:9 landscape window keeping the current height."""
        height = self._viewport()["height"]
        self.page.set_viewport_size({"width": height * 16 // 9, "height": height})

    def mobile_window(self) -> None:
        """Resize to a 9:16 portrait window, at most 500px wide."""
        height = self._viewport()["height"]
        width = min(height * 9 // 16, MOBILE_MAX_WIDTH)
        self.page.set_viewport_size({"width": width, "height": height})

    def hide_browser(self) -> None:
        """Move the browser window off screen."""
        cdp = self.page.context.new_cdp_session(self.page)
        try:
            window = cdp.send("Browser.getWindowForTarget")
            cdp.send(
                "Browser.setWindowBounds",
                {
                    "windowId": window["windowId"],
                    "bounds": {"left": HIDDEN_WINDOW_LEFT, "top": 0},
                },
            )
        finally:
            cdp.detach()

    # =========================================================================
    # Console
    # =========================================================================

    def _on_console(self, message: ConsoleMessage) -> None:
        location = message.location or {}
        self._console_entries.append(
            ConsoleEntry(level=message.type, text=message.text, url=location.get("url", ""))
        )

    def _on_page_error(self, error: PlaywrightError) -> None:
        self._console_entries.append(ConsoleEntry(level="error", text=str(error)))

    def console_entries(self) -> List[ConsoleEntry]:
        """Drain and return console entries captured since the last call."""
        entries = list(self._console_entries)
        self._console_entries.clear()
        return entries

    def check_errors_in_logs(self) -> None:
        entries = [e for e in self.console_entries() if self.options.logs_filter(e)]
        if entries:
            logger.error(f"Unexpected browser console entries: {entries}")
            raise ConsoleErrorsFound(entries)

    # =========================================================================
    # Queries
    # =========================================================================

    def _new_finder(self) -> Finder:
        return Finder(self, self.page)

    def find_all_by(
        self,
        root: Any,
        by: By,
        size: Range,
        visibility: Visibility = Visibility.ALL,
    ) -> List[Element]:
        """Full wait protocol; see QueryExecutor.find_all."""
        return self.executor.find_all(root, by, size, visibility)

    def wait_for_page(self) -> None:
        self.executor.wait_for_page()

    def wait_for_element(
        self,
        root: Any,
        by: By,
        size: Range,
        visibility: Visibility = Visibility.ALL,
    ) -> None:
        self.executor.wait_for_element(root, by, size, visibility)

    # =========================================================================
    # Gestures
    # =========================================================================

    @staticmethod
    def _unwrap(element: Union[Element, ElementHandle]) -> ElementHandle:
        return element.native if isinstance(element, Element) else element

    def move_to_element(self, element: Union[Element, ElementHandle]) -> None:
        with allure.step("Move pointer to element"):
            self.perform_pointer_move(self._unwrap(element))

    def drag_and_drop(
        self,
        source: Union[Element, ElementHandle],
        target: Union[Element, ElementHandle],
    ) -> None:
        with allure.step("Drag and drop"):
            self.perform_drag_and_drop(self._unwrap(source), self._unwrap(target))

    # =========================================================================
    # Session contract
    # =========================================================================

    def current_timeout_seconds(self) -> float:
        return self.options.timeout_in_seconds

    def poll_interval_seconds(self) -> float:
        return self.options.poll_interval_seconds

    def poll_backoff_multiplier(self) -> float:
        return self.options.poll_backoff_multiplier

    def poll_max_interval(self) -> float:
        return self.options.poll_max_interval

    def poll_jitter(self) -> bool:
        return self.options.poll_jitter

    def stability_rechecks(self) -> int:
        return self.options.stability_rechecks

    def evaluate_ready_state(self) -> str:
        return self.page.evaluate("document.readyState")

    def fetch_elements(self, root: Any, by: By) -> List[ElementHandle]:
        """Raw fetch of native handles matching ``by`` under ``root``."""
        return root.query_selector_all(by.selector)

    def is_element_displayed(self, native: ElementHandle) -> bool:
        return native.is_visible()

    def _center_of(self, native: ElementHandle) -> Dict[str, float]:
        native.scroll_into_view_if_needed()
        box = native.bounding_box()
        if box is None:
            raise WebQueryError(f"Element is not rendered, cannot point at it: {native!r}")
        return {"x": box["x"] + box["width"] / 2, "y": box["y"] + box["height"] / 2}

    def perform_pointer_move(self, native: ElementHandle) -> None:
        center = self._center_of(native)
        self.page.mouse.move(center["x"], center["y"])

    def perform_drag_and_drop(self, source: ElementHandle, target: ElementHandle) -> None:
        start = self._center_of(source)
        mouse = self.page.mouse
        mouse.move(start["x"], start["y"])
        mouse.down()
        end = self._center_of(target)
        mouse.move(end["x"], end["y"], steps=5)
        mouse.up()


__all__ = [
    "WebSession",
]
