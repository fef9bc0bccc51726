"""
================================================================================
UI Testing Pytest Configuration
================================================================================

Fixtures for end-to-end query tests against a real headless Chromium.

Key Features:
- One browser per test session (launch is the slow part)
- Inline HTML pages loaded per test, no web server needed
- Screenshot attached to Allure on failure
- Whole module skipped when Chromium cannot be launched

================================================================================
"""

from typing import Callable, Generator

import allure
import pytest
from loguru import logger
from playwright.sync_api import Error as PlaywrightError

from webquery import WebSession, WebTestOptions


@pytest.fixture(scope="session")
def ui_options() -> WebTestOptions:
    return WebTestOptions(timeout_in_seconds=2.0, poll_interval_seconds=0.05)


@pytest.fixture(scope="session")
def browser_session(ui_options: WebTestOptions) -> Generator[WebSession, None, None]:
    """Session-scoped WebSession with an open headless browser."""
    session = WebSession(ui_options)
    try:
        session.open_browser()
    except PlaywrightError as e:
        session.close_browser()
        pytest.skip(f"Chromium is not available: {str(e).splitlines()[0]}")
    yield session
    session.close_browser()


@pytest.fixture
def web(browser_session: WebSession, ui_options: WebTestOptions) -> WebSession:
    """Browser session with default options and an empty console."""
    browser_session.options = ui_options
    browser_session.console_entries()
    return browser_session


@pytest.fixture
def load_html(web: WebSession) -> Callable[[str], WebSession]:
    """Replace the page content with ``html`` and return the session."""

    def _load(html: str) -> WebSession:
        web.page.set_content(f"<!DOCTYPE html><html><body>{html}</body></html>")
        return web

    return _load


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Attach a screenshot of the page to Allure when a UI test fails."""
    outcome = yield
    report = outcome.get_result()

    if report.when == "call" and report.failed and "web" in getattr(item, "funcargs", {}):
        session = item.funcargs["web"]
        try:
            allure.attach(
                session.page.screenshot(full_page=True),
                name="failure_screenshot",
                attachment_type=allure.attachment_type.PNG,
            )
        except PlaywrightError as e:
            logger.warning(f"Failed to capture screenshot on failure: {e}")
