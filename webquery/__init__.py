"""
================================================================================
webquery
================================================================================

Polling element queries on top of Playwright for reliable UI tests.

Browser pages change asynchronously: elements attach, detach and toggle
visibility on timers, XHR completions and animations. webquery turns the
point-in-time "find elements" primitive into a declarative query (selector,
visibility filter, expected cardinality) that waits for the page and the
elements to match, and fails with a diagnosable message when they never do.

Modules:
    - model: Range, Visibility, By
    - finder: Immutable query builder
    - element: ElementHandle decorator with relative queries
    - query_executor: Two-phase polling protocol
    - session: Browser lifecycle, navigation, console checks, gestures
    - config_loader / options: YAML + environment configuration
    - common: Loguru logging setup

Example:
    from webquery import WebSession, WebTestOptions

    options = WebTestOptions.from_config()
    with WebSession() as session:
        session.open_browser(options)
        session.load_page(options, "/items")
        visible = session.find(".item").displayed().all(2)
        session.find(".spinner").none()

================================================================================
"""

from .config_loader import ConfigLoader, ConfigurationError
from .element import Element
from .exceptions import (
    BrowserNotOpenedError,
    ConsoleErrorsFound,
    ElementTimeoutError,
    QueryDefinitionError,
    QueryDiagnostics,
    ReadinessTimeoutError,
    SelectionError,
    WebQueryError,
)
from .findable import Findable, by_parent, by_text
from .finder import Finder
from .model import UNBOUNDED, By, Range, Visibility
from .options import ConsoleEntry, WebTestMode, WebTestOptions
from .query_executor import QueryExecutor
from .session import WebSession

__version__ = "1.0.0"

__all__ = [
    "BrowserNotOpenedError",
    "By",
    "ConfigLoader",
    "ConfigurationError",
    "ConsoleEntry",
    "ConsoleErrorsFound",
    "Element",
    "ElementTimeoutError",
    "Findable",
    "Finder",
    "QueryDefinitionError",
    "QueryDiagnostics",
    "QueryExecutor",
    "Range",
    "ReadinessTimeoutError",
    "SelectionError",
    "UNBOUNDED",
    "Visibility",
    "WebQueryError",
    "WebSession",
    "WebTestMode",
    "WebTestOptions",
    "by_parent",
    "by_text",
]
