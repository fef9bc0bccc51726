"""
================================================================================
Web Test Options
================================================================================

Per-test browser options: target host, timeouts, window mode, lifecycle hooks
and the console log filter applied after each page load.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, Optional

from loguru import logger

if TYPE_CHECKING:
    from .config_loader import ConfigLoader


class WebTestMode(Enum):
    """Window geometry applied after a page load."""

    DEFAULT = "default"
    DESKTOP = "desktop"
    MOBILE = "mobile"


@dataclass(frozen=True)
class ConsoleEntry:
    """
    One captured browser console message.

    Attributes:
        level: Console message type ('error', 'warning', 'log', ...)
        text: Message text
        url: Source URL reported by the browser (may be empty)
    """
    level: str
    text: str
    url: str = ""

    def __str__(self) -> str:
        location = f" ({self.url})" if self.url else ""
        return f"[{self.level.upper()}] {self.text}{location}"

    __repr__ = __str__


# Scalar settings read from the `web` configuration section
CONFIG_KEYS = (
    "protocol",
    "host",
    "port",
    "timeout_in_seconds",
    "poll_interval_seconds",
    "poll_backoff_multiplier",
    "poll_max_interval",
    "poll_jitter",
    "stability_rechecks",
    "headless_browser",
    "hide_browser",
    "reload_page_on_each_test",
    "allow_multiple_browsers_opened",
)


def _noop() -> None:
    pass


def errors_only(entry: ConsoleEntry) -> bool:
    """Default log filter: every error-level entry is unexpected."""
    return entry.level == "error"


@dataclass
class WebTestOptions:
    """
    Options read by the session on every page load and every query.

    Usage:
        >>> options = WebTestOptions(port=3000, timeout_in_seconds=5)
        >>> session.open_browser(options)
        >>> session.load_page(options, "/login")
    """
    protocol: str = "http"
    host: str = "localhost"
    port: int = 8080
    timeout_in_seconds: float = 10.0
    poll_interval_seconds: float = 0.5
    # Poll interval growth per tick, capped at poll_max_interval
    poll_backoff_multiplier: float = 1.0
    poll_max_interval: float = 5.0
    poll_jitter: bool = False
    # Extra element-condition waits after the first one succeeds
    stability_rechecks: int = 1
    mode: WebTestMode = WebTestMode.DEFAULT
    headless_browser: bool = True
    hide_browser: bool = False
    reload_page_on_each_test: bool = False
    allow_multiple_browsers_opened: bool = False
    before_page_loads: Callable[[], None] = field(default=_noop, repr=False)
    after_page_loads: Callable[[], None] = field(default=_noop, repr=False)
    # Keeps the entries that should fail the page load
    logs_filter: Callable[[ConsoleEntry], bool] = field(default=errors_only, repr=False)

    def __post_init__(self) -> None:
        if self.stability_rechecks < 0:
            raise ValueError("stability_rechecks must be >= 0")
        if self.poll_backoff_multiplier < 1.0:
            raise ValueError("poll_backoff_multiplier must be >= 1.0")
        if isinstance(self.mode, str):
            self.mode = WebTestMode(self.mode.lower())

    @classmethod
    def from_config(
        cls,
        loader: Optional["ConfigLoader"] = None,
        **overrides,
    ) -> "WebTestOptions":
        """
        Build options from the ``web`` configuration section.

        Args:
            loader: ConfigLoader to read from (process-wide instance if None)
            **overrides: Values that win over configuration (hooks, filters)

        Returns:
            New WebTestOptions
        """
        if loader is None:
            from .config_loader import ConfigLoader
            loader = ConfigLoader()

        unknown = set(loader.get_section("web")) - set(CONFIG_KEYS) - {"mode"}
        if unknown:
            logger.warning(f"Ignoring unknown web settings: {sorted(unknown)}")

        defaults = cls()
        values = {}
        for name in CONFIG_KEYS:
            values[name] = loader.get(f"web.{name}", getattr(defaults, name))
        values["mode"] = loader.get("web.mode", defaults.mode.value)
        values.update(overrides)
        return cls(**values)


__all__ = [
    "WebTestMode",
    "ConsoleEntry",
    "WebTestOptions",
    "errors_only",
]
