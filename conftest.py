"""
Repository-level pytest configuration.

Keeps the process-wide ConfigLoader from leaking state between tests:
each test sees the configuration file and environment as they are when
it starts.
"""

from __future__ import annotations

from pathlib import Path
from typing import Generator

import pytest

from webquery.config_loader import ConfigLoader


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(autouse=True)
def _fresh_config_loader() -> Generator[None, None, None]:
    ConfigLoader.reset()
    yield
    ConfigLoader.reset()
