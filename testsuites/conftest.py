"""
================================================================================
Root Pytest Configuration
================================================================================

This module provides the root pytest configuration for the entire test suite.
It registers common markers and tags tests by directory.

================================================================================
"""

import pytest


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for release"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )
    config.addinivalue_line(
        "markers", "P2: Medium priority tests - edge cases and minor features"
    )
    config.addinivalue_line(
        "markers", "P3: Low priority tests - extensive validation"
    )

    # Test type markers
    config.addinivalue_line(
        "markers", "smoke: Quick verification tests"
    )
    config.addinivalue_line(
        "markers", "regression: Full regression test suite"
    )

    # Domain markers
    config.addinivalue_line(
        "markers", "unit: Tests running against in-memory fake pages"
    )
    config.addinivalue_line(
        "markers", "ui: Tests driving a real headless Chromium"
    )


def pytest_collection_modifyitems(config, items):
    """Auto-add the domain marker matching each test's directory."""
    for item in items:
        parts = item.path.parts
        if "unit" in parts:
            item.add_marker(pytest.mark.unit)

        if "ui_testing" in parts:
            item.add_marker(pytest.mark.ui)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "webquery - Polling Element Query Layer",
        "=" * 60,
        "",
    ]
