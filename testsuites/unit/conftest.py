import pytest

from webquery import WebSession, WebTestOptions

from testsuites.unit.fakes import FakePage


@pytest.fixture
def fake_page() -> FakePage:
    return FakePage()


@pytest.fixture
def options() -> WebTestOptions:
    # Short budget so timeout paths finish quickly
    return WebTestOptions(timeout_in_seconds=0.2, poll_interval_seconds=0.01)


@pytest.fixture
def session(fake_page: FakePage, options: WebTestOptions) -> WebSession:
    session = WebSession(options)
    session._page = fake_page
    return session
