import time
from types import SimpleNamespace

import pytest

from webquery import (
    ElementTimeoutError,
    QueryDiagnostics,
    Range,
    ReadinessTimeoutError,
    SelectionError,
    Visibility,
    WebSession,
    WebTestOptions,
)

from testsuites.unit.fakes import FakeHandle


@pytest.fixture
def items(fake_page):
    shown_a = FakeHandle("a", attributes={"id": "a"})
    shown_b = FakeHandle("b", attributes={"id": "b"})
    hidden = FakeHandle("c", visible=False, attributes={"id": "c"})
    fake_page.add("css=.item", shown_a, hidden, shown_b)
    return shown_a, shown_b, hidden


def test_displayed_filter_returns_displayed_elements(session, items):
    shown_a, shown_b, _ = items
    elements = session.find(".item").displayed().all(2)

    assert [e.native for e in elements] == [shown_a, shown_b]
    assert all(e.is_displayed() for e in elements)


def test_hidden_filter_returns_the_hidden_element(session, items):
    element = session.find(".item").hidden().one()
    assert element.native is items[2]
    assert not element.is_displayed()


def test_unfiltered_query_returns_all_matches(session, items):
    assert len(session.find(".item").all(3)) == 3
    assert len(session.find(".item").min(2)) == 3
    assert len(session.find(".item").max(3)) == 3


def test_no_match_times_out_with_diagnostics(session):
    started = time.monotonic()
    with pytest.raises(ElementTimeoutError) as error:
        session.find(".missing").at_least_one()

    assert time.monotonic() - started >= 0.2
    assert isinstance(error.value, TimeoutError)
    message = str(error.value)
    assert message.startswith("Waited for 1.. ")
    assert "0 total elements (0 displayed and 0 hidden)" in message
    assert error.value.diagnostics == QueryDiagnostics(
        expected=Range.at_least(1),
        visibility=Visibility.ALL,
        total=0,
        displayed=0,
        hidden=0,
    )


def test_timeout_counts_ignore_the_requested_visibility(session, items):
    with pytest.raises(ElementTimeoutError) as error:
        session.find(".item").displayed().all(3)

    assert str(error.value) == (
        "Waited for 3 displayed elements but was: "
        "3 total elements (2 displayed and 1 hidden)"
    )


def test_page_never_ready_is_a_readiness_timeout(session, fake_page, items):
    fake_page.ready_states = ["loading"]

    with pytest.raises(ReadinessTimeoutError, match="last readyState: loading"):
        session.find(".item").all(3)


def test_waits_for_page_to_become_ready(session, fake_page, items):
    fake_page.ready_states = ["loading", "interactive", "complete"]

    assert len(session.find(".item").all(3)) == 3
    assert fake_page.evaluations >= 3


def test_waits_for_elements_to_appear(session, fake_page):
    rendered = FakeHandle("late")
    polls = []

    def late_items():
        polls.append(1)
        return [rendered] if len(polls) > 3 else []

    fake_page.elements["css=.late"] = late_items

    assert session.find(".late").one().native is rendered
    assert len(polls) > 3


def test_none_waits_for_elements_to_disappear(session, fake_page):
    spinner = FakeHandle("spinner")
    polls = []

    def spinners():
        polls.append(1)
        return [spinner] if len(polls) <= 2 else []

    fake_page.elements["css=.spinner"] = spinners
    assert session.find(".spinner").none() is None


def test_element_condition_is_awaited_again_before_final_fetch(session, fake_page):
    fetches = []
    fake_page.elements["css=.item"] = lambda: fetches.append(1) or [FakeHandle()]

    session.find(".item").one()
    # first wait, stability re-check, final fetch
    assert len(fetches) == 3


def test_stability_recheck_can_be_disabled(fake_page):
    session = WebSession(WebTestOptions(timeout_in_seconds=0.2, poll_interval_seconds=0.01, stability_rechecks=0))
    session._page = fake_page
    fetches = []
    fake_page.elements["css=.item"] = lambda: fetches.append(1) or [FakeHandle()]

    session.find(".item").one()
    assert len(fetches) == 2


def test_change_after_wait_is_a_selection_error(session, fake_page):
    fetches = []

    def flaky():
        fetches.append(1)
        return [FakeHandle()] if len(fetches) <= 2 else []

    fake_page.elements["css=.item"] = flaky

    with pytest.raises(SelectionError) as error:
        session.find(".item").one()

    assert not isinstance(error.value, TimeoutError)
    assert error.value.diagnostics.total == 0
    assert str(error.value) == (
        "Waited for 1  elements but was: 0 total elements (0 displayed and 0 hidden)"
    )


def test_errors_inside_a_poll_tick_are_polled_past(session, fake_page):
    fetches = []

    def stale_then_fine():
        fetches.append(1)
        if len(fetches) == 1:
            raise RuntimeError("Element is not attached to the DOM")
        return [FakeHandle()]

    fake_page.elements["css=.item"] = stale_then_fine
    assert session.find(".item").one() is not None


def test_repeated_query_returns_fresh_equivalent_elements(session, items):
    first = session.find(".item").displayed().all(2)
    second = session.find(".item").displayed().all(2)

    assert [e.get_attribute("id") for e in first] == [e.get_attribute("id") for e in second]
    assert all(a is not b for a, b in zip(first, second))


def test_poll_interval_grows_with_backoff(fake_page, monkeypatch):
    sleeps = []
    monkeypatch.setattr(
        "webquery.wait_helpers.time",
        SimpleNamespace(monotonic=time.monotonic, sleep=sleeps.append),
    )
    late = FakeHandle("late")
    fetches = []

    def appears_on_fifth_fetch():
        fetches.append(1)
        return [late] if len(fetches) >= 5 else []

    fake_page.elements["css=.late"] = appears_on_fifth_fetch
    session = WebSession(
        WebTestOptions(
            timeout_in_seconds=5.0,
            poll_interval_seconds=0.01,
            poll_backoff_multiplier=2.0,
            poll_max_interval=0.04,
            stability_rechecks=0,
        )
    )
    session._page = fake_page

    assert session.find(".late").one().native is late
    assert sleeps == pytest.approx([0.01, 0.02, 0.04, 0.04])
