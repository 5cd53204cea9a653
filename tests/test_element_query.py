"""Unit tests for ElementQuery."""

import time

import pytest

from selenium_query.core.exceptions import NoSuchElementError, ProtocolError
from selenium_query.core.session_manager import BrowserSession
from selenium_query.query.matching import StringMatch
from selenium_query.query.poller import ElementPoller
from selenium_query.query.selectors import Selector

from fakes import FakeNode, FakeProtocolClient

PRIMARY = Selector.css(".primary")
FALLBACK = Selector.id("fallback")


def ids(handles):
    return [h.reference_id for h in handles]


class TestFirst:
    """Tests for first() and branch priority."""

    def test_first_branch_wins(self, session, fake_client):
        """Should return the earliest declared branch's match even if later ones match too."""
        fake_client.add(PRIMARY, FakeNode("a1"))
        fake_client.add(FALLBACK, FakeNode("b1"))

        assert session.query(PRIMARY).or_(FALLBACK).first().reference_id == "a1"
        assert session.query(FALLBACK).or_(PRIMARY).first().reference_id == "b1"

    def test_later_branches_not_queried_after_match(self, session, fake_client):
        fake_client.add(PRIMARY, FakeNode("a1"))
        fake_client.add(FALLBACK, FakeNode("b1"))

        session.query(PRIMARY).or_(FALLBACK).first()

        assert fake_client.calls == [("find_elements", str(PRIMARY))]

    def test_falls_through_to_later_branch(self, session, fake_client):
        fake_client.add(FALLBACK, FakeNode("b1"))

        assert session.query(PRIMARY).or_(FALLBACK).first().reference_id == "b1"

    def test_branches_evaluated_in_declaration_order(self, session, fake_client):
        """Should issue remote lookups in branch order within each attempt."""
        fake_client.add(FALLBACK, FakeNode("b1", appears_at=0.5))
        third = Selector.xpath("//button")

        session.query(PRIMARY).or_(third).or_(FALLBACK).first()

        lookups = [detail for name, detail in fake_client.calls if name == "find_elements"]
        assert lookups == [str(PRIMARY), str(third), str(FALLBACK)] * 2

    def test_filter_applies_to_last_branch(self, session, fake_client):
        fake_client.add(PRIMARY, FakeNode("a1", text="Stop"))
        fake_client.add(FALLBACK, FakeNode("b1", text="Stop"))

        query = session.query(PRIMARY).or_(FALLBACK).with_text("Go")

        assert query.first().reference_id == "a1"

    def test_retries_until_element_appears(self, session, fake_client, clock):
        fake_client.add(PRIMARY, FakeNode("a1", appears_at=1.2))

        assert session.query(PRIMARY).first().reference_id == "a1"
        assert clock.now == pytest.approx(1.5)

    def test_timeout_bound(self, session, fake_client, clock):
        """Should fail no earlier than the timeout and no later than timeout + interval."""
        with pytest.raises(NoSuchElementError) as exc:
            session.query(PRIMARY).first()

        assert 2.0 <= clock.now <= 2.5
        assert fake_client.command_count("find_elements") == 5
        assert exc.value.timeout_seconds == 2.0
        assert "css='.primary'" in str(exc.value)

    def test_desc_names_element_in_error(self, session):
        with pytest.raises(NoSuchElementError) as exc:
            session.query(PRIMARY).desc("save button").nowait().first()

        assert "save button" in str(exc.value)

    def test_nowait_single_attempt(self, session, fake_client, clock):
        assert session.query(PRIMARY).nowait().first_opt() is None
        assert fake_client.command_count("find_elements") == 1
        assert clock.now == 0

    def test_custom_poller(self, session, fake_client, clock):
        query = session.query(PRIMARY).with_poller(ElementPoller.num_tries_with_interval(3, 0.1))

        assert query.first_opt() is None
        assert fake_client.command_count("find_elements") == 3

    def test_protocol_error_is_not_retried(self, session, fake_client, clock):
        fake_client.fail("find_elements", ProtocolError("connection reset", "find_elements"))

        with pytest.raises(ProtocolError):
            session.query(PRIMARY).first()

        assert fake_client.command_count("find_elements") == 1
        assert clock.sleeps == []

    def test_scoped_query(self, session, fake_client):
        form = FakeNode("form")
        fake_client.add(Selector.tag("form"), form)
        fake_client.add(Selector.tag("input"), FakeNode("f1"), scope=form)

        handle = session.query(Selector.tag("input"), scope=form.handle).nowait().first()

        assert handle.reference_id == "f1"

    def test_example_scenario_fake_clock(self, session, fake_client, clock):
        fake_client.add(
            Selector.css("button.submit"),
            FakeNode("other", text="Cancel"),
            FakeNode("go", text="Go", appears_at=0.25),
        )

        handle = (
            session.query(Selector.css("button.submit"))
            .with_text("Go")
            .wait(2, 0.1)
            .first()
        )

        assert handle.reference_id == "go"
        assert clock.now == pytest.approx(0.3)


def test_example_scenario_real_time(bridge):
    """Button appearing after 0.3s is found between 0.3s and 0.4s (plus scheduling slack)."""
    client = FakeProtocolClient(time)
    start = time.monotonic()
    client.add(Selector.css("button.submit"), FakeNode("go", text="Go", appears_at=start + 0.3))
    session = BrowserSession(client, bridge=bridge)

    handle = (
        session.query(Selector.css("button.submit"))
        .with_text("Go")
        .wait(2, 0.1)
        .first()
    )
    elapsed = time.monotonic() - start

    assert handle.reference_id == "go"
    assert 0.3 <= elapsed < 0.45


class TestAll:
    """Tests for all() and all_required()."""

    def test_all_dedupes_across_branches(self, session, fake_client):
        """Should return each distinct handle once, in branch order."""
        shared = FakeNode("n2")
        fake_client.add(PRIMARY, FakeNode("n1"), shared)
        fake_client.add(FALLBACK, shared, FakeNode("n3"))

        assert ids(session.query(PRIMARY).or_(FALLBACK).all()) == ["n1", "n2", "n3"]

    def test_all_returns_empty_without_raising(self, session, fake_client, clock):
        """Should return [] after the timeout instead of failing."""
        assert session.query(PRIMARY).all() == []
        assert clock.now >= 2.0

    def test_all_returns_first_non_empty_round(self, session, fake_client, clock):
        fake_client.add(PRIMARY, FakeNode("n1", appears_at=0.5), FakeNode("n2", appears_at=1.0))

        assert ids(session.query(PRIMARY).all()) == ["n1"]
        assert clock.now == pytest.approx(0.5)

    def test_all_required_empty_raises(self, session):
        with pytest.raises(NoSuchElementError):
            session.query(PRIMARY).all_required()

    def test_all_required_returns_immediately(self, session, fake_client, clock):
        fake_client.add(PRIMARY, FakeNode("n1"))

        assert ids(session.query(PRIMARY).all_required()) == ["n1"]
        assert clock.sleeps == []
        assert fake_client.command_count("find_elements") == 1


class TestExistence:
    """Tests for exists() and not_exists()."""

    def test_exists(self, session, fake_client):
        fake_client.add(PRIMARY, FakeNode("a1", appears_at=1.0))

        assert session.query(PRIMARY).exists() is True
        assert session.query(FALLBACK).exists() is False

    def test_not_exists_waits_for_removal(self, session, fake_client, clock):
        fake_client.add(PRIMARY, FakeNode("a1", removed_at=1.0))

        assert session.query(PRIMARY).not_exists() is True
        assert clock.now == pytest.approx(1.0)

    def test_not_exists_false_when_element_stays(self, session, fake_client):
        fake_client.add(PRIMARY, FakeNode("a1"))

        assert session.query(PRIMARY).not_exists() is False


class TestBuilder:
    """Tests for query immutability and descriptions."""

    def test_builders_return_new_queries(self, session):
        base = session.query(PRIMARY)
        extended = base.or_(FALLBACK).and_displayed()

        assert len(base.branches) == 1
        assert len(extended.branches) == 2
        assert extended.branches[0].filters == ()
        assert len(extended.branches[1].filters) == 1

    def test_description(self, session):
        query = session.query(PRIMARY).or_(FALLBACK).and_enabled()

        assert query.description == "css='.primary' or id='fallback' [element is enabled]"


class TestMappingFilters:
    """Tests for property and css mapping filters."""

    def test_with_properties(self, session, fake_client):
        fake_client.add(
            PRIMARY,
            FakeNode("a1", properties={"value": "x", "checked": False}),
            FakeNode("a2", properties={"value": "x", "checked": True}),
        )

        query = session.query(PRIMARY).with_properties({"value": "x", "checked": "true"})

        assert ids(query.nowait().all()) == ["a2"]

    def test_with_css_properties(self, session, fake_client):
        fake_client.add(
            PRIMARY,
            FakeNode("a1", css={"visibility": "hidden", "cursor": "pointer"}),
            FakeNode("a2", css={"visibility": "visible", "cursor": "pointer"}),
        )

        query = session.query(PRIMARY).with_css_properties(
            {"visibility": "visible", "cursor": "pointer"}
        )

        assert query.nowait().first().reference_id == "a2"

    def test_with_tag_string_match(self, session, fake_client):
        fake_client.add(PRIMARY, FakeNode("a1", tag="div"), FakeNode("a2", tag="button"))

        query = session.query(PRIMARY).with_tag(StringMatch("BUTTON"))

        assert query.nowait().first().reference_id == "a2"
