"""Tests for viewer-dependent event visibility."""

from __future__ import annotations

from datetime import datetime

import pytest

from universe.domain.models import Event
from universe.repos.events import DocumentEventRepository
from universe.services.visibility import filter_visible, is_visible
from universe.store.memory import InMemoryDocumentStore

_DATE = datetime(2025, 4, 12, 20, 0)


def _make_event(event_id: str, creator: str = "C1", is_private: bool = False) -> Event:
    return Event(
        id=event_id,
        title=f"Event {event_id}",
        date=_DATE,
        creator=creator,
        is_private=is_private,
    )


@pytest.fixture()
def public_event() -> Event:
    return _make_event("E1")


@pytest.fixture()
def private_event() -> Event:
    return _make_event("E2", is_private=True)


# ---------------------------------------------------------------------------
# Single events
# ---------------------------------------------------------------------------


def test_public_event_visible_to_anyone(public_event):
    assert is_visible(public_event, "S1", following=())


def test_private_event_hidden_from_stranger(private_event):
    assert not is_visible(private_event, "S1", following=())


def test_private_event_hidden_when_following_someone_else(private_event):
    assert not is_visible(private_event, "S1", following={"C2", "C3"})


def test_private_event_visible_to_follower(private_event):
    assert is_visible(private_event, "F1", following={"C1"})


def test_private_event_visible_to_creator(private_event):
    assert is_visible(private_event, "C1", following=())


# ---------------------------------------------------------------------------
# Lists
# ---------------------------------------------------------------------------


def test_filter_visible_stranger_sees_public_only(public_event, private_event):
    result = filter_visible([public_event, private_event], "S1", [])

    assert result == [public_event]


def test_filter_visible_follower_sees_both_in_order(public_event, private_event):
    result = filter_visible([private_event, public_event], "F1", ["C1"])

    assert result == [private_event, public_event]


def test_filter_visible_accepts_generator_of_following(private_event):
    following = (uid for uid in ["X", "C1"])

    assert filter_visible([private_event], "F1", following) == [private_event]


def test_repository_applies_visibility_for_viewer(public_event, private_event):
    repo = DocumentEventRepository(InMemoryDocumentStore())
    repo.add_event(public_event)
    repo.add_event(private_event)

    assert repo.get_all_events() == [public_event, private_event]
    assert repo.get_all_events("S1", []) == [public_event]
    assert repo.get_all_events("F1", ["C1"]) == [public_event, private_event]
    assert repo.get_all_events("C1") == [public_event, private_event]
