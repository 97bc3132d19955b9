"""Tests for tag-based event suggestions."""

from __future__ import annotations

from datetime import date, datetime

from universe.domain.models import Event, UserProfile
from universe.domain.tags import Tag
from universe.repos.events import DocumentEventRepository
from universe.services.suggestions import suggest_events
from universe.store.memory import InMemoryDocumentStore

_DATE = datetime(2025, 4, 12, 20, 0)


def _make_event(event_id: str, tags: set[Tag], creator: str = "C1", **overrides) -> Event:
    return Event(
        id=event_id,
        title=f"Event {event_id}",
        date=_DATE,
        tags=tags,
        creator=creator,
        **overrides,
    )


def _make_user(uid: str = "U1", tags: set[Tag] | None = None, **overrides) -> UserProfile:
    defaults = dict(
        uid=uid,
        username=uid.lower(),
        first_name="Test",
        last_name="User",
        country="Switzerland",
        date_of_birth=date(1999, 1, 1),
        tags=tags if tags is not None else set(),
    )
    defaults.update(overrides)
    return UserProfile(**defaults)


_MUSIC_FAN_TAGS = {Tag.ROCK, Tag.POP, Tag.METAL, Tag.JAZZ, Tag.BLUES, Tag.COUNTRY}


# ---------------------------------------------------------------------------
# Matching
# ---------------------------------------------------------------------------


def test_events_sharing_a_tag_are_suggested():
    e_a = _make_event("eA", {Tag.ROCK, Tag.POP})
    e_b = _make_event("eB", {Tag.METAL, Tag.JAZZ})
    e_c = _make_event("eC", {Tag.HIKING})
    user = _make_user(tags=_MUSIC_FAN_TAGS)

    assert suggest_events([e_a, e_b, e_c], user) == [e_a, e_b]


def test_disjoint_tags_are_not_suggested():
    e_b = _make_event("eB", {Tag.METAL, Tag.JAZZ})
    user = _make_user(tags={Tag.ROCK, Tag.POP})

    assert suggest_events([e_b], user) == []


def test_user_without_tags_gets_nothing():
    events = [_make_event("eA", {Tag.ROCK}), _make_event("eB", {Tag.CHESS})]

    assert suggest_events(events, _make_user(tags=set())) == []


def test_untagged_event_is_never_suggested():
    user = _make_user(tags=_MUSIC_FAN_TAGS)

    assert suggest_events([_make_event("eA", set())], user) == []


def test_suggestions_keep_input_order():
    events = [_make_event(str(i), {Tag.JAZZ}) for i in range(5)]
    user = _make_user(tags={Tag.JAZZ})

    assert [e.id for e in suggest_events(events, user)] == ["0", "1", "2", "3", "4"]


# ---------------------------------------------------------------------------
# Visibility
# ---------------------------------------------------------------------------


def test_private_event_suggested_to_follower():
    private = _make_event("eP", {Tag.ROCK}, is_private=True)
    user = _make_user(tags={Tag.ROCK}, following={"C1"})

    assert suggest_events([private], user) == [private]


def test_private_event_not_suggested_to_stranger():
    private = _make_event("eP", {Tag.ROCK}, is_private=True)
    user = _make_user(tags={Tag.ROCK})

    assert suggest_events([private], user) == []


def test_creator_still_needs_a_shared_tag():
    own = _make_event("eP", {Tag.HIKING}, creator="U1", is_private=True)
    user = _make_user(tags={Tag.ROCK})

    assert suggest_events([own], user) == []


def test_creator_sees_own_private_event_with_shared_tag():
    own = _make_event("eP", {Tag.ROCK}, creator="U1", is_private=True)
    user = _make_user(tags={Tag.ROCK})

    assert suggest_events([own], user) == [own]


def test_repository_suggestions_read_all_stored_events():
    repo = DocumentEventRepository(InMemoryDocumentStore())
    e_a = _make_event("eA", {Tag.ROCK})
    e_b = _make_event("eB", {Tag.HIKING})
    repo.add_event(e_a)
    repo.add_event(e_b)

    assert repo.get_suggested_events_for_user(_make_user(tags={Tag.ROCK})) == [e_a]
