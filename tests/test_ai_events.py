"""Tests for AI event generation.

The OpenAI call is always patched out; nothing here reaches the network.
"""

from __future__ import annotations

import json
from datetime import date, datetime
from unittest.mock import patch

from universe.config import Settings
from universe.domain.models import SYSTEM_OPENAI_UID, Location, UserProfile
from universe.domain.tags import Tag
from universe.repos.events import DocumentEventRepository
from universe.services.ai_events import (
    build_user_prompt,
    generate_events_for_user,
    parse_generated_events,
)
from universe.store.memory import InMemoryDocumentStore

_NOW = datetime(2025, 6, 1, 12, 0)
_LAUSANNE = Location(latitude=46.5196535, longitude=6.6322734)


def _make_user() -> UserProfile:
    return UserProfile(
        uid="U1",
        username="jdoe",
        country="Switzerland",
        date_of_birth=date(1999, 1, 1),
        tags={Tag.ROCK, Tag.HIKING},
    )


def _item(**overrides) -> dict:
    item = {
        "title": "Open-air jam session",
        "description": "Bring an instrument and play along by the lake.",
        "date": "2025-06-03T18:00",
        "tags": ["Rock", "Jazz"],
        "location": {"latitude": 46.51, "longitude": 6.63},
    }
    item.update(overrides)
    return item


# ---------------------------------------------------------------------------
# Prompt
# ---------------------------------------------------------------------------


def test_prompt_carries_interests_and_context():
    prompt = json.loads(build_user_prompt(_make_user(), _LAUSANNE, 3, _NOW, radius_km=5.0))

    assert prompt["task"] == {"eventCount": 3}
    assert prompt["user"]["interests"] == ["Hiking", "Rock"]
    assert prompt["user"]["country"] == "Switzerland"
    assert prompt["context"]["currentDate"] == "2025-06-01T12:00"
    assert prompt["context"]["radiusKm"] == 5.0
    assert "Table tennis" in prompt["allowedTags"]


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def test_valid_item_becomes_draft():
    (event,) = parse_generated_events({"events": [_item()]}, _NOW)

    assert event.id == ""
    assert event.title == "Open-air jam session"
    assert event.date == datetime(2025, 6, 3, 18, 0)
    assert event.tags == {Tag.ROCK, Tag.JAZZ}
    assert event.creator == SYSTEM_OPENAI_UID
    assert event.participants == set()
    assert not event.is_private


def test_unknown_tags_are_ignored_and_values_accepted():
    (event,) = parse_generated_events(
        {"events": [_item(tags=["Underwater basket weaving", "hiking", 42])]}, _NOW
    )

    assert event.tags == {Tag.HIKING}


def test_loose_date_phrasing_is_resolved_against_now():
    (event,) = parse_generated_events({"events": [_item(date="tomorrow at 6pm")]}, _NOW)

    assert event.date == datetime(2025, 6, 2, 18, 0)


def test_invalid_items_are_skipped():
    payload = {
        "events": [
            _item(title="   "),
            _item(description=""),
            _item(location=None),
            _item(location={"latitude": 120.0, "longitude": 6.6}),
            _item(date="2024-01-01T10:00"),
            _item(date="2025-09-30T10:00"),
            _item(date=None),
            "not an object",
            _item(title="Sunset hike"),
        ]
    }

    events = parse_generated_events(payload, _NOW)

    assert [e.title for e in events] == ["Sunset hike"]


def test_payload_without_events_array_yields_nothing():
    assert parse_generated_events({"answer": "sorry"}, _NOW) == []
    assert parse_generated_events({"events": "nope"}, _NOW) == []


# ---------------------------------------------------------------------------
# Generation
# ---------------------------------------------------------------------------


def test_generated_events_are_persisted():
    repo = DocumentEventRepository(InMemoryDocumentStore())
    settings = Settings(openai_api_key="sk-test", ai_event_count=2)
    payload = {"events": [_item(), _item(title="Trail walk", tags=["Hiking"])]}

    with patch(
        "universe.services.ai_events._request_events", return_value=payload
    ) as request:
        events = generate_events_for_user(_make_user(), repo, _LAUSANNE, _NOW, settings)

    prompt, api_key, model = request.call_args.args
    assert json.loads(prompt)["task"] == {"eventCount": 2}
    assert api_key == "sk-test"
    assert model == settings.openai_model

    assert [e.title for e in events] == ["Open-air jam session", "Trail walk"]
    assert all(e.id for e in events)
    assert all(e.creator == SYSTEM_OPENAI_UID for e in events)
    assert repo.get_all_events() == events


def test_explicit_count_overrides_setting():
    repo = DocumentEventRepository(InMemoryDocumentStore())

    with patch(
        "universe.services.ai_events._request_events", return_value={"events": []}
    ) as request:
        events = generate_events_for_user(
            _make_user(), repo, _LAUSANNE, _NOW, Settings(), count=7
        )

    assert json.loads(request.call_args.args[0])["task"] == {"eventCount": 7}
    assert events == []
    assert repo.get_all_events() == []
