"""Service for generating events with an LLM and importing them."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timedelta

import dateparser

from universe.config import Settings
from universe.domain.models import SYSTEM_OPENAI_UID, Event, Location, UserProfile
from universe.domain.tags import Tag
from universe.repos.interfaces import EventRepository

logger = logging.getLogger(__name__)

_SYSTEM_PROMPT = """\
You are an event curator. Given a JSON description of a user, their location \
and the current date, propose realistic public events they could join. \
Respond with a JSON object of the form:

{
  "events": [
    {
      "title": "<short event title>",
      "description": "<one or two sentences>",
      "date": "<ISO-8601 local date and time, e.g. 2025-04-12T20:00>",
      "tags": ["<tag display name from the allowed list>", ...],
      "location": {"latitude": <float>, "longitude": <float>}
    }
  ]
}

Rules:
- Events must be public, casual and drop-in friendly: no classes, bookings, \
tickets or staff.
- Match the user's interests where the environment allows it; otherwise pick \
a related activity that is plausible in public space.
- Coordinates must lie within radiusKm of the given location.
- Dates must be between 1 hour and 60 days after currentDate.
- Only use tags from allowedTags.
- Respond with ONLY the JSON object, no other text.
"""

MAX_DAYS_AHEAD = 60


def build_user_prompt(
    user: UserProfile,
    location: Location,
    count: int,
    now: datetime,
    radius_km: float,
) -> str:
    """Serialise the request context sent as the user message."""
    return json.dumps(
        {
            "task": {"eventCount": count},
            "user": {
                "interests": sorted(tag.display_name for tag in user.tags),
                "country": user.country,
            },
            "context": {
                "latitude": location.latitude,
                "longitude": location.longitude,
                "radiusKm": radius_km,
                "currentDate": now.isoformat(timespec="minutes"),
            },
            "allowedTags": [tag.display_name for tag in Tag],
        }
    )


def _request_events(prompt: str, api_key: str | None, model: str) -> dict:
    """Call OpenAI and return the decoded JSON answer."""
    from openai import OpenAI

    client = OpenAI(api_key=api_key)
    response = client.chat.completions.create(
        model=model,
        messages=[
            {"role": "system", "content": _SYSTEM_PROMPT},
            {"role": "user", "content": prompt},
        ],
        temperature=0.7,
        response_format={"type": "json_object"},
    )
    return json.loads(response.choices[0].message.content)


def _parse_date(raw: object, now: datetime) -> datetime:
    """Parse an ISO timestamp, falling back to ``dateparser`` for loose phrasing."""
    if not isinstance(raw, str) or not raw.strip():
        raise ValueError("Event date is missing")
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        pass
    settings = {
        "PREFER_DATES_FROM": "future",
        "RELATIVE_BASE": now.replace(tzinfo=None),
        "RETURN_AS_TIMEZONE_AWARE": False,
    }
    result = dateparser.parse(raw, settings=settings)
    if result is None:
        raise ValueError(f"Invalid date format: {raw}")
    return result


def _parse_tags(raw: object) -> set[Tag]:
    tags: set[Tag] = set()
    for name in raw if isinstance(raw, list) else []:
        if not isinstance(name, str):
            continue
        tag = Tag.from_display_name(name)
        if tag is None:
            try:
                tag = Tag(name.strip().lower())
            except ValueError:
                continue
        tags.add(tag)
    return tags


def _to_event(item: object, now: datetime) -> Event:
    if not isinstance(item, dict):
        raise ValueError("Event entry is not an object")

    title = item.get("title")
    if not isinstance(title, str) or not title.strip():
        raise ValueError("Event title cannot be empty.")
    description = item.get("description")
    if not isinstance(description, str) or not description.strip():
        raise ValueError("Event description cannot be empty.")
    if item.get("location") is None:
        raise ValueError("Event location is missing.")
    location = Location.model_validate(item["location"])

    date = _parse_date(item.get("date"), now)
    reference = now
    if (date.tzinfo is None) != (now.tzinfo is None):
        reference = now.replace(tzinfo=date.tzinfo)
    if not reference <= date <= reference + timedelta(days=MAX_DAYS_AHEAD):
        raise ValueError(f"Event date out of range: {date.isoformat()}")

    return Event(
        title=title.strip(),
        description=description.strip(),
        date=date,
        tags=_parse_tags(item.get("tags")),
        creator=SYSTEM_OPENAI_UID,
        location=location,
    )


def parse_generated_events(payload: dict, now: datetime) -> list[Event]:
    """Turn the model's JSON answer into event drafts.

    Entries that fail validation are logged and skipped; a payload without an
    ``events`` list yields no drafts. Drafts have a blank id and no
    participants.
    """
    items = payload.get("events") if isinstance(payload, dict) else None
    if not isinstance(items, list):
        logger.warning("Generated payload has no 'events' array")
        return []

    drafts: list[Event] = []
    for index, item in enumerate(items):
        try:
            drafts.append(_to_event(item, now))
        except ValueError as exc:
            logger.warning("Skipping generated event #%d: %s", index, exc)
    logger.info("Parsed %d of %d generated events", len(drafts), len(items))
    return drafts


def generate_events_for_user(
    user: UserProfile,
    repo: EventRepository,
    location: Location,
    now: datetime,
    settings: Settings,
    count: int | None = None,
) -> list[Event]:
    """Ask the model for events suited to *user* and persist the valid ones.

    Returns the stored events, ids assigned.
    """
    prompt = build_user_prompt(
        user,
        location,
        count or settings.ai_event_count,
        now,
        settings.ai_search_radius_km,
    )
    payload = _request_events(prompt, settings.openai_api_key, settings.openai_model)
    drafts = parse_generated_events(payload, now)
    if not drafts:
        return []
    return repo.persist_ai_events(drafts)
