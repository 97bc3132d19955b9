"""Tag-based event suggestions."""

from __future__ import annotations

from collections.abc import Iterable

from universe.domain.models import Event, UserProfile
from universe.services.visibility import is_visible


def suggest_events(events: Iterable[Event], user: UserProfile) -> list[Event]:
    """Return the events visible to *user* that share at least one tag with them.

    Order follows *events*. Being the creator only lifts the privacy check;
    the tag overlap is still required, so untagged events and users without
    tags never match.
    """
    if not user.tags:
        return []
    return [
        event
        for event in events
        if is_visible(event, user.uid, user.following) and not event.tags.isdisjoint(user.tags)
    ]
