"""Viewer-dependent event visibility."""

from __future__ import annotations

from collections.abc import Collection, Iterable

from universe.domain.models import Event


def is_visible(event: Event, viewer_id: str, following: Collection[str]) -> bool:
    """Return whether *viewer_id* may see *event*.

    Public events are visible to everyone. A private event is visible to its
    creator and to viewers who follow the creator.
    """
    return (
        not event.is_private
        or viewer_id == event.creator
        or event.creator in following
    )


def filter_visible(
    events: Iterable[Event], viewer_id: str, following: Iterable[str]
) -> list[Event]:
    """Return the events visible to *viewer_id*, keeping their order."""
    following_set = frozenset(following)
    return [event for event in events if is_visible(event, viewer_id, following_set)]
