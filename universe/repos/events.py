"""Event repository backed by a document store."""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable

from pydantic import ValidationError

from universe.domain.errors import DecodeError, EventNotFoundError
from universe.domain.models import Event, UserProfile
from universe.repos.interfaces import EventRepository
from universe.services.suggestions import suggest_events
from universe.services.visibility import filter_visible
from universe.store.interfaces import Document, DocumentStore, Fields, document_path

logger = logging.getLogger(__name__)

EVENTS_COLLECTION = "events"


def event_to_document(event: Event) -> Fields:
    return event.model_dump(mode="json")


def document_to_event(doc: Document) -> Event:
    """Convert a stored document to an Event.

    Raises:
        DecodeError: If the document is missing or its fields are malformed.
    """
    if doc.data is None:
        raise DecodeError(doc.path, "document does not exist")
    data = dict(doc.data)
    data["id"] = data.get("id") or doc.id
    try:
        return Event.model_validate(data)
    except ValidationError as exc:
        logger.error("Error converting document %s to Event: %s", doc.path, exc)
        raise DecodeError(doc.path, str(exc)) from exc


class DocumentEventRepository(EventRepository):
    """Stores each event as one document under ``<collection>/<event id>``."""

    def __init__(self, store: DocumentStore, collection: str = EVENTS_COLLECTION) -> None:
        self._store = store
        self._collection = collection

    def _path(self, event_id: str) -> str:
        return document_path(self._collection, event_id)

    def _require(self, event_id: str) -> Document:
        try:
            path = self._path(event_id)
        except ValueError:
            raise EventNotFoundError(event_id) from None
        doc = self._store.get(path)
        if not doc.exists:
            raise EventNotFoundError(event_id)
        return doc

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def get_all_events(
        self, viewer_id: str | None = None, following: Iterable[str] | None = None
    ) -> list[Event]:
        events = [document_to_event(doc) for doc in self._store.query(self._collection)]
        if viewer_id is None:
            return events
        return filter_visible(events, viewer_id, following or ())

    def get_event(self, event_id: str) -> Event:
        return document_to_event(self._require(event_id))

    def add_event(self, event: Event) -> None:
        if not event.id.strip():
            raise ValueError("Event id must not be blank")
        self._store.set(self._path(event.id), event_to_document(event))

    def update_event(self, event_id: str, new_event: Event) -> None:
        self._require(event_id)
        stored = new_event.model_copy(update={"id": event_id})
        self._store.set(self._path(event_id), event_to_document(stored))

    def delete_event(self, event_id: str) -> None:
        self._store.delete(self._require(event_id).path)

    # ------------------------------------------------------------------
    # Discovery
    # ------------------------------------------------------------------

    def get_user_involved_events(self, uid: str) -> list[Event]:
        docs = self._store.query(
            self._collection,
            lambda data: data.get("creator") == uid or uid in (data.get("participants") or ()),
        )
        return [document_to_event(doc) for doc in docs]

    def get_suggested_events_for_user(self, user: UserProfile) -> list[Event]:
        return suggest_events(self.get_all_events(), user)

    # ------------------------------------------------------------------
    # Identifiers and AI imports
    # ------------------------------------------------------------------

    def get_new_id(self) -> str:
        return str(uuid.uuid4())

    def persist_ai_events(self, drafts: list[Event]) -> list[Event]:
        """Persist *drafts* all-or-nothing.

        Every draft gets a fresh id. If any write fails, the events already
        written by this call are deleted again and the original error is
        re-raised.
        """
        saved = [draft.model_copy(update={"id": self.get_new_id()}) for draft in drafts]
        written: list[str] = []
        try:
            for event in saved:
                path = self._path(event.id)
                self._store.set(path, event_to_document(event))
                written.append(path)
        except Exception:
            logger.error(
                "Persisting AI events failed after %d of %d; rolling back",
                len(written),
                len(saved),
            )
            for path in written:
                self._store.delete(path)
            raise
        return saved
