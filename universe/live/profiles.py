"""Live user profiles over the document store's change listeners."""

from __future__ import annotations

from datetime import date
from operator import attrgetter

from universe.domain.models import SYSTEM_OPENAI_UID, UserProfile
from universe.live.cache import ErrorCallback, LiveEntityCache, ValueCallback
from universe.repos.users import USERS_COLLECTION, document_to_user_profile
from universe.store.interfaces import Cancelable, Document, DocumentStore, document_path

SYSTEM_OPENAI_PROFILE = UserProfile(
    uid=SYSTEM_OPENAI_UID,
    username="OpenAI",
    first_name="OpenAI",
    last_name="",
    country="",
    description="Events suggested by the assistant",
    date_of_birth=date(2015, 12, 11),
)


class _NoFeed:
    def cancel(self) -> None:
        pass


def _system_feed(path: str, on_value: ValueCallback) -> Cancelable:
    on_value(Document(path=path, data=SYSTEM_OPENAI_PROFILE.model_dump(mode="json")))
    return _NoFeed()


def create_user_live_cache(
    store: DocumentStore, collection: str = USERS_COLLECTION
) -> LiveEntityCache[str, UserProfile]:
    """Build the cache that keeps one document listener per user id.

    A deleted or missing profile is published as None. Snapshots older than
    the last one delivered are dropped. The assistant's system uid never
    touches the store.
    """

    def open_feed(uid: str, on_value: ValueCallback, on_error: ErrorCallback) -> Cancelable:
        path = document_path(collection, uid)
        if uid == SYSTEM_OPENAI_UID:
            return _system_feed(path, on_value)
        return store.add_change_listener(path, on_value, on_error)

    return LiveEntityCache(
        open_feed,
        document_to_user_profile,
        name="user-profiles",
        version=attrgetter("version"),
    )
