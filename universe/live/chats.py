"""Live last-message previews for chat lists."""

from __future__ import annotations

from operator import attrgetter

from universe.domain.models import Message
from universe.live.cache import ErrorCallback, LiveEntityCache, ValueCallback
from universe.repos.chats import CHATS_COLLECTION, document_to_last_message
from universe.store.interfaces import Cancelable, DocumentStore, document_path


def create_last_message_live_cache(
    store: DocumentStore, collection: str = CHATS_COLLECTION
) -> LiveEntityCache[str, Message]:
    """One chat-document listener per chat id, publishing its last message.

    A chat without messages, or one that does not exist, publishes None.
    """

    def open_feed(chat_id: str, on_value: ValueCallback, on_error: ErrorCallback) -> Cancelable:
        return store.add_change_listener(document_path(collection, chat_id), on_value, on_error)

    return LiveEntityCache(
        open_feed,
        document_to_last_message,
        name="chat-last-message",
        version=attrgetter("version"),
    )
