"""Chat repository backed by a document store.

A chat lives at ``chats/<chat id>`` and keeps a copy of its last message;
the messages themselves live in the ``chats/<chat id>/messages`` collection.
"""

from __future__ import annotations

import logging
import uuid

from pydantic import ValidationError

from universe.domain.errors import ChatNotFoundError, DecodeError
from universe.domain.models import Chat, Message
from universe.repos.interfaces import ChatRepository
from universe.store.interfaces import Document, DocumentStore, document_path

logger = logging.getLogger(__name__)

CHATS_COLLECTION = "chats"


def messages_collection(chat_path: str) -> str:
    return f"{chat_path}/messages"


def document_to_chat(doc: Document) -> Chat | None:
    """Convert a chat document, returning None when it does not exist.

    Raises:
        DecodeError: If a field, including the embedded last message, is malformed.
    """
    if doc.data is None:
        return None
    data = dict(doc.data)
    data["chat_id"] = data.get("chat_id") or doc.id
    try:
        return Chat.model_validate(data)
    except ValidationError as exc:
        logger.error("Error converting document %s to Chat: %s", doc.path, exc)
        raise DecodeError(doc.path, str(exc)) from exc


def document_to_last_message(doc: Document) -> Message | None:
    chat = document_to_chat(doc)
    return chat.last_message if chat is not None else None


def document_to_message(doc: Document) -> Message:
    data = dict(doc.data or {})
    data["message_id"] = data.get("message_id") or doc.id
    try:
        return Message.model_validate(data)
    except ValidationError as exc:
        logger.error("Error converting document %s to Message: %s", doc.path, exc)
        raise DecodeError(doc.path, str(exc)) from exc


class DocumentChatRepository(ChatRepository):
    def __init__(self, store: DocumentStore, collection: str = CHATS_COLLECTION) -> None:
        self._store = store
        self._collection = collection

    def _path(self, chat_id: str) -> str:
        try:
            return document_path(self._collection, chat_id)
        except ValueError:
            raise ChatNotFoundError(chat_id) from None

    def _require(self, chat_id: str) -> Document:
        doc = self._store.get(self._path(chat_id))
        if not doc.exists:
            raise ChatNotFoundError(chat_id)
        return doc

    def create_chat(self, chat_id: str, admin: str) -> Chat:
        if not chat_id.strip():
            raise ValueError("Chat id must not be blank")
        chat = Chat(chat_id=chat_id, admin=admin)
        self._store.set(self._path(chat_id), chat.model_dump(mode="json"))
        logger.info("Created chat %s for %s", chat_id, admin)
        return chat

    def load_chat(self, chat_id: str) -> Chat:
        return document_to_chat(self._require(chat_id))

    def send_message(self, chat_id: str, message: Message) -> Message:
        if not message.message.strip():
            raise ValueError("Message must not be blank")
        chat_doc = self._require(chat_id)
        chat = document_to_chat(chat_doc)

        sent = message.model_copy(update={"message_id": str(uuid.uuid4())})
        fields = sent.model_dump(mode="json")
        self._store.set(
            document_path(messages_collection(chat_doc.path), sent.message_id), fields
        )
        updated = chat.model_copy(update={"last_message": sent})
        self._store.set(chat_doc.path, updated.model_dump(mode="json"))
        return sent

    def get_messages(self, chat_id: str) -> list[Message]:
        chat_doc = self._require(chat_id)
        messages = [
            document_to_message(doc)
            for doc in self._store.query(messages_collection(chat_doc.path))
        ]
        return sorted(messages, key=lambda m: m.timestamp)
