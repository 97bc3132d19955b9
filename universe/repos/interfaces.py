"""Repository interfaces exposed to the HTTP layer.

Repositories are swappable and return domain models.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from universe.domain.models import Chat, Event, Message, UserProfile


class EventRepository(ABC):
    """Interface for event persistence and discovery.

    Every list result keeps the insertion order of the backing store.
    """

    @abstractmethod
    def get_all_events(
        self, viewer_id: str | None = None, following: Iterable[str] | None = None
    ) -> list[Event]:
        """Return all events, or only those visible to *viewer_id* when one is given."""
        ...

    @abstractmethod
    def get_event(self, event_id: str) -> Event:
        """Return an event by ID.

        Raises:
            EventNotFoundError: If the event does not exist.
        """
        ...

    @abstractmethod
    def add_event(self, event: Event) -> None:
        """Store *event* under its id, overwriting any event with the same id."""
        ...

    @abstractmethod
    def update_event(self, event_id: str, new_event: Event) -> None:
        """Replace the event, keeping *event_id* as its id.

        Raises:
            EventNotFoundError: If the event does not exist.
        """
        ...

    @abstractmethod
    def delete_event(self, event_id: str) -> None:
        """Raises EventNotFoundError if the event does not exist."""
        ...

    @abstractmethod
    def get_user_involved_events(self, uid: str) -> list[Event]:
        """Return events created by *uid* or that *uid* participates in, private or not."""
        ...

    @abstractmethod
    def get_suggested_events_for_user(self, user: UserProfile) -> list[Event]:
        ...

    @abstractmethod
    def get_new_id(self) -> str:
        ...

    @abstractmethod
    def persist_ai_events(self, drafts: list[Event]) -> list[Event]:
        """Assign fresh ids to *drafts*, store them and return the stored events."""
        ...


class UserRepository(ABC):
    """Interface for user profiles and the follow graph."""

    @abstractmethod
    def get_all_users(self) -> list[UserProfile]:
        ...

    @abstractmethod
    def get_user(self, uid: str) -> UserProfile:
        """Raises UserNotFoundError if the user does not exist."""
        ...

    @abstractmethod
    def add_user(self, user: UserProfile) -> None:
        ...

    @abstractmethod
    def update_user(self, uid: str, new_user: UserProfile) -> None:
        """Raises UserNotFoundError if the user does not exist."""
        ...

    @abstractmethod
    def delete_user(self, uid: str) -> None:
        """Raises UserNotFoundError if the user does not exist."""
        ...

    @abstractmethod
    def is_username_unique(self, username: str) -> bool:
        ...

    @abstractmethod
    def follow_user(self, current_uid: str, target_uid: str) -> None:
        ...

    @abstractmethod
    def unfollow_user(self, current_uid: str, target_uid: str) -> None:
        ...


class ChatRepository(ABC):
    """Interface for event chats and their messages."""

    @abstractmethod
    def create_chat(self, chat_id: str, admin: str) -> Chat:
        """Create the chat, or reset it if *chat_id* is already in use."""
        ...

    @abstractmethod
    def load_chat(self, chat_id: str) -> Chat:
        """Raises ChatNotFoundError if the chat does not exist."""
        ...

    @abstractmethod
    def send_message(self, chat_id: str, message: Message) -> Message:
        """Store *message* under a fresh id and make it the chat's last message.

        Raises:
            ChatNotFoundError: If the chat does not exist.
            ValueError: If the message text is blank.
        """
        ...

    @abstractmethod
    def get_messages(self, chat_id: str) -> list[Message]:
        """Return the chat's messages, oldest first."""
        ...
